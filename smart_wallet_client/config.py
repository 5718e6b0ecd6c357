"""
Configuration loaded from the process environment.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from smart_wallet_client.constants import BASE_URL, WS_URL
from smart_wallet_client.exceptions import ConfigurationError


@dataclass(frozen=True)
class SmartWalletConfig:
    """Credentials and endpoints for one run."""

    api_key: str
    private_key: str = field(repr=False)
    api_base_url: str = BASE_URL
    ws_url: str = WS_URL
    http_timeout: float = 30.0
    creation_timeout: Optional[float] = None  # None waits indefinitely

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "SmartWalletConfig":
        """Build the configuration from environment variables.

        Reads PUBLIC_API_KEY and PRIVATE_KEY (required), and optionally
        FUSE_API_BASE_URL, FUSE_WS_URL, FUSE_HTTP_TIMEOUT and
        FUSE_CREATION_TIMEOUT.

        Args:
            dotenv: Load a ``.env`` file first, without overriding variables
                already set.

        Raises:
            ConfigurationError: If a required variable is missing or a number
                does not parse.
        """
        if dotenv:
            from dotenv import find_dotenv, load_dotenv

            load_dotenv(find_dotenv(usecwd=True))

        api_key = os.environ.get("PUBLIC_API_KEY")
        private_key = os.environ.get("PRIVATE_KEY")
        missing = [
            name
            for name, value in (("PUBLIC_API_KEY", api_key), ("PRIVATE_KEY", private_key))
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing environment variables: {', '.join(missing)}")

        return cls(
            api_key=api_key,
            private_key=private_key,
            api_base_url=os.environ.get("FUSE_API_BASE_URL") or BASE_URL,
            ws_url=os.environ.get("FUSE_WS_URL") or WS_URL,
            http_timeout=_parse_seconds("FUSE_HTTP_TIMEOUT", 30.0),
            creation_timeout=_parse_seconds("FUSE_CREATION_TIMEOUT", None),
        )


def _parse_seconds(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number of seconds, got {raw!r}") from e
    if not value > 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value
