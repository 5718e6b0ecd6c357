"""Tests for environment configuration."""

import pytest

from smart_wallet_client.config import SmartWalletConfig
from smart_wallet_client.constants import BASE_URL, WS_URL
from smart_wallet_client.exceptions import ConfigurationError


ENV_VARS = [
    "PUBLIC_API_KEY",
    "PRIVATE_KEY",
    "FUSE_API_BASE_URL",
    "FUSE_WS_URL",
    "FUSE_HTTP_TIMEOUT",
    "FUSE_CREATION_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestFromEnv:
    """Tests for SmartWalletConfig.from_env."""

    def test_defaults(self, monkeypatch, api_key, private_key):
        monkeypatch.setenv("PUBLIC_API_KEY", api_key)
        monkeypatch.setenv("PRIVATE_KEY", private_key)

        config = SmartWalletConfig.from_env(dotenv=False)

        assert config.api_key == api_key
        assert config.private_key == private_key
        assert config.api_base_url == BASE_URL
        assert config.ws_url == WS_URL
        assert config.http_timeout == 30.0
        assert config.creation_timeout is None

    def test_overrides(self, monkeypatch, api_key, private_key):
        monkeypatch.setenv("PUBLIC_API_KEY", api_key)
        monkeypatch.setenv("PRIVATE_KEY", private_key)
        monkeypatch.setenv("FUSE_API_BASE_URL", "https://staging.fuse.io/")
        monkeypatch.setenv("FUSE_WS_URL", "wss://ws.staging/connection/websocket")
        monkeypatch.setenv("FUSE_HTTP_TIMEOUT", "5")
        monkeypatch.setenv("FUSE_CREATION_TIMEOUT", "120.5")

        config = SmartWalletConfig.from_env(dotenv=False)

        assert config.api_base_url == "https://staging.fuse.io/"
        assert config.ws_url == "wss://ws.staging/connection/websocket"
        assert config.http_timeout == 5.0
        assert config.creation_timeout == 120.5

    def test_missing_variables(self):
        with pytest.raises(ConfigurationError, match="PUBLIC_API_KEY, PRIVATE_KEY"):
            SmartWalletConfig.from_env(dotenv=False)

    @pytest.mark.parametrize("value", ["soon", "0", "-3"])
    def test_invalid_timeout(self, monkeypatch, api_key, private_key, value):
        monkeypatch.setenv("PUBLIC_API_KEY", api_key)
        monkeypatch.setenv("PRIVATE_KEY", private_key)
        monkeypatch.setenv("FUSE_CREATION_TIMEOUT", value)

        with pytest.raises(ConfigurationError, match="FUSE_CREATION_TIMEOUT"):
            SmartWalletConfig.from_env(dotenv=False)

    def test_dotenv_file(self, monkeypatch, tmp_path, api_key, private_key):
        # registered so teardown removes what load_dotenv sets
        for name in ("PUBLIC_API_KEY", "PRIVATE_KEY"):
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)
        (tmp_path / ".env").write_text(f"PUBLIC_API_KEY={api_key}\nPRIVATE_KEY={private_key}\n")
        monkeypatch.chdir(tmp_path)

        config = SmartWalletConfig.from_env()

        assert config.api_key == api_key
        assert config.private_key == private_key

    def test_repr_hides_private_key(self, api_key, private_key):
        config = SmartWalletConfig(api_key=api_key, private_key=private_key)
        assert private_key not in repr(config)
