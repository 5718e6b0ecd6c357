"""
Request credentials for the smart wallets API.

Every request carries the public API key as a query parameter. After the auth
handshake, requests also carry the JWT as a bearer header. Credentials live in
an immutable ``RequestContext`` that is handed to each call.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

import jwt

from smart_wallet_client.constants import API_KEY_PARAM
from smart_wallet_client.exceptions import AuthenticationError


def decode_token_claims(token: str) -> Dict[str, Any]:
    """Decode JWT claims without verifying the signature.

    Args:
        token: The JWT issued by the auth endpoint.

    Returns:
        The claims dictionary.

    Raises:
        AuthenticationError: If the token cannot be decoded.
    """
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        raise AuthenticationError(f"Malformed auth token: {e}") from e


def decode_token_subject(token: str) -> str:
    """Get the ``sub`` claim of a JWT.

    Raises:
        AuthenticationError: If the token is malformed or has no subject.
    """
    subject = decode_token_claims(token).get("sub")
    if not subject:
        raise AuthenticationError("Auth token has no subject claim")
    return str(subject)


@dataclass(frozen=True)
class RequestContext:
    """Credentials attached to a single request."""

    api_key: str = field(repr=False)
    token: Optional[str] = field(default=None, repr=False)

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def with_token(self, token: str) -> "RequestContext":
        """Return a new context carrying the bearer token."""
        return replace(self, token=token)

    @property
    def params(self) -> Dict[str, str]:
        """Query parameters for the request."""
        return {API_KEY_PARAM: self.api_key}

    @property
    def headers(self) -> Dict[str, str]:
        """Headers for the request."""
        if self.token is None:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    @property
    def subject(self) -> str:
        """The token subject, which is the owner address."""
        if self.token is None:
            raise AuthenticationError("Not authenticated")
        return decode_token_subject(self.token)
