"""
Main client for the Fuse smart wallets API.
"""

import logging
from typing import Any, Optional

from smart_wallet_client.auth import RequestContext
from smart_wallet_client.constants import BASE_URL, ENDPOINTS
from smart_wallet_client.exceptions import AuthenticationError, SmartWalletApiError
from smart_wallet_client.http import HttpClient
from smart_wallet_client.signer import Signer, create_signer
from smart_wallet_client.types import AuthPayload, CreationTicket, SmartWallet

logger = logging.getLogger(__name__)


class SmartWalletClient:
    """Client for the smart wallets REST API.

    The client has two access levels:
    - API key only: the auth endpoint
    - API key + bearer token: fetching and creating the caller's wallet
    """

    def __init__(
        self,
        api_key: str,
        private_key: Optional[str] = None,
        host: str = BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: The public API key sent with every request.
            private_key: Optional owner private key used by ``authenticate``.
            host: The API base URL.
            timeout: HTTP request timeout in seconds.
        """
        self._signer: Optional[Signer] = None
        if private_key:
            self._signer = create_signer(private_key)

        self._context = RequestContext(api_key=api_key)
        self._http = HttpClient(host, timeout=timeout)

    def close(self) -> None:
        """Close the client and release resources."""
        self._http.close()

    def __enter__(self) -> "SmartWalletClient":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager."""
        self.close()

    @property
    def host(self) -> str:
        """Get the API base URL."""
        return self._http.host

    @property
    def address(self) -> Optional[str]:
        """Get the owner address if a signer is configured."""
        return self._signer.address if self._signer else None

    @property
    def context(self) -> RequestContext:
        """Get the credentials used for the next request."""
        return self._context

    @property
    def token(self) -> Optional[str]:
        """Get the bearer token, if authenticated."""
        return self._context.token

    @property
    def is_authenticated(self) -> bool:
        return self._context.is_authenticated

    @property
    def token_subject(self) -> str:
        """Get the token subject (the owner address).

        Raises:
            AuthenticationError: If not authenticated or the token is malformed.
        """
        return self._context.subject

    def _require_auth(self) -> RequestContext:
        """Ensure a bearer token has been obtained.

        Raises:
            AuthenticationError: If ``authenticate`` has not succeeded yet.
        """
        if not self._context.is_authenticated:
            raise AuthenticationError("Authenticate before calling wallet endpoints")
        return self._context

    # =========================================================================
    # Authentication
    # =========================================================================

    def authenticate(self, payload: Optional[AuthPayload] = None) -> str:
        """Exchange a signed ownership proof for a bearer token.

        Args:
            payload: The signed payload. Built from the configured private key
                when omitted.

        Returns:
            The JWT. It is attached to every later request of this client.

        Raises:
            AuthenticationError: On any failure. There is no retry.
        """
        if payload is None:
            if self._signer is None:
                raise AuthenticationError("Private key required to authenticate")
            payload = self._signer.sign_auth_payload()

        try:
            # the auth call never carries a previous bearer token
            context = RequestContext(api_key=self._context.api_key)
            response = self._http.post(ENDPOINTS["auth"], context, payload.to_dict())
        except SmartWalletApiError as e:
            raise AuthenticationError(
                f"Auth error: {e.message}",
                status_code=e.status_code,
                response_body=e.response_body,
            ) from e

        token = response.get("jwt") if isinstance(response, dict) else None
        if not token:
            raise AuthenticationError("Auth error: response has no jwt", response_body=response)

        self._context = self._context.with_token(token)
        logger.info("Authenticated as %s", payload.owner_address)
        return token

    # =========================================================================
    # Smart Wallets
    # =========================================================================

    def fetch_smart_wallet(self) -> Optional[SmartWallet]:
        """Fetch the smart wallet owned by the authenticated address.

        Returns:
            The wallet, or None when the service answers 404.

        Raises:
            AuthenticationError: If not authenticated.
            SmartWalletApiError: On any failure other than "not found".
        """
        context = self._require_auth()
        try:
            response = self._http.get(ENDPOINTS["wallet"], context)
        except SmartWalletApiError as e:
            if e.is_not_found:
                logger.info("No smart wallet exists for this owner")
                return None
            raise

        try:
            return SmartWallet.from_dict(response)
        except TypeError as e:
            raise SmartWalletApiError(f"Fetch wallet error: {e}", response_body=response) from e

    def create_smart_wallet(self) -> CreationTicket:
        """Request creation of a smart wallet for the authenticated address.

        Creation is asynchronous. Progress is published on the real-time
        channel named by the returned ticket.

        Returns:
            The creation ticket.

        Raises:
            AuthenticationError: If not authenticated.
            SmartWalletApiError: If the request fails.
        """
        context = self._require_auth()
        try:
            response = self._http.post(ENDPOINTS["create"], context)
            ticket = CreationTicket.from_dict(response)
        except SmartWalletApiError as e:
            raise SmartWalletApiError(
                f"Create wallet error: {e.message}",
                status_code=e.status_code,
                response_body=e.response_body,
            ) from e
        except (KeyError, TypeError, AttributeError) as e:
            raise SmartWalletApiError(
                "Create wallet error: response has no transactionId",
                response_body=response,
            ) from e

        logger.info("Requested smart wallet creation, transaction %s", ticket.transaction_id)
        return ticket
