"""
HTTP transport for the smart wallets API.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from smart_wallet_client.auth import RequestContext
from smart_wallet_client.constants import DEFAULT_HEADERS
from smart_wallet_client.exceptions import SmartWalletApiError

logger = logging.getLogger(__name__)


class HttpClient:
    """Thin wrapper around ``httpx.Client``.

    The client holds no credentials. Each call takes the ``RequestContext``
    to authenticate with.
    """

    def __init__(self, host: str, timeout: float = 30.0) -> None:
        """Initialize the HTTP client.

        Args:
            host: The API base URL.
            timeout: Request timeout in seconds.
        """
        self._host = host
        self._client = httpx.Client(
            base_url=host,
            headers=DEFAULT_HEADERS,
            timeout=timeout,
        )

    @property
    def host(self) -> str:
        return self._host

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._client.close()

    def request(
        self,
        method: str,
        endpoint: str,
        context: RequestContext,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a request and decode the JSON response.

        Args:
            method: HTTP method.
            endpoint: Path relative to the base URL.
            context: Credentials for this request.
            json: Optional JSON body.

        Returns:
            The decoded response body, or None for an empty body.

        Raises:
            SmartWalletApiError: On transport errors or non-2xx responses.
        """
        logger.debug("%s %s", method, endpoint)
        try:
            response = self._client.request(
                method,
                endpoint,
                params=context.params,
                headers=context.headers,
                json=json,
            )
        except httpx.HTTPError as e:
            raise SmartWalletApiError(f"{method} {endpoint} failed: {e}") from e

        if response.is_error:
            raise SmartWalletApiError(
                f"{method} {endpoint} failed: {_error_message(response)}",
                status_code=response.status_code,
                response_body=_safe_json(response),
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise SmartWalletApiError(
                f"{method} {endpoint} returned invalid JSON",
                status_code=response.status_code,
                response_body=response.text,
            ) from e

    def get(self, endpoint: str, context: RequestContext) -> Any:
        """Send a GET request."""
        return self.request("GET", endpoint, context)

    def post(
        self,
        endpoint: str,
        context: RequestContext,
        data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a POST request."""
        return self.request("POST", endpoint, context, json=data)


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _error_message(response: httpx.Response) -> str:
    body = _safe_json(response)
    if isinstance(body, dict):
        for key in ("error", "message"):
            if body.get(key):
                return str(body[key])
    return response.text or response.reason_phrase
