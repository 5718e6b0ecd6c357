"""
Exceptions raised by the smart wallet client.
"""

from typing import Any, Dict, Optional


class SmartWalletError(Exception):
    """Base exception for all smart wallet client errors."""


class ConfigurationError(SmartWalletError):
    """Raised when required configuration is missing or invalid."""


class SignatureError(SmartWalletError):
    """Raised when the private key is malformed or a signature does not verify."""


class SmartWalletApiError(SmartWalletError):
    """Raised when a request to the smart wallets API fails."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body

    @property
    def is_not_found(self) -> bool:
        """Whether the API answered 404."""
        return self.status_code == 404

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (status {self.status_code})"
        return self.message


class AuthenticationError(SmartWalletApiError):
    """Raised when authentication fails or an operation needs a bearer token."""


class RealtimeError(SmartWalletError):
    """Raised on real-time channel connection or protocol failures."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code


class WalletCreationFailed(SmartWalletError):
    """Raised when the service reports that wallet creation failed."""

    def __init__(
        self,
        transaction_id: str,
        event_data: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(f"Smart wallet creation failed (transaction {transaction_id})")
        self.transaction_id = transaction_id
        self.event_data = event_data
