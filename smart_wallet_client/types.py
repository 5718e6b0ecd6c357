"""
Data types and models for the smart wallet client.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from smart_wallet_client.constants import (
    EVENT_CREATION_FAILED,
    EVENT_CREATION_SUCCEEDED,
    TERMINAL_EVENTS,
    TRANSACTION_CHANNEL_PREFIX,
)


@dataclass(frozen=True)
class AuthPayload:
    """Proof of key ownership sent to the auth endpoint."""

    hash: str  # keccak256 of the owner address bytes, 0x-prefixed
    signature: str  # EIP-191 signature over the hash bytes, 0x-prefixed
    owner_address: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API submission."""
        return {
            "hash": self.hash,
            "signature": self.signature,
            "ownerAddress": self.owner_address,
        }


@dataclass
class SmartWallet:
    """A smart wallet record owned by the remote service.

    The record is passed through untouched in ``data``; the properties are
    conveniences for keys the service usually includes.
    """

    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SmartWallet":
        """Create from API response dictionary.

        Raises:
            TypeError: If the data is not a JSON object.
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise TypeError(f"Expected a wallet object, got {type(data).__name__}")
        return cls(data=dict(data))

    @property
    def smart_wallet_address(self) -> Optional[str]:
        return self.data.get("smartWalletAddress")

    @property
    def owner_address(self) -> Optional[str]:
        return self.data.get("ownerAddress")

    @property
    def wallet_modules(self) -> Dict[str, Any]:
        return self.data.get("walletModules") or {}

    @property
    def networks(self) -> List[str]:
        return self.data.get("networks") or []

    @property
    def version(self) -> Optional[str]:
        return self.data.get("version")


@dataclass(frozen=True)
class CreationTicket:
    """Immediate response to a wallet creation request."""

    connection_url: str
    transaction_id: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CreationTicket":
        """Create from API response dictionary."""
        return cls(
            connection_url=data.get("connectionUrl", ""),
            transaction_id=str(data["transactionId"]),
        )

    @property
    def channel(self) -> str:
        """Real-time channel carrying the creation progress."""
        return f"{TRANSACTION_CHANNEL_PREFIX}{self.transaction_id}"


@dataclass
class CreationEvent:
    """An event published on a transaction channel."""

    event_name: str
    event_data: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CreationEvent":
        """Create from publication data."""
        return cls(
            event_name=data.get("eventName", ""),
            event_data=data.get("eventData"),
        )

    @property
    def is_terminal(self) -> bool:
        return self.event_name in TERMINAL_EVENTS

    @property
    def succeeded(self) -> bool:
        return self.event_name == EVENT_CREATION_SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.event_name == EVENT_CREATION_FAILED
