"""
Smart Wallet Python Client

Authenticate an owner key against the Fuse smart wallets API and fetch or
create the owner's smart wallet.
"""

from smart_wallet_client.auth import RequestContext
from smart_wallet_client.client import SmartWalletClient
from smart_wallet_client.config import SmartWalletConfig
from smart_wallet_client.exceptions import (
    AuthenticationError,
    ConfigurationError,
    RealtimeError,
    SignatureError,
    SmartWalletApiError,
    SmartWalletError,
    WalletCreationFailed,
)
from smart_wallet_client.resolver import (
    WalletCreation,
    WalletResolver,
    create_or_fetch_smart_wallet,
)
from smart_wallet_client.signer import Signer, create_signer, recover_address
from smart_wallet_client.types import (
    AuthPayload,
    CreationEvent,
    CreationTicket,
    SmartWallet,
)
from smart_wallet_client.ws.client import Publication, RealtimeClient, Subscription

__version__ = "0.1.0"

__all__ = [
    # Clients
    "SmartWalletClient",
    "RealtimeClient",
    "Subscription",
    "WalletResolver",
    "WalletCreation",
    "create_or_fetch_smart_wallet",
    # Signing
    "Signer",
    "create_signer",
    "recover_address",
    # Config
    "RequestContext",
    "SmartWalletConfig",
    # Types
    "AuthPayload",
    "CreationEvent",
    "CreationTicket",
    "Publication",
    "SmartWallet",
    # Exceptions
    "SmartWalletError",
    "SmartWalletApiError",
    "AuthenticationError",
    "ConfigurationError",
    "RealtimeError",
    "SignatureError",
    "WalletCreationFailed",
]
