"""
Constants for the Fuse smart wallets API.
"""

# REST API
BASE_URL = "https://api.fuse.io/"

ENDPOINTS = {
    "auth": "api/v1/smart-wallets/auth",
    "wallet": "api/v1/smart-wallets",
    "create": "api/v1/smart-wallets/create",
}

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept-Encoding": "gzip, deflate",
    "Accept": "*/*",
}

# Query parameter carrying the public API key on every request
API_KEY_PARAM = "apiKey"

# Real-time (Centrifugo) endpoint
WS_URL = "wss://ws.chargeweb3.com/connection/websocket"

# Channel name prefix for wallet creation transactions
TRANSACTION_CHANNEL_PREFIX = "transaction:#"

# Wallet creation events published on the transaction channel
EVENT_CREATION_STARTED = "smartWalletCreationStarted"
EVENT_TRANSACTION_STARTED = "transactionStarted"
EVENT_TRANSACTION_HASH = "transactionHash"
EVENT_TRANSACTION_SUCCEEDED = "transactionSucceeded"
EVENT_TRANSACTION_FAILED = "transactionFailed"
EVENT_CREATION_SUCCEEDED = "smartWalletCreationSucceeded"
EVENT_CREATION_FAILED = "smartWalletCreationFailed"

PROGRESS_EVENTS = frozenset(
    {
        EVENT_CREATION_STARTED,
        EVENT_TRANSACTION_STARTED,
        EVENT_TRANSACTION_HASH,
        EVENT_TRANSACTION_SUCCEEDED,
        EVENT_TRANSACTION_FAILED,
    }
)

TERMINAL_EVENTS = frozenset({EVENT_CREATION_SUCCEEDED, EVENT_CREATION_FAILED})
