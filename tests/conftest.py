"""Pytest fixtures for smart-wallet-client tests."""

import asyncio
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import jwt
import pytest
from centrifuge import CentrifugeError

from smart_wallet_client.ws import client as ws_client


# Hardhat account #0 (DO NOT use in production)
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

TEST_API_KEY = "pk_test_0123456789"
TEST_JWT_SECRET = "test-secret-used-only-to-build-tokens-in-tests"


@pytest.fixture
def private_key() -> str:
    """Test owner private key."""
    return TEST_PRIVATE_KEY


@pytest.fixture
def test_address() -> str:
    """Address derived from the test private key."""
    return TEST_ADDRESS


@pytest.fixture
def api_key() -> str:
    """Test public API key."""
    return TEST_API_KEY


@pytest.fixture
def host() -> str:
    """Test API host."""
    return "https://api.fuse.io/"


@pytest.fixture
def ws_url() -> str:
    """Test real-time URL."""
    return "wss://ws.test/connection/websocket"


@pytest.fixture
def token(test_address) -> str:
    """A JWT whose subject is the test address."""
    return jwt.encode({"sub": test_address}, TEST_JWT_SECRET, algorithm="HS256")

class FakeSubscription:
    """Scripted stand-in for a centrifuge subscription."""

    def __init__(self, client: "FakeCentrifugeClient", channel: str, events: Any) -> None:
        self.client = client
        self.channel = channel
        self.events = events
        self.subscribed = False

    async def subscribe(self) -> None:
        self.client.sent.append({"subscribe": {"channel": self.channel}})

    async def ready_for(self, timeout: float) -> None:
        error = self.client.server.errors.get("subscribe")
        if error is not None:
            await self.events.on_error(SimpleNamespace(error=CentrifugeError(error["message"])))
            raise CentrifugeError("subscription failed")
        self.subscribed = True

        scripted = self.client.server.publications.get(self.channel, [])
        if scripted:
            # delivered after the subscribe reply, as the server does
            self.client.tasks.append(asyncio.ensure_future(self._deliver(list(scripted))))

    async def unsubscribe(self) -> None:
        self.client.sent.append({"unsubscribe": {"channel": self.channel}})
        self.subscribed = False

    async def publish(self, data: Any) -> None:
        self.client.offset += 1
        pub = SimpleNamespace(data=data, offset=self.client.offset)
        await self.events.on_publication(SimpleNamespace(pub=pub))

    async def _deliver(self, scripted: List[Any]) -> None:
        for data in scripted:
            await self.publish(data)


class FakeCentrifugeClient:
    """Scripted stand-in for ``centrifuge.Client``."""

    def __init__(
        self,
        server: "FakeServer",
        address: str,
        events: Any = None,
        token: str = "",
        name: str = "python",
        **kwargs: Any,
    ) -> None:
        self.server = server
        self.url = address
        self.events = events
        self.token = token
        self.name = name
        self.sent: List[Dict[str, Any]] = []
        self.subscriptions: Dict[str, FakeSubscription] = {}
        self.tasks: List[asyncio.Future] = []
        self.offset = 0
        self.connected = False
        self.closed = False

    async def connect(self) -> None:
        self.sent.append({"connect": {"token": self.token, "name": self.name}})

    async def ready_for(self, timeout: float) -> None:
        if self.server.refuse is not None:
            await self.events.on_error(SimpleNamespace(error=self.server.refuse))
            raise asyncio.TimeoutError()
        error = self.server.errors.get("connect")
        if error is not None:
            await self.events.on_disconnected(
                SimpleNamespace(code=error["code"], reason=error["message"])
            )
            raise CentrifugeError("client disconnected")
        self.connected = True
        await self.events.on_connected(SimpleNamespace(client="client-1", version="5.0.0", data=None))

    async def disconnect(self) -> None:
        self.closed = True
        for task in self.tasks:
            task.cancel()
        if self.server.fail_disconnect is not None:
            raise self.server.fail_disconnect
        if self.connected:
            self.connected = False
            await self.events.on_disconnected(SimpleNamespace(code=0, reason="disconnect called"))

    def new_subscription(self, channel: str, events: Any = None, **kwargs: Any) -> FakeSubscription:
        if channel in self.subscriptions:
            raise CentrifugeError(f"subscription to {channel} already exists")
        subscription = FakeSubscription(self, channel, events)
        self.subscriptions[channel] = subscription
        return subscription

    def commands(self, method: str) -> List[Dict[str, Any]]:
        return [message[method] for message in self.sent if method in message]

    async def publish(self, channel: str, data: Any) -> None:
        """Push a publication to the subscriber of a channel, if any."""
        subscription = self.subscriptions.get(channel)
        if subscription is not None and subscription.subscribed:
            await subscription.publish(data)

    async def drop(self, code: int = 3001, reason: str = "connection closed") -> None:
        """Simulate the transport going away after the client was ready."""
        self.connected = False
        await self.events.on_connecting(SimpleNamespace(code=code, reason=reason))


class FakeServer:
    """Collects fake clients and the behaviour scripted for them."""

    def __init__(self) -> None:
        self.connections: List[FakeCentrifugeClient] = []
        self.publications: Dict[str, List[Any]] = {}
        self.errors: Dict[str, Dict[str, Any]] = {}
        self.refuse: Optional[Exception] = None
        self.fail_disconnect: Optional[Exception] = None

    @property
    def connection(self) -> FakeCentrifugeClient:
        return self.connections[-1]

    def client(self, address: str, **kwargs: Any) -> FakeCentrifugeClient:
        connection = FakeCentrifugeClient(self, address, **kwargs)
        self.connections.append(connection)
        return connection


@pytest.fixture
def ws_server(monkeypatch) -> FakeServer:
    """Replace the centrifuge client with a scripted fake server."""
    server = FakeServer()
    monkeypatch.setattr(ws_client, "Client", server.client)
    return server


async def settle() -> None:
    """Let scheduled publications reach their handlers."""
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.fixture
def drain():
    """Coroutine function that lets background deliveries catch up."""
    return settle
