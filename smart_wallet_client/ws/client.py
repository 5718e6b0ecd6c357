"""
Real-time channel client for wallet creation events.

A thin adapter over the ``centrifuge`` client: it connects with the JWT and
client name, waits until the server has accepted the connection, and hands
publications of each channel to plain callbacks.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from centrifuge import (
    CentrifugeError,
    Client,
    ClientEventHandler,
    ConnectedContext,
    ConnectingContext,
    DisconnectedContext,
    ErrorContext,
    PublicationContext,
    SubscriptionErrorContext,
    SubscriptionEventHandler,
    UnsubscribedContext,
)

from smart_wallet_client.constants import WS_URL
from smart_wallet_client.exceptions import RealtimeError

logger = logging.getLogger(__name__)


@dataclass
class Publication:
    """A message published on a channel."""

    channel: str
    data: Any = None
    offset: Optional[int] = None


PublicationHandler = Callable[[Publication], None]
ErrorHandler = Callable[[RealtimeError], None]


class _SubscriptionEvents(SubscriptionEventHandler):
    """Forwards centrifuge subscription events to a Subscription."""

    def __init__(self, subscription: "Subscription") -> None:
        self._subscription = subscription

    async def on_publication(self, ctx: PublicationContext) -> None:
        self._subscription._handle_publication(
            Publication(
                channel=self._subscription.channel,
                data=ctx.pub.data,
                offset=ctx.pub.offset,
            )
        )

    async def on_unsubscribed(self, ctx: UnsubscribedContext) -> None:
        self._subscription._last_error = f"{ctx.reason} (code {ctx.code})"

    async def on_error(self, ctx: SubscriptionErrorContext) -> None:
        self._subscription._last_error = str(ctx.error)


class Subscription:
    """A subscription to one channel."""

    def __init__(self, client: "RealtimeClient", channel: str) -> None:
        self._client = client
        self._channel = channel
        self._handlers: List[PublicationHandler] = []
        self._error_handlers: List[ErrorHandler] = []
        self._subscribed = False
        self._last_error: Optional[str] = None
        self._sub = client._client.new_subscription(channel, events=_SubscriptionEvents(self))

    @property
    def channel(self) -> str:
        return self._channel

    @property
    def subscribed(self) -> bool:
        return self._subscribed

    def on_publication(self, handler: PublicationHandler) -> None:
        """Register a handler called for every publication on the channel."""
        self._handlers.append(handler)

    def on_error(self, handler: ErrorHandler) -> None:
        """Register a handler called once if the channel becomes unusable."""
        self._error_handlers.append(handler)

    async def subscribe(self) -> None:
        """Subscribe to the channel and wait for the server to confirm.

        Raises:
            RealtimeError: If the server rejects the subscription.
        """
        await self._sub.subscribe()
        try:
            await self._sub.ready_for(self._client.timeout)
        except (CentrifugeError, asyncio.TimeoutError) as e:
            raise RealtimeError(
                f"Subscribe to {self._channel} failed: {self._last_error or e}"
            ) from e
        self._subscribed = True
        logger.info("Subscribed to %s", self._channel)

    async def unsubscribe(self) -> None:
        """Unsubscribe from the channel."""
        if self._subscribed:
            await self._sub.unsubscribe()
            self._subscribed = False
        self._client._remove(self)

    def _handle_publication(self, publication: Publication) -> None:
        for handler in list(self._handlers):
            try:
                handler(publication)
            except Exception as e:
                logger.exception("Publication handler failed on %s", self._channel)
                self._handle_error(RealtimeError(f"Publication handler failed: {e}"))
                return

    def _handle_error(self, error: RealtimeError) -> None:
        handlers, self._error_handlers = self._error_handlers, []
        for handler in handlers:
            try:
                handler(error)
            except Exception:
                logger.exception("Error handler failed on %s", self._channel)


class _ClientEvents(ClientEventHandler):
    """Forwards centrifuge client events to a RealtimeClient."""

    def __init__(self, client: "RealtimeClient") -> None:
        self._client = client

    async def on_connected(self, ctx: ConnectedContext) -> None:
        self._client._client_id = ctx.client

    async def on_connecting(self, ctx: ConnectingContext) -> None:
        # the transport dropped after the client was ready
        if self._client.ready:
            self._client._lost(RealtimeError(f"Connection lost: {ctx.reason}", code=ctx.code))

    async def on_disconnected(self, ctx: DisconnectedContext) -> None:
        self._client._last_error = ctx.reason
        self._client._last_code = ctx.code
        if self._client.ready:
            self._client._lost(RealtimeError(f"Disconnected: {ctx.reason}", code=ctx.code))

    async def on_error(self, ctx: ErrorContext) -> None:
        self._client._last_error = str(ctx.error)
        logger.debug("Real-time client error: %s", ctx.error)


class RealtimeClient:
    """Client for the real-time push channel.

    A lost connection is final: once the connection drops after becoming
    ready, every subscription is notified through its error handlers, even
    though the underlying client may keep trying to reconnect until closed.
    """

    def __init__(
        self,
        url: str = WS_URL,
        token: Optional[str] = None,
        name: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialize the client.

        Args:
            url: The websocket URL (wss://...).
            token: The JWT used to authenticate the connection.
            name: The client name reported to the server.
            timeout: Seconds to wait for the connection or a subscription
                to become ready.
        """
        self._url = url
        self._timeout = timeout
        self._client = Client(
            url,
            events=_ClientEvents(self),
            token=token or "",
            name=name or "python",
        )
        self._subscriptions: Dict[str, Subscription] = {}
        self._client_id: Optional[str] = None
        self._last_error: Optional[str] = None
        self._last_code: Optional[int] = None
        self._ready = False

    @property
    def url(self) -> str:
        return self._url

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def client_id(self) -> Optional[str]:
        """Get the client id assigned by the server."""
        return self._client_id

    @property
    def ready(self) -> bool:
        """Whether the server has accepted the connection."""
        return self._ready

    async def __aenter__(self) -> "RealtimeClient":
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def connect(self) -> None:
        """Connect and wait until the client is ready.

        Raises:
            RealtimeError: If the client is not ready within the timeout.
        """
        logger.info("Connecting to %s", self._url)
        await self._client.connect()
        try:
            await self._client.ready_for(self._timeout)
        except (CentrifugeError, asyncio.TimeoutError) as e:
            await self._client.disconnect()
            raise RealtimeError(
                f"Connection failed: {self._last_error or e}", code=self._last_code
            ) from e

        self._ready = True
        logger.info("Connected to real-time server")

    def new_subscription(self, channel: str) -> Subscription:
        """Create a subscription for a channel.

        Raises:
            RealtimeError: If a subscription for the channel already exists.
        """
        if channel in self._subscriptions:
            raise RealtimeError(f"Subscription to {channel} already exists")
        subscription = Subscription(self, channel)
        self._subscriptions[channel] = subscription
        return subscription

    def get_subscription(self, channel: str) -> Optional[Subscription]:
        return self._subscriptions.get(channel)

    async def close(self) -> None:
        """Disconnect from the server.

        Subscriptions still waiting for events are notified that the channel
        is gone, even if the disconnect itself fails.
        """
        was_ready, self._ready = self._ready, False
        try:
            await self._client.disconnect()
        finally:
            if was_ready:
                self._lost(RealtimeError("Connection closed"), log=False)
            self._subscriptions.clear()

    def _remove(self, subscription: Subscription) -> None:
        self._subscriptions.pop(subscription.channel, None)

    def _lost(self, error: RealtimeError, log: bool = True) -> None:
        self._ready = False
        if log:
            logger.warning("Real-time connection lost: %s", error)
        for subscription in list(self._subscriptions.values()):
            subscription._handle_error(error)
