"""
Fetch-or-create flow for the owner's smart wallet.

The wallet is fetched first. When the service reports that none exists, a
creation is requested and its outcome is awaited on the transaction channel
named by the creation ticket.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from smart_wallet_client.client import SmartWalletClient
from smart_wallet_client.config import SmartWalletConfig
from smart_wallet_client.constants import PROGRESS_EVENTS
from smart_wallet_client.exceptions import (
    RealtimeError,
    SmartWalletApiError,
    WalletCreationFailed,
)
from smart_wallet_client.types import CreationEvent, CreationTicket, SmartWallet
from smart_wallet_client.ws.client import Publication, RealtimeClient

logger = logging.getLogger(__name__)

CreatedCallback = Callable[[SmartWallet], None]
FailedCallback = Callable[[Optional[Dict[str, Any]]], None]


class WalletCreation:
    """Handle on a pending wallet creation.

    The outcome is a future settled exactly once by the first terminal event
    on the transaction channel.
    """

    def __init__(
        self,
        ticket: CreationTicket,
        on_created: Optional[CreatedCallback] = None,
        on_failed: Optional[FailedCallback] = None,
    ) -> None:
        self.ticket = ticket
        self.events: List[CreationEvent] = []
        self._on_created = on_created
        self._on_failed = on_failed
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()

    @property
    def transaction_id(self) -> str:
        return self.ticket.transaction_id

    @property
    def done(self) -> bool:
        return self._future.done()

    def handle_publication(self, publication: Publication) -> None:
        """Apply a publication from the transaction channel."""
        data = publication.data if isinstance(publication.data, dict) else {}
        event = CreationEvent.from_dict(data)
        self.events.append(event)

        if not event.is_terminal:
            if event.event_name in PROGRESS_EVENTS:
                logger.info("Transaction %s: %s", self.transaction_id, event.event_name)
            else:
                logger.warning(
                    "Transaction %s: unknown event %r", self.transaction_id, event.event_name
                )
            return

        if self._future.done():
            logger.debug("Ignoring %s, creation already settled", event.event_name)
            return

        if event.succeeded:
            try:
                wallet = SmartWallet.from_dict(event.event_data)
            except TypeError as e:
                self._future.set_exception(
                    SmartWalletApiError(
                        f"Transaction {self.transaction_id}: malformed eventData ({e})",
                        response_body=event.event_data,
                    )
                )
                logger.error("Smart wallet creation succeeded with malformed eventData")
                return
            self._future.set_result(wallet)
            logger.info("Smart wallet successfully created")
            self._notify(self._on_created, wallet)
        else:
            self._future.set_exception(
                WalletCreationFailed(self.transaction_id, event.event_data)
            )
            logger.error("Smart wallet creation failed")
            self._notify(self._on_failed, event.event_data)

    def _notify(self, callback: Optional[Callable[[Any], None]], value: Any) -> None:
        # the outcome is already settled; a failing callback must not undo it
        if callback is None:
            return
        try:
            callback(value)
        except Exception:
            logger.exception("Creation callback failed for transaction %s", self.transaction_id)

    def handle_error(self, error: RealtimeError) -> None:
        """Fail the creation when the channel is lost before completion."""
        if not self._future.done():
            self._future.set_exception(error)

    async def wait(self, timeout: Optional[float] = None) -> SmartWallet:
        """Wait for the creation outcome.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely.

        Returns:
            The created wallet.

        Raises:
            WalletCreationFailed: If the service reports failure.
            RealtimeError: If the channel is lost first.
            asyncio.TimeoutError: If the timeout expires.
        """
        # shielded so a timeout leaves the creation pending
        return await asyncio.wait_for(asyncio.shield(self._future), timeout)

    def cancel(self) -> bool:
        """Stop waiting for the outcome."""
        return self._future.cancel()


class WalletResolver:
    """Resolves the owner's smart wallet, creating it when none exists."""

    def __init__(self, client: SmartWalletClient, realtime: RealtimeClient) -> None:
        """Initialize the resolver.

        Args:
            client: An authenticated REST client.
            realtime: A connected real-time client.
        """
        self._client = client
        self._realtime = realtime

    def fetch(self) -> Optional[SmartWallet]:
        """Fetch the wallet; None when it does not exist."""
        return self._client.fetch_smart_wallet()

    async def create(
        self,
        on_created: Optional[CreatedCallback] = None,
        on_failed: Optional[FailedCallback] = None,
    ) -> WalletCreation:
        """Request creation and subscribe to its transaction channel.

        Returns as soon as the subscription is confirmed; the outcome is
        delivered through the returned handle.
        """
        ticket = self._client.create_smart_wallet()
        creation = WalletCreation(ticket, on_created=on_created, on_failed=on_failed)

        subscription = self._realtime.new_subscription(ticket.channel)
        subscription.on_publication(creation.handle_publication)
        subscription.on_error(creation.handle_error)
        await subscription.subscribe()
        return creation

    async def resolve(
        self,
        timeout: Optional[float] = None,
        on_created: Optional[CreatedCallback] = None,
        on_failed: Optional[FailedCallback] = None,
    ) -> SmartWallet:
        """Fetch the wallet, or create it and wait for the outcome.

        Args:
            timeout: Seconds to wait for creation, or None to wait indefinitely.
            on_created: Called once with the created wallet.
            on_failed: Called once with the failure event data.

        Returns:
            The existing or newly created wallet.
        """
        wallet = self.fetch()
        if wallet is not None:
            logger.info("Smart wallet successfully fetched")
            return wallet

        creation = await self.create(on_created=on_created, on_failed=on_failed)
        return await creation.wait(timeout)


async def create_or_fetch_smart_wallet(
    config: SmartWalletConfig,
    on_created: Optional[CreatedCallback] = None,
    on_failed: Optional[FailedCallback] = None,
) -> SmartWallet:
    """Run the whole flow: sign, authenticate, open the channel, resolve.

    Args:
        config: Credentials and endpoints.
        on_created: Called once with the created wallet.
        on_failed: Called once with the failure event data.

    Returns:
        The owner's smart wallet.
    """
    with SmartWalletClient(
        api_key=config.api_key,
        private_key=config.private_key,
        host=config.api_base_url,
        timeout=config.http_timeout,
    ) as client:
        token = client.authenticate()
        realtime = RealtimeClient(config.ws_url, token=token, name=client.token_subject)
        async with realtime:
            resolver = WalletResolver(client, realtime)
            return await resolver.resolve(
                timeout=config.creation_timeout,
                on_created=on_created,
                on_failed=on_failed,
            )
