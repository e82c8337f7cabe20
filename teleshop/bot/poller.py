"""
Fixed-interval long-poll loop over getUpdates.
"""

import asyncio
import logging

from aiogram.exceptions import (
    TelegramAPIError,
    TelegramNetworkError,
    TelegramRetryAfter,
    TelegramServerError,
)

from teleshop.bot.dispatcher import ShopDispatcher
from teleshop.core.catalog.snapshot import CatalogSnapshotLoader
from teleshop.core.cursor import CursorTracker
from teleshop.core.errors import CatalogUnavailable
from teleshop.core.interfaces import MessagingTransport

logger = logging.getLogger(__name__)


# Failures worth retrying on the next tick
TRANSIENT_ERRORS = (
    TelegramNetworkError,
    TelegramRetryAfter,
    TelegramServerError,
    asyncio.TimeoutError,
)


class Poller:
    """
    Fetches update batches after the cursor and dispatches them one by one.

    Ticks never overlap. The cursor advances past every dispatched update,
    whether its handler succeeded or not; a batch whose catalog snapshot could
    not be loaded is left in place and fetched again on the next tick.
    """

    def __init__(
        self,
        transport: MessagingTransport,
        loader: CatalogSnapshotLoader,
        dispatcher: ShopDispatcher,
        cursor: CursorTracker,
        interval: float = 2.0,
    ):
        self.transport = transport
        self.loader = loader
        self.dispatcher = dispatcher
        self.cursor = cursor
        self.interval = interval
        self._running = False

    async def tick(self) -> int:
        """
        Run one poll cycle.

        Returns:
            Number of updates dispatched
        """
        try:
            updates = await self.transport.fetch_events(self.cursor.next())
        except TRANSIENT_ERRORS as e:
            logger.warning(f"Failed to fetch updates: {e}")
            return 0
        except TelegramAPIError as e:
            # E.g. a conflicting getUpdates consumer or webhook; retried next tick
            logger.error(f"Telegram rejected getUpdates: {e}")
            return 0

        if not updates:
            return 0

        try:
            snapshot = await self.loader.load()
        except CatalogUnavailable as e:
            logger.error(f"Catalog unavailable, skipping {len(updates)} updates: {e}")
            return 0
        self.dispatcher.ctx.snapshot = snapshot

        dispatched = 0
        for update in updates:
            # Transports may redeliver; never dispatch below the cursor
            if update.update_id <= self.cursor.value:
                continue
            try:
                await self.dispatcher.feed_update(update)
            except Exception as e:
                logger.error(f"Failed to handle update {update.update_id}: {e}", exc_info=True)
            finally:
                self.cursor.advance(update.update_id)
            dispatched += 1

        return dispatched

    async def run(self) -> None:
        """Poll until stopped."""
        self._running = True
        logger.info(f"Polling every {self.interval}s from offset {self.cursor.next()}")
        while self._running:
            try:
                await self.tick()
            except Exception as e:
                logger.error(f"Poll tick failed: {e}", exc_info=True)
            await asyncio.sleep(self.interval)

    def stop(self) -> None:
        self._running = False
