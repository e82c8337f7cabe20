"""
Teleshop Telegram Bot - Main entry point.
"""

import asyncio
import logging
import sys
from datetime import timedelta

from teleshop.bot.bot import get_bot
from teleshop.bot.context import ShopContext
from teleshop.bot.dispatcher import ShopDispatcher
from teleshop.bot.poller import Poller
from teleshop.bot.transport import AiogramTransport
from teleshop.config import settings
from teleshop.core.cart import CartStore
from teleshop.core.catalog.snapshot import CatalogSnapshotLoader
from teleshop.core.cursor import CursorTracker
from teleshop.core.orders.exporter import OrderExporter
from teleshop.core.orders.finalize import OrderFinalizer
from teleshop.core.orders.sessions import SessionStore
from teleshop.core.orders.wizard import OrderWizard
from teleshop.db.repositories import SqlCatalogStore, SqlContactRegistry, SqlOrderLedger
from teleshop.db.sqlite import db


# Fix for Windows asyncio
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_poller(transport: AiogramTransport) -> Poller:
    """Wire stores, wizard and dispatcher around one transport."""
    ttl = timedelta(minutes=settings.session_ttl_minutes) if settings.session_ttl_minutes > 0 else None
    sessions = SessionStore(ttl=ttl)
    cart = CartStore(storefront_url=settings.storefront_url)
    contacts = SqlContactRegistry(db)
    finalizer = OrderFinalizer(
        SqlOrderLedger(db),
        sessions,
        cart,
        shipping_method=settings.shipping_method,
        shipping_cost=settings.shipping_cost,
    )

    ctx = ShopContext(
        transport=transport,
        cart=cart,
        sessions=sessions,
        wizard=OrderWizard(sessions, contacts, finalizer),
        contacts=contacts,
        exporter=OrderExporter(settings.orders_dir, settings.currency),
        settings=settings,
    )
    return Poller(
        transport=transport,
        loader=CatalogSnapshotLoader(SqlCatalogStore(db)),
        dispatcher=ShopDispatcher(ctx),
        cursor=CursorTracker(),
        interval=settings.poll_interval,
    )


async def main() -> None:
    """Main function to run the bot."""
    logger.info("Starting Teleshop Bot...")
    bot = get_bot()

    await db.init()
    logger.info("Database initialized")

    poller = build_poller(AiogramTransport(bot, batch_size=settings.poll_batch_size))

    logger.info("Bot is starting...")
    try:
        await poller.run()
    finally:
        logger.info("Shutting down Teleshop Bot...")
        poller.stop()
        await bot.session.close()
        await db.close()
        logger.info("Cleanup complete")


if __name__ == "__main__":
    asyncio.run(main())
