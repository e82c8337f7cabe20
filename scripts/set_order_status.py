#!/usr/bin/env python3
"""
Script to change an order status and notify the customer.

Usage:
    python scripts/set_order_status.py ORD-123456 PROCESSING
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from teleshop.admin.service import build_admin_service
from teleshop.bot.bot import create_bot
from teleshop.config import settings
from teleshop.core.errors import OrderNotFound
from teleshop.core.orders.models import OrderStatus
from teleshop.db.sqlite import db


async def main(order_id: str, status: OrderStatus) -> None:
    """Change order status."""
    await db.init()

    # Without a token the status still changes, the customer is just not told
    bot = create_bot() if settings.telegram_bot_token else None
    service = build_admin_service(db, bot)

    try:
        order = await service.update_order_status(order_id, status)
        print(f"✅ Order {order.id} is now {order.status.label}")
    except OrderNotFound as e:
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        if bot is not None:
            await bot.session.close()
        await db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Change order status")
    parser.add_argument("order_id", help="Order id, e.g. ORD-123456")
    parser.add_argument(
        "status",
        type=str.upper,
        choices=[s.value for s in OrderStatus],
        help="New status",
    )
    args = parser.parse_args()

    asyncio.run(main(args.order_id, OrderStatus(args.status)))
