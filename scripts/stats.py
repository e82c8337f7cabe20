#!/usr/bin/env python3
"""
Script to print store dashboard counters.

Usage:
    python scripts/stats.py
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from teleshop.admin.service import build_admin_service
from teleshop.config import settings
from teleshop.db.sqlite import db


async def main() -> None:
    await db.init()
    try:
        stats = await build_admin_service(db).catalog_stats()
    finally:
        await db.close()

    print(f"Products:      {stats['products']}")
    print(f"Categories:    {stats['categories']}")
    print(f"Catalog value: {stats['catalog_value']:,} {settings.currency}")
    print(f"Orders:        {stats['orders']}")
    for status, count in stats["orders_by_status"].items():
        print(f"   {status:<12} {count}")


if __name__ == "__main__":
    asyncio.run(main())
