#!/usr/bin/env python3
"""
Script to write an order sheet (XLSX).

Usage:
    python scripts/export_order.py ORD-123456
    python scripts/export_order.py ORD-123456 --output-dir exports/
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from teleshop.admin.service import build_admin_service
from teleshop.core.errors import OrderNotFound
from teleshop.db.sqlite import db


async def main(order_id: str, output_dir: str | None = None) -> None:
    """Export one order."""
    await db.init()
    service = build_admin_service(db)

    try:
        filepath = await service.export_order(order_id, Path(output_dir) if output_dir else None)
        print(f"✅ Order sheet written to {filepath}")
    except OrderNotFound as e:
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        await db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Export order to XLSX")
    parser.add_argument("order_id", help="Order id, e.g. ORD-123456")
    parser.add_argument("--output-dir", "-o", help="Output directory (default: data/orders)")
    args = parser.parse_args()

    asyncio.run(main(args.order_id, args.output_dir))
