#!/usr/bin/env python3
"""
Script to load products from an XLSX sheet into the catalog.

Usage:
    python scripts/load_catalog.py path/to/catalog.xlsx

The first row must hold column headers: name, price and optionally code,
category, pack_size, description, image_url.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from teleshop.admin.importer import CatalogSheetParser, import_catalog
from teleshop.admin.service import build_admin_service
from teleshop.db.sqlite import db


async def main(file_path: str) -> None:
    """Load catalog from file."""
    file_path = Path(file_path)

    if not file_path.exists():
        print(f"Error: File not found: {file_path}")
        sys.exit(1)

    try:
        rows = CatalogSheetParser().parse(file_path)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    await db.init()

    print(f"Loading catalog from: {file_path}")
    print("-" * 50)

    try:
        stats = await import_catalog(build_admin_service(db), rows)
        print("✅ Successfully loaded catalog!")
        print(f"   Rows read: {len(rows)}")
        print(f"   New products: {stats['created']}")
        print(f"   Updated products: {stats['updated']}")
        print(f"   New categories: {stats['categories_created']}")
    finally:
        await db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Load catalog sheet into database")
    parser.add_argument("file", help="Path to XLSX file")
    args = parser.parse_args()

    asyncio.run(main(args.file))
