"""
XLSX catalog import.
Reads product rows from an Excel sheet and upserts them into the catalog.
"""

import logging
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

import pandas as pd

from teleshop.admin.service import AdminService
from teleshop.core.catalog.models import Category, Product

logger = logging.getLogger(__name__)


@dataclass
class ParsedProduct:
    """Product row as read from the sheet."""
    name: str
    price: int
    code: str = ""
    category: Optional[str] = None
    pack_size: int = 1
    description: str = ""
    image_url: str = ""


class CatalogSheetParser:
    """
    Parser for catalog sheets.

    The first row holds column headers; ``name`` and ``price`` are required,
    ``code``, ``category``, ``pack_size``, ``description`` and ``image_url``
    are optional. Rows without a name or a usable price are skipped.
    """

    REQUIRED_COLUMNS = ("name", "price")

    # Thousands separators and currency words around a price
    PRICE_NOISE = re.compile(r"[^\d]")

    def parse(self, file_path: str | Path) -> list[ParsedProduct]:
        df = pd.read_excel(Path(file_path), dtype=str)
        df.columns = [str(c).strip().lower() for c in df.columns]

        missing = [c for c in self.REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Missing columns: {', '.join(missing)}")

        products = []
        for _, row in df.iterrows():
            product = self._parse_row(row)
            if product:
                products.append(product)
        return products

    def _cell(self, row: pd.Series, column: str) -> str:
        if column not in row.index or pd.isna(row[column]):
            return ""
        return str(row[column]).strip()

    def _parse_row(self, row: pd.Series) -> ParsedProduct | None:
        name = self._cell(row, "name")
        if not name:
            return None

        price = self._parse_price(self._cell(row, "price"))
        if price is None:
            logger.warning(f"Skipping {name!r}: no price")
            return None

        pack_size = self._parse_price(self._cell(row, "pack_size")) or 1

        return ParsedProduct(
            name=name,
            price=price,
            code=self._cell(row, "code"),
            category=self._cell(row, "category") or None,
            pack_size=pack_size,
            description=self._cell(row, "description"),
            image_url=self._cell(row, "image_url"),
        )

    def _parse_price(self, value: str) -> Optional[int]:
        # "3,500,000 Toman" and "3500000.0" both mean 3500000
        value = value.split(".", 1)[0]
        digits = self.PRICE_NOISE.sub("", value)
        return int(digits) if digits else None


async def import_catalog(service: AdminService, rows: list[ParsedProduct]) -> dict:
    """
    Upsert parsed rows. Products are matched by code, categories by name;
    missing categories are created.

    Returns:
        Counters: created, updated, categories_created
    """
    stats = {"created": 0, "updated": 0, "categories_created": 0}

    categories = {c.name.lower(): c for c in await service.catalog.list_categories()}
    by_code = {p.code: p for p in await service.catalog.list_products() if p.code}

    for row in rows:
        category_id = None
        if row.category:
            category = categories.get(row.category.lower())
            if category is None:
                category = await service.save_category(Category(id="", name=row.category))
                categories[row.category.lower()] = category
                stats["categories_created"] += 1
            category_id = category.id

        existing = by_code.get(row.code) if row.code else None
        product = Product(
            id=existing.id if existing else "",
            name=row.name,
            price=row.price,
            code=row.code,
            pack_size=row.pack_size,
            category_id=category_id,
            description=row.description,
            image_url=row.image_url,
        )
        if existing:
            product = replace(product, created_at=existing.created_at)

        saved = await service.save_product(product)
        if row.code:
            by_code[row.code] = saved
        stats["updated" if existing else "created"] += 1

    logger.info(f"Catalog import finished: {stats}")
    return stats
