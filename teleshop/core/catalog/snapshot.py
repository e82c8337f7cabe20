"""
Per-cycle catalog snapshot.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from teleshop.core.catalog.models import DEFAULT_CATEGORY_NAME, Category, Product
from teleshop.core.errors import CatalogUnavailable
from teleshop.core.interfaces import CatalogStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogSnapshot:
    """Products and categories as read at the start of one poll cycle."""
    products: tuple[Product, ...] = ()
    categories: tuple[Category, ...] = ()
    _products_by_id: dict = field(default_factory=dict, init=False, repr=False, compare=False)
    _categories_by_id: dict = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._products_by_id.update((p.id, p) for p in self.products)
        self._categories_by_id.update((c.id, c) for c in self.categories)

    def product(self, product_id: str) -> Optional[Product]:
        return self._products_by_id.get(product_id)

    def category(self, category_id: Optional[str]) -> Optional[Category]:
        if category_id is None:
            return None
        return self._categories_by_id.get(category_id)

    def category_name(self, category_id: Optional[str]) -> str:
        category = self.category(category_id)
        return category.name if category else DEFAULT_CATEGORY_NAME

    def products_in(self, category_id: str) -> list[Product]:
        return [p for p in self.products if p.category_id == category_id]

    def newest_products(self) -> list[Product]:
        return sorted(self.products, key=lambda p: p.created_at, reverse=True)


class CatalogSnapshotLoader:
    """Reads the full catalog once per cycle, without caching across cycles."""

    def __init__(self, store: CatalogStore):
        self.store = store

    async def load(self) -> CatalogSnapshot:
        """
        Fetch current products and categories.

        Raises:
            CatalogUnavailable: if the catalog store cannot be read
        """
        try:
            products = await self.store.list_products()
            categories = await self.store.list_categories()
        except SQLAlchemyError as e:
            raise CatalogUnavailable(str(e)) from e

        logger.debug(f"Catalog snapshot: {len(products)} products, {len(categories)} categories")
        return CatalogSnapshot(products=tuple(products), categories=tuple(categories))
