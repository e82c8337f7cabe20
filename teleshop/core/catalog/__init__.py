"""
Catalog module: models and search.
The per-cycle snapshot lives in ``teleshop.core.catalog.snapshot``.
"""

from teleshop.core.catalog.models import DEFAULT_CATEGORY_NAME, Category, Product
from teleshop.core.catalog.search import search_products

__all__ = [
    "DEFAULT_CATEGORY_NAME",
    "Category",
    "Product",
    "search_products",
]
