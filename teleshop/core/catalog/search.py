"""
Catalog search shared by inline queries and free-text messages.
"""

from typing import Iterable

from teleshop.core.catalog.models import Product


def matches(product: Product, query: str) -> bool:
    """Case-insensitive substring match against name or code."""
    needle = query.lower()
    return needle in product.name.lower() or (
        bool(product.code) and needle in product.code.lower()
    )


def search_products(products: Iterable[Product], query: str, limit: int) -> list[Product]:
    """
    Filter products by query.

    An empty query matches everything, so the inline search surface lists the
    catalog before the customer starts typing.
    """
    query = query.strip()
    results = []
    for product in products:
        if matches(product, query):
            results.append(product)
            if len(results) >= limit:
                break
    return results
