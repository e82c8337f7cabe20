"""
In-memory shopping carts, one per customer.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlencode

from teleshop.core.catalog.models import Product
from teleshop.core.catalog.snapshot import CatalogSnapshot
from teleshop.core.orders.models import DraftItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartLine:
    """Cart entry hydrated against the catalog snapshot."""
    product: Product
    quantity: int

    @property
    def total_price(self) -> int:
        return self.product.price * self.quantity

    def to_draft_item(self) -> DraftItem:
        return DraftItem(
            product_id=self.product.id,
            product_name=self.product.name,
            unit_price=self.product.price,
            quantity=self.quantity,
            pack_size=self.product.pack_size,
        )


@dataclass(frozen=True)
class CartView:
    """Cart contents as shown to the customer."""
    lines: tuple[CartLine, ...] = ()
    missing_product_ids: tuple[str, ...] = field(default=())

    @property
    def subtotal(self) -> int:
        return sum(line.total_price for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def quantity_of(self, product_id: str) -> int:
        for line in self.lines:
            if line.product.id == product_id:
                return line.quantity
        return 0


class CartStore:
    """
    Per-customer carts keyed by product id.

    Mutated only from the polling loop, one event at a time.
    Quantities are always >= 1; an entry reaching 0 is removed.
    """

    def __init__(self, storefront_url: Optional[str] = None):
        self.storefront_url = storefront_url.rstrip("/") if storefront_url else None
        self._carts: dict[int, dict[str, int]] = {}

    def add(self, customer_id: int, product_id: str) -> int:
        """Increment product quantity, creating the entry if absent."""
        cart = self._carts.setdefault(customer_id, {})
        cart[product_id] = cart.get(product_id, 0) + 1
        return cart[product_id]

    def remove(self, customer_id: int, product_id: str) -> int:
        """Decrement product quantity; returns the remaining quantity."""
        cart = self._carts.get(customer_id)
        if not cart or product_id not in cart:
            return 0
        quantity = cart[product_id] - 1
        if quantity <= 0:
            del cart[product_id]
            if not cart:
                del self._carts[customer_id]
            return 0
        cart[product_id] = quantity
        return quantity

    def clear(self, customer_id: int) -> None:
        """Remove all entries for a customer."""
        if self._carts.pop(customer_id, None) is not None:
            logger.debug(f"Cart of customer {customer_id} cleared")

    def quantities(self, customer_id: int) -> dict[str, int]:
        return dict(self._carts.get(customer_id, {}))

    def view(self, customer_id: int, snapshot: CatalogSnapshot) -> CartView:
        """Join cart entries against the current catalog."""
        lines = []
        missing = []
        for product_id, quantity in self._carts.get(customer_id, {}).items():
            product = snapshot.product(product_id)
            if product is None:
                missing.append(product_id)
                continue
            lines.append(CartLine(product=product, quantity=quantity))
        return CartView(lines=tuple(lines), missing_product_ids=tuple(missing))

    def checkout_link(self, customer_id: int) -> Optional[str]:
        """Storefront address completing a multi-item checkout in a browser."""
        cart = self._carts.get(customer_id)
        if not self.storefront_url or not cart:
            return None
        items = ",".join(f"{product_id}:{qty}" for product_id, qty in cart.items())
        query = urlencode({"customer": customer_id, "items": items})
        return f"{self.storefront_url}/checkout?{query}"
