"""
Order finalization: turns a completed draft into a persisted order.
"""

import logging
import time
from datetime import datetime
from typing import Callable, Optional
from urllib.parse import urlencode

from teleshop.core.cart import CartStore
from teleshop.core.interfaces import OrderLedger
from teleshop.core.orders.models import DraftOrder, Order, OrderItem, OrderStatus
from teleshop.core.orders.sessions import SessionStore

logger = logging.getLogger(__name__)


class OrderIdGenerator:
    """
    Short, time-derived order ids: ``ORD-`` plus the last six digits of the
    millisecond clock. Bumped when the clock has not moved since the previous
    id so ids stay unique within the process.
    """

    PREFIX = "ORD-"
    DIGITS = 6

    def __init__(self, clock_ms: Callable[[], int] = lambda: int(time.time() * 1000)):
        self._clock_ms = clock_ms
        self._last: Optional[int] = None

    def __call__(self) -> str:
        value = self._clock_ms() % 10 ** self.DIGITS
        if self._last is not None and value == self._last:
            value = (value + 1) % 10 ** self.DIGITS
        self._last = value
        return f"{self.PREFIX}{value:0{self.DIGITS}d}"


def build_order(
    order_id: str,
    draft: DraftOrder,
    phone: str,
    shipping_method: Optional[str] = None,
    shipping_cost: int = 0,
) -> Order:
    """Create the ledger record from the draft, freezing item prices."""
    items = [
        OrderItem(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            price_at_time=item.unit_price,
        )
        for item in draft.items
    ]
    return Order(
        id=order_id,
        customer_name=draft.customer_name,
        customer_phone=phone,
        customer_address=draft.customer_address,
        items=items,
        shipping_method=shipping_method,
        shipping_cost=shipping_cost,
        total_amount=sum(item.total_price for item in items) + shipping_cost,
        status=OrderStatus.PENDING,
        created_at=datetime.now(),
    )


def build_payment_url(order: Order, base_url: str, api_key: Optional[str]) -> Optional[str]:
    """Opaque payment page link; None when no payment capability is configured."""
    if not api_key:
        return None
    query = urlencode({"order": order.id, "amount": order.total_amount})
    return f"{base_url}?{query}"


class OrderFinalizer:
    """Persists orders and releases the wizard session and cart."""

    def __init__(
        self,
        ledger: OrderLedger,
        sessions: SessionStore,
        cart: CartStore,
        id_generator: Optional[Callable[[], str]] = None,
        shipping_method: Optional[str] = None,
        shipping_cost: int = 0,
    ):
        self.ledger = ledger
        self.sessions = sessions
        self.cart = cart
        self.id_generator = id_generator or OrderIdGenerator()
        self.shipping_method = shipping_method
        self.shipping_cost = shipping_cost

    async def finalize(self, chat_id: int, draft: DraftOrder, phone: str) -> Order:
        """
        Write the order, then close the session and clear the cart.

        Raises:
            OrderLedgerError: if the ledger write fails; session and cart are
                left untouched so the same input can retry
        """
        order = build_order(
            self.id_generator(),
            draft,
            phone,
            shipping_method=self.shipping_method,
            shipping_cost=self.shipping_cost,
        )
        await self.ledger.create_order(order)

        self.sessions.end(chat_id)
        if draft.from_cart:
            self.cart.clear(draft.customer_id)

        logger.info(
            f"Order {order.id} created for chat {chat_id}: "
            f"{len(order.items)} items, total {order.total_amount}"
        )
        return order
