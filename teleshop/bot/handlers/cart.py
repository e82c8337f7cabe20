"""
Cart handlers.
"""

import logging
from typing import Optional

from teleshop.bot.context import ShopContext
from teleshop.bot.handlers.order import start_order
from teleshop.bot.navigator import render_cart
from teleshop.bot.replies import send_reply
from teleshop.core.events import CallbackEvent

logger = logging.getLogger(__name__)


async def show_cart(ctx: ShopContext, chat_id: int, customer_id: int) -> None:
    view = ctx.cart.view(customer_id, ctx.snapshot)
    reply = render_cart(view, ctx.settings.currency, ctx.cart.checkout_link(customer_id))
    await send_reply(ctx.transport, chat_id, reply)


async def handle_add_to_cart(ctx: ShopContext, event: CallbackEvent) -> Optional[str]:
    """Add one unit; answered with a toast only."""
    product = ctx.snapshot.product(event.command.arg)
    if product is None:
        return "Product is no longer available"

    quantity = ctx.cart.add(event.user_id, product.id)
    logger.debug(f"Customer {event.user_id} has {quantity} × {product.id} in cart")
    return f"Added to cart ({quantity})"


async def handle_remove_from_cart(ctx: ShopContext, event: CallbackEvent) -> Optional[str]:
    ctx.cart.remove(event.user_id, event.command.arg)
    await show_cart(ctx, event.chat_id, event.user_id)
    return None


async def handle_view_cart(ctx: ShopContext, event: CallbackEvent) -> Optional[str]:
    await show_cart(ctx, event.chat_id, event.user_id)
    return None


async def handle_clear_cart(ctx: ShopContext, event: CallbackEvent) -> Optional[str]:
    ctx.cart.clear(event.user_id)
    await show_cart(ctx, event.chat_id, event.user_id)
    return "Cart cleared"


async def handle_checkout(ctx: ShopContext, event: CallbackEvent) -> Optional[str]:
    """Start the order wizard with the cart lines still in the catalog."""
    view = ctx.cart.view(event.user_id, ctx.snapshot)
    items = [line.to_draft_item() for line in view.lines]
    await start_order(ctx, event.chat_id, event.user_id, items, from_cart=True)
    return None
