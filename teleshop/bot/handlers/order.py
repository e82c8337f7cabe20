"""
Order handling for Teleshop bot.
Maps order wizard transitions to customer messages.
"""

import asyncio
import logging
from html import escape
from typing import Optional, Sequence

from aiogram.exceptions import TelegramAPIError
from aiogram.types import ReplyKeyboardRemove

from teleshop.bot.context import ShopContext
from teleshop.bot.keyboards.order import (
    get_cancel_order_keyboard,
    get_order_submitted_keyboard,
    get_phone_request_keyboard,
)
from teleshop.bot.navigator import format_price
from teleshop.core.events import CallbackEvent, ContactEvent, TextEvent
from teleshop.core.orders.finalize import build_payment_url
from teleshop.core.orders.models import DraftItem, Order, WizardStep
from teleshop.core.orders.wizard import WizardOutcome, WizardResult

logger = logging.getLogger(__name__)


NAME_PROMPT = "👤 Please enter your <b>full name</b>:"
ADDRESS_PROMPT = "📍 Please enter your <b>delivery address</b>:"
PHONE_PROMPT = (
    "📱 Please send your <b>phone number</b>.\n\n"
    "Tap the button below or type it, e.g. 09121234567"
)

STEP_PROMPTS = {
    WizardStep.AWAITING_NAME: NAME_PROMPT,
    WizardStep.AWAITING_ADDRESS: ADDRESS_PROMPT,
    WizardStep.AWAITING_PHONE: PHONE_PROMPT,
}

ALREADY_OPEN_MESSAGE = (
    "⚠️ You already have an order in progress.\n"
    "Finish it or cancel it before starting a new one."
)
EMPTY_TARGET_MESSAGE = "🛒 There is nothing to order."
CANCELLED_MESSAGE = "❌ Order cancelled."
FINALIZE_FAILED_MESSAGE = (
    "😔 We could not save your order right now.\n"
    "Please send your last answer again in a moment."
)
THANKS_MESSAGE = "✅ Thank you!"


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def format_draft_items(items: Sequence[DraftItem], currency: str) -> str:
    lines = [
        f"• {escape(item.product_name)} × {item.quantity} — "
        f"{format_price(item.total_price, currency)}"
        for item in items
    ]
    total = sum(item.total_price for item in items)
    lines.append(f"\n💰 Total: <b>{format_price(total, currency)}</b>")
    return "\n".join(lines)


def format_confirmation(order: Order, currency: str, payment_url: Optional[str]) -> str:
    """Customer confirmation of a saved order."""
    text = (
        f"🎉 <b>Order {order.id} received!</b>\n\n"
        f"{escape(order.format_items_summary(currency))}\n\n"
    )
    if order.shipping_cost:
        text += (
            f"🚚 Shipping ({escape(order.shipping_method or '-')}): "
            f"{format_price(order.shipping_cost, currency)}\n"
        )
    text += (
        f"💰 Total: <b>{format_price(order.total_amount, currency)}</b>\n"
        f"📍 Address: {escape(order.customer_address)}\n"
        f"📱 Phone: {escape(order.customer_phone)}\n\n"
    )
    if payment_url:
        text += "💳 Use the button below to pay online."
    else:
        text += "📞 Our staff will contact you shortly to confirm the order."
    return text


def format_manager_notice(order: Order, currency: str) -> str:
    """Short order summary for the store manager."""
    return (
        f"🆕 <b>New order {order.id}</b>\n\n"
        f"👤 {escape(order.customer_name)}\n"
        f"📱 {escape(order.customer_phone)}\n"
        f"📍 {escape(order.customer_address)}\n\n"
        f"{escape(order.format_items_summary(currency))}\n\n"
        f"💰 Total: <b>{format_price(order.total_amount, currency)}</b>"
    )


async def prompt_step(ctx: ShopContext, chat_id: int, step: WizardStep, prefix: str = "") -> None:
    """(Re-)ask for the input of ``step``."""
    prompt = STEP_PROMPTS.get(step)
    if prompt is None:
        return
    text = f"{prefix}\n\n{prompt}" if prefix else prompt
    if step is WizardStep.AWAITING_PHONE:
        await ctx.transport.send_text(chat_id, text, get_phone_request_keyboard())
    else:
        await ctx.transport.send_text(chat_id, text, get_cancel_order_keyboard())


async def notify_manager(ctx: ShopContext, order: Order) -> None:
    """Send the new order summary and its XLSX sheet to the manager chat."""
    manager_chat_id = ctx.settings.manager_chat_id
    if manager_chat_id is None:
        return

    try:
        await ctx.transport.send_text(
            manager_chat_id, format_manager_notice(order, ctx.settings.currency)
        )
        filepath = await asyncio.to_thread(ctx.exporter.export, order)
        await ctx.transport.send_document(manager_chat_id, filepath, caption=f"Order {order.id}")
    except (TelegramAPIError, OSError) as e:
        logger.error(f"Failed to notify manager about order {order.id}: {e}")


# =============================================================================
# OUTCOMES
# =============================================================================

async def respond_to_outcome(ctx: ShopContext, chat_id: int, outcome: WizardOutcome) -> None:
    """Tell the customer what the last wizard transition means for them."""
    result = outcome.result

    if result is WizardResult.STARTED:
        items = outcome.state.draft.items
        await prompt_step(
            ctx,
            chat_id,
            outcome.step,
            prefix=f"🧾 <b>Your order:</b>\n{format_draft_items(items, ctx.settings.currency)}",
        )
    elif result is WizardResult.ALREADY_OPEN:
        await prompt_step(ctx, chat_id, outcome.step, prefix=ALREADY_OPEN_MESSAGE)
    elif result is WizardResult.EMPTY_TARGET:
        await ctx.transport.send_text(chat_id, EMPTY_TARGET_MESSAGE)
    elif result in (WizardResult.NAME_ACCEPTED, WizardResult.ADDRESS_ACCEPTED):
        await prompt_step(ctx, chat_id, outcome.step)
    elif result is WizardResult.INVALID_INPUT:
        await prompt_step(ctx, chat_id, outcome.step, prefix=f"❌ {escape(outcome.error or '')}")
    elif result is WizardResult.CANCELLED:
        await ctx.transport.send_text(chat_id, CANCELLED_MESSAGE, ReplyKeyboardRemove())
    elif result is WizardResult.FINALIZE_FAILED:
        await ctx.transport.send_text(chat_id, FINALIZE_FAILED_MESSAGE)
    elif result is WizardResult.FINALIZED:
        await confirm_order(ctx, chat_id, outcome.order)


async def confirm_order(ctx: ShopContext, chat_id: int, order: Order) -> None:
    payment_url = build_payment_url(
        order, ctx.settings.payment_base_url, ctx.settings.payment_api_key
    )
    # Hide the phone keyboard; inline buttons go on the confirmation itself
    await ctx.transport.send_text(chat_id, THANKS_MESSAGE, ReplyKeyboardRemove())
    await ctx.transport.send_text(
        chat_id,
        format_confirmation(order, ctx.settings.currency, payment_url),
        get_order_submitted_keyboard(payment_url),
    )
    await notify_manager(ctx, order)


# =============================================================================
# ENTRY POINTS
# =============================================================================

async def start_order(
    ctx: ShopContext,
    chat_id: int,
    customer_id: int,
    items: Sequence[DraftItem],
    from_cart: bool = False,
) -> None:
    outcome = ctx.wizard.start(chat_id, customer_id, items, from_cart=from_cart)
    await respond_to_outcome(ctx, chat_id, outcome)


async def handle_buy_now(ctx: ShopContext, event: CallbackEvent) -> Optional[str]:
    """Start a single-item order for the tapped product."""
    product = ctx.snapshot.product(event.command.arg)
    if product is None:
        return "Product is no longer available"

    item = DraftItem(
        product_id=product.id,
        product_name=product.name,
        unit_price=product.price,
        pack_size=product.pack_size,
    )
    await start_order(ctx, event.chat_id, event.user_id, [item])
    return None


async def handle_cancel_order(ctx: ShopContext, event: CallbackEvent) -> Optional[str]:
    if not ctx.sessions.is_open(event.chat_id):
        return "No order in progress"
    outcome = ctx.wizard.cancel(event.chat_id)
    await respond_to_outcome(ctx, event.chat_id, outcome)
    return None


async def handle_order_input(ctx: ShopContext, event: TextEvent) -> None:
    """Feed a message to the open wizard of the chat."""
    outcome = await ctx.wizard.handle_input(event.chat_id, event.user_id, event.text)
    await respond_to_outcome(ctx, event.chat_id, outcome)


async def handle_order_contact(ctx: ShopContext, event: ContactEvent) -> None:
    """A shared contact answers the phone step; earlier steps are re-prompted."""
    contact_phone = event.phone_number if event.is_own else None
    if contact_phone is None:
        await prompt_step(
            ctx,
            event.chat_id,
            ctx.sessions.get(event.chat_id).step,
            prefix="❌ Please share your own contact.",
        )
        return

    state = ctx.sessions.get(event.chat_id)
    if state.step is not WizardStep.AWAITING_PHONE:
        await prompt_step(ctx, event.chat_id, state.step)
        return

    outcome = await ctx.wizard.handle_input(
        event.chat_id, event.user_id, None, contact_phone=contact_phone
    )
    await respond_to_outcome(ctx, event.chat_id, outcome)
