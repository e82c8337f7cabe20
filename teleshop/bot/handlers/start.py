"""
Start, help and free-text command handlers.
"""

import logging
from typing import Optional

from teleshop.bot.context import ShopContext
from teleshop.bot.handlers.cart import show_cart
from teleshop.bot.handlers.catalog import SEARCH_HINT_MESSAGE, search_catalog
from teleshop.bot.handlers.order import handle_order_contact
from teleshop.bot.keyboards.catalog import get_contact_request_keyboard, get_main_menu_keyboard
from teleshop.bot.navigator import render_catalog_root
from teleshop.bot.replies import send_reply
from teleshop.core.events import CallbackEvent, ContactEvent, TextEvent
from teleshop.core.orders.models import VerifiedContact

logger = logging.getLogger(__name__)


WELCOME_MESSAGE = """👋 <b>Welcome to our shop!</b>

Browse the catalog, add products to your cart and order right here in the chat.

<b>Commands:</b>
/products — browse the catalog
/search — find a product
/cart — your cart
/contact — contact us
/help — help

💡 <i>Just send a product name to search for it.</i>"""


VERIFY_MESSAGE = """👋 <b>Welcome to our shop!</b>

To speed up your orders, please verify your phone number with the button below.
You can also skip this and start browsing right away."""


HELP_MESSAGE = """🤖 <b>How to use the shop:</b>

<b>Find products:</b>
• Tap «🛍 Products» to browse by category
• Send a product name or code to search
• Type the bot username in any chat for instant search

<b>Order:</b>
• «🛒 Buy now» on a product orders it right away
• «➕ Add to cart» collects several products, then «✅ Checkout in chat»

<b>Commands:</b>
/start — main menu (also cancels an order in progress)
/cancel — cancel the order in progress
/help — this help"""


UNKNOWN_COMMAND_MESSAGE = "🤔 Unknown command. Send /help to see what I can do."

VERIFIED_MESSAGE = "✅ Your phone number is verified."


# =============================================================================
# TEXT COMMANDS
# =============================================================================

async def handle_start(ctx: ShopContext, event: TextEvent) -> None:
    """Welcome; unverified customers are asked to share their contact first."""
    contact = await ctx.contacts.find(event.user_id)
    if contact is None:
        await ctx.transport.send_text(event.chat_id, VERIFY_MESSAGE, get_contact_request_keyboard())
    await ctx.transport.send_text(event.chat_id, WELCOME_MESSAGE, get_main_menu_keyboard())


async def send_help(ctx: ShopContext, chat_id: int) -> None:
    await ctx.transport.send_text(chat_id, HELP_MESSAGE, get_main_menu_keyboard())


async def send_contact_info(ctx: ShopContext, chat_id: int) -> None:
    await ctx.transport.send_text(chat_id, ctx.settings.contact_message, get_main_menu_keyboard())


async def send_catalog(ctx: ShopContext, chat_id: int) -> None:
    await send_reply(ctx.transport, chat_id, render_catalog_root(ctx.snapshot, ctx.settings.list_limit))


async def handle_text(ctx: ShopContext, event: TextEvent) -> None:
    """Text from a chat without an order in progress."""
    text = event.text
    if not text:
        return

    command = text.split()[0].lower()
    # "/cmd@botname" is how commands look in groups
    command = command.split("@", 1)[0]

    if command == "/start":
        await handle_start(ctx, event)
    elif command == "/help":
        await send_help(ctx, event.chat_id)
    elif command in ("/products", "/browse", "/catalog"):
        await send_catalog(ctx, event.chat_id)
    elif command == "/search":
        query = text[len(text.split()[0]):].strip()
        if query:
            await search_catalog(ctx, event.chat_id, query)
        else:
            await ctx.transport.send_text(event.chat_id, SEARCH_HINT_MESSAGE)
    elif command == "/contact":
        await send_contact_info(ctx, event.chat_id)
    elif command == "/cart":
        await show_cart(ctx, event.chat_id, event.user_id)
    elif command == "/cancel":
        await ctx.transport.send_text(event.chat_id, "No order in progress.", get_main_menu_keyboard())
    elif command.startswith("/"):
        await ctx.transport.send_text(event.chat_id, UNKNOWN_COMMAND_MESSAGE)
    else:
        await search_catalog(ctx, event.chat_id, text)


# =============================================================================
# CONTACT SHARING
# =============================================================================

async def handle_contact(ctx: ShopContext, event: ContactEvent) -> None:
    """Record the customer's own contact, then continue the open order if any."""
    if event.is_own:
        await ctx.contacts.upsert(
            VerifiedContact(
                user_id=event.user_id,
                phone_number=event.phone_number,
                first_name=event.first_name,
                last_name=event.last_name,
                username=event.username,
            )
        )
        logger.info(f"Contact verified for user {event.user_id}")

    if ctx.sessions.is_open(event.chat_id):
        await handle_order_contact(ctx, event)
        return

    if event.is_own:
        await ctx.transport.send_text(event.chat_id, VERIFIED_MESSAGE, get_main_menu_keyboard())
    else:
        await ctx.transport.send_text(
            event.chat_id,
            "❌ Please share your own contact using the button.",
            get_contact_request_keyboard(),
        )


# =============================================================================
# MENU CALLBACKS
# =============================================================================

async def handle_help_callback(ctx: ShopContext, event: CallbackEvent) -> Optional[str]:
    await send_help(ctx, event.chat_id)
    return None


async def handle_contact_callback(ctx: ShopContext, event: CallbackEvent) -> Optional[str]:
    await send_contact_info(ctx, event.chat_id)
    return None
