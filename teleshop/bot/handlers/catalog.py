"""
Catalog browsing handlers: menus, categories, product details, search.
"""

import logging
from html import escape
from typing import Optional

from aiogram.types import InlineQueryResultArticle, InputTextMessageContent

from teleshop.bot.context import ShopContext
from teleshop.bot.keyboards.catalog import get_inline_result_keyboard
from teleshop.bot.navigator import (
    format_price,
    render_catalog_root,
    render_category,
    render_main_menu,
    render_product,
    render_search_results,
)
from teleshop.bot.replies import send_reply
from teleshop.core.catalog.models import Product
from teleshop.core.catalog.search import search_products
from teleshop.core.events import CallbackEvent, InlineQueryEvent

logger = logging.getLogger(__name__)


SEARCH_HINT_MESSAGE = (
    "🔍 Type a product name or code and send it to me.\n\n"
    "You can also search from any chat: type the bot username followed by a query."
)


# =============================================================================
# INLINE SEARCH
# =============================================================================

def build_inline_result(product: Product, currency: str) -> InlineQueryResultArticle:
    description = f"{format_price(product.price, currency)}"
    if product.code:
        description += f" | code {product.code}"
    return InlineQueryResultArticle(
        id=product.id,
        title=product.name,
        description=description,
        thumbnail_url=product.image_url if product.has_remote_image else None,
        input_message_content=InputTextMessageContent(
            message_text=(
                f"🛍 <b>{escape(product.name)}</b>\n"
                f"💵 {format_price(product.price, currency)}"
            ),
        ),
        reply_markup=get_inline_result_keyboard(product),
    )


async def handle_inline_query(ctx: ShopContext, event: InlineQueryEvent) -> None:
    """Answer search-as-you-type from the current snapshot."""
    products = search_products(
        ctx.snapshot.products, event.query, ctx.settings.inline_results_limit
    )
    results = [build_inline_result(p, ctx.settings.currency) for p in products]
    await ctx.transport.answer_inline_query(event.query_id, results)
    logger.debug(f"Inline query {event.query!r} from {event.user_id}: {len(results)} results")


# =============================================================================
# NAVIGATION CALLBACKS
# =============================================================================

async def handle_root(ctx: ShopContext, event: CallbackEvent) -> Optional[str]:
    await send_reply(ctx.transport, event.chat_id, render_main_menu())
    return None


async def handle_products(ctx: ShopContext, event: CallbackEvent) -> Optional[str]:
    reply = render_catalog_root(ctx.snapshot, ctx.settings.list_limit)
    await send_reply(ctx.transport, event.chat_id, reply)
    return None


async def handle_open_category(ctx: ShopContext, event: CallbackEvent) -> Optional[str]:
    reply = render_category(ctx.snapshot, event.command.arg, ctx.settings.list_limit)
    await send_reply(ctx.transport, event.chat_id, reply)
    return None


async def handle_open_product(ctx: ShopContext, event: CallbackEvent) -> Optional[str]:
    reply = render_product(
        ctx.snapshot,
        event.command.arg,
        ctx.settings.currency,
        category_id=event.command.context,
    )
    await send_reply(ctx.transport, event.chat_id, reply)
    return None


async def handle_search_hint(ctx: ShopContext, event: CallbackEvent) -> Optional[str]:
    await ctx.transport.send_text(event.chat_id, SEARCH_HINT_MESSAGE)
    return None


async def search_catalog(ctx: ShopContext, chat_id: int, query: str) -> None:
    """Free-text catalog search."""
    products = search_products(ctx.snapshot.products, query, ctx.settings.search_results_limit)
    reply = render_search_results(query, products, ctx.settings.currency)
    await send_reply(ctx.transport, chat_id, reply)
