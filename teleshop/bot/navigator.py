"""
Catalog navigation rendering.

Pure functions from the catalog snapshot to replies. Nothing is remembered
between steps: the parent category travels inside the button payload.
"""

import base64
import binascii
import logging
from html import escape
from typing import Optional

from teleshop.bot.keyboards.catalog import (
    get_cart_keyboard,
    get_categories_keyboard,
    get_empty_cart_keyboard,
    get_main_menu_keyboard,
    get_product_keyboard,
    get_products_keyboard,
    get_search_results_keyboard,
)
from teleshop.bot.replies import Reply
from teleshop.core.cart import CartView
from teleshop.core.catalog.models import Product
from teleshop.core.catalog.snapshot import CatalogSnapshot

logger = logging.getLogger(__name__)


def format_price(amount: int, currency: str) -> str:
    return f"{amount:,} {currency}"


def decode_data_uri(uri: str) -> Optional[bytes]:
    """Decode a base64 ``data:`` URI, None when it is malformed."""
    if not uri.startswith("data:") or "," not in uri:
        return None
    header, payload = uri.split(",", 1)
    if ";base64" not in header:
        return None
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        logger.warning("Product image is not valid base64")
        return None


def render_main_menu(greeting: str = "🏠 <b>Main menu</b>") -> Reply:
    return Reply(greeting, get_main_menu_keyboard())


def render_catalog_root(snapshot: CatalogSnapshot, limit: int) -> Reply:
    """Category list, or a flat list of the newest products without categories."""
    if not snapshot.categories:
        if not snapshot.products:
            return Reply("😔 No products available yet.", get_main_menu_keyboard())
        products = snapshot.newest_products()[:limit]
        return Reply("🛍 <b>Products:</b>", get_products_keyboard(products))

    return Reply("🗂 <b>Choose a category:</b>", get_categories_keyboard(snapshot.categories))


def render_category(snapshot: CatalogSnapshot, category_id: str, limit: int) -> Reply:
    category = snapshot.category(category_id)
    if category is None:
        return Reply(
            "❌ This category is no longer available.",
            get_categories_keyboard(snapshot.categories),
        )

    products = snapshot.products_in(category_id)[:limit]
    text = f"📂 Category: <b>{escape(category.name)}</b>"
    if not products:
        text += "\n\nNo products in this category yet."
    return Reply(text, get_products_keyboard(products, category_id))


# Telegram rejects longer photo captions and messages
MAX_CAPTION_LENGTH = 1024
MAX_MESSAGE_LENGTH = 4096


def truncate_escaped(text: str, limit: int) -> str:
    """HTML-escaped ``text`` cut to at most ``limit`` characters."""
    if len(escape(text)) <= limit:
        return escape(text)
    text = text[:max(limit - 1, 0)]
    while text and len(escape(text)) > limit - 1:
        text = text[:-1]
    return escape(text) + "…"


def format_product_details(
    product: Product,
    category_name: str,
    currency: str,
    max_length: Optional[int] = None,
) -> str:
    """Detail text; the description is shortened to keep it within ``max_length``."""
    lines = [
        f"🛍 <b>{escape(product.name)}</b>",
        f"🔢 Code: {escape(product.code or '---')}",
        f"📦 Pack size: {product.pack_size}",
        f"📂 Category: {escape(category_name)}",
        f"💵 Price: {format_price(product.price, currency)}",
    ]
    text = "\n".join(lines)
    if not product.description:
        return text

    prefix = "\n\n📝 "
    if max_length is None:
        return f"{text}{prefix}{escape(product.description)}"
    room = max_length - len(text) - len(prefix)
    if room <= 0:
        return text
    return f"{text}{prefix}{truncate_escaped(product.description, room)}"


def render_product(
    snapshot: CatalogSnapshot,
    product_id: str,
    currency: str,
    category_id: Optional[str] = None,
) -> Reply:
    """Product details; back returns to ``category_id`` or the catalog root."""
    product = snapshot.product(product_id)
    if product is None:
        return Reply("❌ Product not found.", get_main_menu_keyboard())

    # A stale payload may point to a category that was deleted meanwhile
    if category_id is not None and snapshot.category(category_id) is None:
        category_id = None

    photo = None
    if product.has_remote_image:
        photo = product.image_url
    elif product.has_inline_image:
        photo = decode_data_uri(product.image_url)

    text = format_product_details(
        product,
        snapshot.category_name(product.category_id),
        currency,
        max_length=MAX_CAPTION_LENGTH if photo is not None else MAX_MESSAGE_LENGTH,
    )
    return Reply(text, get_product_keyboard(product, category_id), photo=photo)


def render_search_results(
    query: str,
    products: list[Product],
    currency: str,
) -> Reply:
    if not products:
        return Reply(
            f"❌ No product found for \"{escape(query)}\".",
            get_main_menu_keyboard(),
        )

    lines = [f"🔎 Results for \"{escape(query)}\":", ""]
    for i, product in enumerate(products, 1):
        lines.append(
            f"{i}. <b>{escape(product.name)}</b> (code: {escape(product.code or '-')})\n"
            f"💵 {format_price(product.price, currency)}"
        )
    return Reply("\n".join(lines), get_search_results_keyboard(products))


def render_cart(view: CartView, currency: str, checkout_url: Optional[str] = None) -> Reply:
    if view.is_empty:
        return Reply("🛒 Your cart is empty.", get_empty_cart_keyboard())

    lines = ["🛒 <b>Your cart</b>", ""]
    for line in view.lines:
        lines.append(
            f"• {escape(line.product.name)} — {line.quantity} × "
            f"{format_price(line.product.price, currency)}"
        )
    if view.missing_product_ids:
        lines.append("")
        lines.append(f"⚠️ {len(view.missing_product_ids)} item(s) are no longer available.")
    lines.append("")
    lines.append(f"💰 Subtotal: <b>{format_price(view.subtotal, currency)}</b>")
    return Reply("\n".join(lines), get_cart_keyboard(view, checkout_url))
