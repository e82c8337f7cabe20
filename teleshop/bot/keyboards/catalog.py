"""
Inline keyboards for catalog navigation and the cart.
"""

from typing import Iterable, Optional

from aiogram.types import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
)
from aiogram.utils.keyboard import InlineKeyboardBuilder

from teleshop.core.cart import CartView
from teleshop.core.catalog.models import Category, Product
from teleshop.core.commands import CommandKind, callback


BACK_TEXT = "🔙 Back"
VERIFY_PHONE_TEXT = "📱 Verify phone number"


def _back_button(kind: CommandKind, arg: Optional[str] = None) -> InlineKeyboardButton:
    return InlineKeyboardButton(text=BACK_TEXT, callback_data=callback(kind, arg))


def _open_product_data(product_id: str, category_id: Optional[str]) -> str:
    """Product button payload; drops the parent category when both ids do not fit."""
    if category_id is not None:
        try:
            return callback(CommandKind.OPEN_PRODUCT, product_id, category_id)
        except ValueError:
            pass
    return callback(CommandKind.OPEN_PRODUCT, product_id)


def get_main_menu_keyboard() -> InlineKeyboardMarkup:
    """Root menu."""
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="🛍 Products", callback_data=callback(CommandKind.PRODUCTS)),
        InlineKeyboardButton(text="🔍 Search", callback_data=callback(CommandKind.SEARCH)),
    )
    builder.row(
        InlineKeyboardButton(text="🛒 Cart", callback_data=callback(CommandKind.VIEW_CART)),
    )
    builder.row(
        InlineKeyboardButton(text="📞 Contact us", callback_data=callback(CommandKind.CONTACT)),
        InlineKeyboardButton(text="ℹ️ Help", callback_data=callback(CommandKind.HELP)),
    )
    return builder.as_markup()


def get_contact_request_keyboard() -> ReplyKeyboardMarkup:
    """Reply keyboard asking the customer to share their own phone number."""
    return ReplyKeyboardMarkup(
        keyboard=[[KeyboardButton(text=VERIFY_PHONE_TEXT, request_contact=True)]],
        resize_keyboard=True,
        one_time_keyboard=True,
        input_field_placeholder="Tap the button to verify",
    )


def get_categories_keyboard(categories: Iterable[Category]) -> InlineKeyboardMarkup:
    """One button per category."""
    builder = InlineKeyboardBuilder()
    for category in categories:
        builder.row(
            InlineKeyboardButton(
                text=f"📂 {category.name}",
                callback_data=callback(CommandKind.OPEN_CATEGORY, category.id),
            )
        )
    builder.row(_back_button(CommandKind.ROOT))
    return builder.as_markup()


def get_products_keyboard(
    products: Iterable[Product],
    category_id: Optional[str] = None,
) -> InlineKeyboardMarkup:
    """
    One button per product.

    Inside a category the product buttons carry the category id so the detail
    view can return there; the back button leads to the category list.
    Without a category it leads to the root menu.
    """
    builder = InlineKeyboardBuilder()
    for product in products:
        builder.row(
            InlineKeyboardButton(
                text=product.name,
                callback_data=_open_product_data(product.id, category_id),
            )
        )
    if category_id is not None:
        builder.row(_back_button(CommandKind.PRODUCTS))
    else:
        builder.row(_back_button(CommandKind.ROOT))
    return builder.as_markup()


def get_search_results_keyboard(products: Iterable[Product]) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    for product in products:
        builder.row(
            InlineKeyboardButton(
                text=f"🔸 {product.name}",
                callback_data=callback(CommandKind.OPEN_PRODUCT, product.id),
            )
        )
    builder.row(
        InlineKeyboardButton(text="🛍 Products", callback_data=callback(CommandKind.PRODUCTS)),
    )
    return builder.as_markup()


def get_product_keyboard(product: Product, category_id: Optional[str] = None) -> InlineKeyboardMarkup:
    """Buy / add to cart / back to the context the customer came from."""
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="🛒 Buy now", callback_data=callback(CommandKind.BUY_NOW, product.id)),
    )
    builder.row(
        InlineKeyboardButton(
            text="➕ Add to cart",
            callback_data=callback(CommandKind.ADD_TO_CART, product.id),
        ),
        InlineKeyboardButton(text="🧺 View cart", callback_data=callback(CommandKind.VIEW_CART)),
    )
    if category_id is not None:
        builder.row(_back_button(CommandKind.OPEN_CATEGORY, category_id))
    else:
        builder.row(_back_button(CommandKind.PRODUCTS))
    return builder.as_markup()


def get_inline_result_keyboard(product: Product) -> InlineKeyboardMarkup:
    """Button attached to inline search results."""
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="🛒 Buy", callback_data=callback(CommandKind.BUY_NOW, product.id)),
    )
    return builder.as_markup()


def get_cart_keyboard(view: CartView, checkout_url: Optional[str] = None) -> InlineKeyboardMarkup:
    """Cart lines with decrement buttons and checkout options."""
    builder = InlineKeyboardBuilder()
    for line in view.lines:
        builder.row(
            InlineKeyboardButton(
                text=f"➖ {line.product.name} ({line.quantity})",
                callback_data=callback(CommandKind.REMOVE_FROM_CART, line.product.id),
            ),
            InlineKeyboardButton(
                text="➕",
                callback_data=callback(CommandKind.ADD_TO_CART, line.product.id),
            ),
        )
    builder.row(
        InlineKeyboardButton(text="✅ Checkout in chat", callback_data=callback(CommandKind.CHECKOUT)),
    )
    if checkout_url:
        builder.row(InlineKeyboardButton(text="🌐 Checkout on website", url=checkout_url))
    builder.row(
        InlineKeyboardButton(text="🗑 Clear cart", callback_data=callback(CommandKind.CLEAR_CART)),
        InlineKeyboardButton(text="🛍 Continue shopping", callback_data=callback(CommandKind.PRODUCTS)),
    )
    return builder.as_markup()


def get_empty_cart_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="🛍 Products", callback_data=callback(CommandKind.PRODUCTS)),
    )
    return builder.as_markup()
