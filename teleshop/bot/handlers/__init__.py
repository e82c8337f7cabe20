"""
Bot handlers registration.
"""

from teleshop.bot.handlers import cart, catalog, order, start
from teleshop.core.commands import CommandKind


def build_callback_routes() -> dict:
    """Route table from button command kind to its handler."""
    return {
        CommandKind.ROOT: catalog.handle_root,
        CommandKind.PRODUCTS: catalog.handle_products,
        CommandKind.SEARCH: catalog.handle_search_hint,
        CommandKind.CONTACT: start.handle_contact_callback,
        CommandKind.HELP: start.handle_help_callback,
        CommandKind.OPEN_CATEGORY: catalog.handle_open_category,
        CommandKind.OPEN_PRODUCT: catalog.handle_open_product,
        CommandKind.ADD_TO_CART: cart.handle_add_to_cart,
        CommandKind.REMOVE_FROM_CART: cart.handle_remove_from_cart,
        CommandKind.VIEW_CART: cart.handle_view_cart,
        CommandKind.CLEAR_CART: cart.handle_clear_cart,
        CommandKind.CHECKOUT: cart.handle_checkout,
        CommandKind.BUY_NOW: order.handle_buy_now,
        CommandKind.CANCEL_ORDER: order.handle_cancel_order,
    }
