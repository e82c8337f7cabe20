"""
Keyboards for the order flow.
"""

from typing import Optional

from aiogram.types import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
)
from aiogram.utils.keyboard import InlineKeyboardBuilder

from teleshop.core.commands import CommandKind, callback
from teleshop.core.orders.wizard import CANCEL_BUTTON_TEXT


def get_cancel_order_keyboard() -> InlineKeyboardMarkup:
    """Cancel button shown under every wizard prompt."""
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text=CANCEL_BUTTON_TEXT, callback_data=callback(CommandKind.CANCEL_ORDER)),
    )
    return builder.as_markup()


def get_phone_request_keyboard() -> ReplyKeyboardMarkup:
    """Share-contact button; the cancel text is a cancel keyword."""
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text="📱 Send my number", request_contact=True)],
            [KeyboardButton(text=CANCEL_BUTTON_TEXT)],
        ],
        resize_keyboard=True,
        one_time_keyboard=True,
        input_field_placeholder="09121234567",
    )


def get_order_submitted_keyboard(payment_url: Optional[str] = None) -> InlineKeyboardMarkup:
    """Keyboard after order submitted."""
    builder = InlineKeyboardBuilder()
    if payment_url:
        builder.row(InlineKeyboardButton(text="💳 Pay online", url=payment_url))
    builder.row(
        InlineKeyboardButton(text="🛍 Back to shop", callback_data=callback(CommandKind.PRODUCTS)),
    )
    return builder.as_markup()
