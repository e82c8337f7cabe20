"""
Classification of inbound Telegram updates.

Every update maps to exactly one event; the router handles each event kind
exclusively.
"""

from dataclasses import dataclass
from typing import Optional, Union

from aiogram.types import CallbackQuery, Message, Update

from teleshop.core.commands import Command


@dataclass(frozen=True)
class InlineQueryEvent:
    update_id: int
    query_id: str
    user_id: int
    query: str


@dataclass(frozen=True)
class CallbackEvent:
    update_id: int
    callback_id: str
    chat_id: int
    user_id: int
    command: Command


@dataclass(frozen=True)
class TextEvent:
    update_id: int
    chat_id: int
    user_id: int
    text: str
    first_name: str = ""


@dataclass(frozen=True)
class ContactEvent:
    update_id: int
    chat_id: int
    user_id: int
    phone_number: str
    is_own: bool
    first_name: str = ""
    last_name: Optional[str] = None
    username: Optional[str] = None


@dataclass(frozen=True)
class UnknownEvent:
    update_id: int
    reason: str


Event = Union[InlineQueryEvent, CallbackEvent, TextEvent, ContactEvent, UnknownEvent]


def _callback_chat_id(callback: CallbackQuery) -> int:
    # Buttons on inline-result messages have no message; answer in the private chat
    message = callback.message
    if message is not None and message.chat is not None:
        return message.chat.id
    return callback.from_user.id


def _classify_message(update_id: int, message: Message) -> Event:
    if message.from_user is None:
        return UnknownEvent(update_id, "message without sender")

    user = message.from_user
    if message.contact is not None:
        contact = message.contact
        return ContactEvent(
            update_id=update_id,
            chat_id=message.chat.id,
            user_id=user.id,
            phone_number=contact.phone_number,
            is_own=contact.user_id == user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            username=user.username,
        )

    # Photos, stickers etc. arrive as empty text so an open wizard can re-prompt
    return TextEvent(
        update_id=update_id,
        chat_id=message.chat.id,
        user_id=user.id,
        text=(message.text or "").strip(),
        first_name=user.first_name,
    )


def classify(update: Update) -> Event:
    """Map a Telegram update to a single event."""
    if update.inline_query is not None:
        query = update.inline_query
        return InlineQueryEvent(
            update_id=update.update_id,
            query_id=query.id,
            user_id=query.from_user.id,
            query=query.query,
        )

    if update.callback_query is not None:
        callback = update.callback_query
        return CallbackEvent(
            update_id=update.update_id,
            callback_id=callback.id,
            chat_id=_callback_chat_id(callback),
            user_id=callback.from_user.id,
            command=Command.decode(callback.data),
        )

    if update.message is not None:
        return _classify_message(update.update_id, update.message)

    return UnknownEvent(update.update_id, "unsupported update type")
