"""
Messaging transport over the Telegram Bot API.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from aiogram import Bot
from aiogram.types import BufferedInputFile, FSInputFile, InlineQueryResultArticle, Update

from teleshop.core.interfaces import Markup, MessagingTransport

logger = logging.getLogger(__name__)


# Update types the storefront reacts to
ALLOWED_UPDATES = ["message", "callback_query", "inline_query"]


class AiogramTransport(MessagingTransport):
    """Thin wrapper over ``aiogram.Bot`` calls."""

    def __init__(self, bot: Bot, batch_size: int = 50):
        self.bot = bot
        self.batch_size = batch_size

    async def fetch_events(self, offset: int) -> list[Update]:
        return await self.bot.get_updates(
            offset=offset,
            limit=self.batch_size,
            timeout=0,
            allowed_updates=ALLOWED_UPDATES,
        )

    async def send_text(self, chat_id: int, text: str, reply_markup: Optional[Markup] = None) -> None:
        await self.bot.send_message(chat_id=chat_id, text=text, reply_markup=reply_markup)

    async def send_photo(
        self,
        chat_id: int,
        photo: Union[bytes, str],
        caption: str,
        reply_markup: Optional[Markup] = None,
    ) -> None:
        if isinstance(photo, bytes):
            photo = BufferedInputFile(photo, filename="product.jpg")
        await self.bot.send_photo(
            chat_id=chat_id,
            photo=photo,
            caption=caption,
            reply_markup=reply_markup,
        )

    async def send_document(self, chat_id: int, path: Path, caption: str = "") -> None:
        await self.bot.send_document(chat_id=chat_id, document=FSInputFile(path), caption=caption)

    async def acknowledge(self, callback_id: str, text: Optional[str] = None) -> None:
        await self.bot.answer_callback_query(callback_query_id=callback_id, text=text)

    async def answer_inline_query(
        self, query_id: str, results: Sequence[InlineQueryResultArticle]
    ) -> None:
        await self.bot.answer_inline_query(
            inline_query_id=query_id,
            results=list(results),
            cache_time=1,
        )
