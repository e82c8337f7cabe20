"""
Event router.

Each update is classified into exactly one event and handled by exactly one
route: inline queries, button taps (by command kind), text and shared contacts.
"""

import logging
from typing import Awaitable, Callable, Optional

from aiogram.exceptions import TelegramAPIError
from aiogram.types import Update

from teleshop.bot.context import ShopContext
from teleshop.bot.handlers import build_callback_routes
from teleshop.bot.handlers.catalog import handle_inline_query
from teleshop.bot.handlers.order import handle_order_input
from teleshop.bot.handlers.start import handle_contact, handle_start, handle_text
from teleshop.core.commands import CommandKind
from teleshop.core.events import (
    CallbackEvent,
    ContactEvent,
    Event,
    InlineQueryEvent,
    TextEvent,
    UnknownEvent,
    classify,
)

logger = logging.getLogger(__name__)


CallbackHandler = Callable[[ShopContext, CallbackEvent], Awaitable[Optional[str]]]


class ShopDispatcher:
    """Routes classified events to their handlers."""

    def __init__(self, ctx: ShopContext, callback_routes: Optional[dict[CommandKind, CallbackHandler]] = None):
        self.ctx = ctx
        self.callback_routes = callback_routes if callback_routes is not None else build_callback_routes()

    async def feed_update(self, update: Update) -> None:
        await self.dispatch(classify(update))

    async def dispatch(self, event: Event) -> None:
        if isinstance(event, InlineQueryEvent):
            await handle_inline_query(self.ctx, event)
        elif isinstance(event, CallbackEvent):
            await self._dispatch_callback(event)
        elif isinstance(event, ContactEvent):
            await handle_contact(self.ctx, event)
        elif isinstance(event, TextEvent):
            await self._dispatch_text(event)
        elif isinstance(event, UnknownEvent):
            logger.debug(f"Skipping update {event.update_id}: {event.reason}")

    async def _dispatch_callback(self, event: CallbackEvent) -> None:
        """Run the command handler; the tap is acknowledged on every path."""
        toast = None
        try:
            handler = self.callback_routes.get(event.command.kind)
            if handler is None:
                logger.debug(f"Ignoring unknown callback data {event.command.raw!r}")
                return
            toast = await handler(self.ctx, event)
        finally:
            try:
                await self.ctx.transport.acknowledge(event.callback_id, toast)
            except TelegramAPIError as e:
                # Queries older than a few minutes can no longer be answered
                logger.warning(f"Failed to acknowledge callback {event.callback_id}: {e}")

    async def _dispatch_text(self, event: TextEvent) -> None:
        if self.ctx.sessions.is_open(event.chat_id):
            await handle_order_input(self.ctx, event)
            # /start also restarts the conversation after tearing the order down
            command = event.text.split()[0].lower().split("@", 1)[0] if event.text.strip() else ""
            if command == "/start" and not self.ctx.sessions.is_open(event.chat_id):
                await handle_start(self.ctx, event)
        else:
            await handle_text(self.ctx, event)
