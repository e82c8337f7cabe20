"""
Interfaces of the storage collaborators used by the conversational core.
Allows swapping the SQL-backed stores for other backends (or fakes in tests).
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Union

from aiogram.types import (
    InlineKeyboardMarkup,
    InlineQueryResultArticle,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
    Update,
)

from teleshop.core.catalog.models import Category, Product
from teleshop.core.orders.models import Order, OrderStatus, VerifiedContact


Markup = Union[InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove]


class MessagingTransport(ABC):
    """Primitive Telegram operations used by the bot."""

    @abstractmethod
    async def fetch_events(self, offset: int) -> list[Update]:
        """Fetch the next batch of updates with id >= offset."""
        pass

    @abstractmethod
    async def send_text(self, chat_id: int, text: str, reply_markup: Optional[Markup] = None) -> None:
        pass

    @abstractmethod
    async def send_photo(
        self,
        chat_id: int,
        photo: Union[bytes, str],
        caption: str,
        reply_markup: Optional[Markup] = None,
    ) -> None:
        """Send a photo given as raw bytes or as a URL."""
        pass

    @abstractmethod
    async def send_document(self, chat_id: int, path: Path, caption: str = "") -> None:
        pass

    @abstractmethod
    async def acknowledge(self, callback_id: str, text: Optional[str] = None) -> None:
        """Answer a callback query so the client stops showing a spinner."""
        pass

    @abstractmethod
    async def answer_inline_query(
        self, query_id: str, results: Sequence[InlineQueryResultArticle]
    ) -> None:
        pass


class CatalogStore(ABC):
    """Read access to the shared product catalog."""

    @abstractmethod
    async def list_products(self) -> list[Product]:
        """Return every product currently in the catalog."""
        pass

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        """Return every category currently in the catalog."""
        pass


class OrderLedger(ABC):
    """System of record for finalized orders."""

    @abstractmethod
    async def create_order(self, order: Order) -> None:
        """
        Persist a new order.

        Raises:
            OrderLedgerError: if the order could not be written
        """
        pass

    @abstractmethod
    async def get_order(self, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def list_orders(self) -> list[Order]:
        pass

    @abstractmethod
    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        """
        Change the status of an order and return the updated record.

        Raises:
            OrderNotFound: if no such order exists
        """
        pass


class ContactRegistry(ABC):
    """Chat identities associated with a verified phone number."""

    @abstractmethod
    async def find(self, user_id: int) -> Optional[VerifiedContact]:
        pass

    @abstractmethod
    async def find_by_phone(self, phone: str) -> Optional[VerifiedContact]:
        """Find a contact whose phone matches after normalization."""
        pass

    @abstractmethod
    async def upsert(self, contact: VerifiedContact) -> None:
        pass

    @abstractmethod
    async def list_contacts(self) -> list[VerifiedContact]:
        pass
