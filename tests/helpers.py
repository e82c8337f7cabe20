"""
Shared fakes and builders for the test suites.
"""

import os
import tempfile
from datetime import datetime, timedelta
from itertools import count
from pathlib import Path
from typing import Optional

from aiogram.types import (
    CallbackQuery,
    Chat,
    Contact,
    InlineQuery,
    Message,
    Update,
    User,
)

from teleshop.bot.context import ShopContext
from teleshop.bot.dispatcher import ShopDispatcher
from teleshop.bot.poller import Poller
from teleshop.config import Settings
from teleshop.core.cart import CartStore
from teleshop.core.catalog.models import Category, Product
from teleshop.core.catalog.snapshot import CatalogSnapshotLoader
from teleshop.core.cursor import CursorTracker
from teleshop.core.interfaces import MessagingTransport
from teleshop.core.orders.exporter import OrderExporter
from teleshop.core.orders.finalize import OrderFinalizer
from teleshop.core.orders.sessions import SessionStore
from teleshop.core.orders.wizard import OrderWizard
from teleshop.db.repositories import SqlCatalogStore, SqlContactRegistry, SqlOrderLedger
from teleshop.db.sqlite import Database


CUSTOMER_ID = 100

_ids = count(1)


class FakeTransport(MessagingTransport):
    """Records every outbound call and serves queued updates."""

    def __init__(self, updates: Optional[list[Update]] = None):
        self.updates = list(updates or [])
        self.fetch_error: Optional[Exception] = None
        self.offsets: list[int] = []
        self.sent: list[tuple] = []
        self.photos: list[tuple] = []
        self.documents: list[tuple] = []
        self.acks: list[tuple] = []
        self.inline_answers: list[tuple] = []

    async def fetch_events(self, offset: int) -> list[Update]:
        self.offsets.append(offset)
        if self.fetch_error is not None:
            raise self.fetch_error
        return [u for u in self.updates if u.update_id >= offset]

    async def send_text(self, chat_id, text, reply_markup=None) -> None:
        self.sent.append((chat_id, text, reply_markup))

    async def send_photo(self, chat_id, photo, caption, reply_markup=None) -> None:
        self.photos.append((chat_id, photo, caption, reply_markup))

    async def send_document(self, chat_id, path, caption="") -> None:
        self.documents.append((chat_id, Path(path), caption))

    async def acknowledge(self, callback_id, text=None) -> None:
        self.acks.append((callback_id, text))

    async def answer_inline_query(self, query_id, results) -> None:
        self.inline_answers.append((query_id, list(results)))

    @property
    def texts(self) -> list[str]:
        return [text for _, text, _ in self.sent]

    @property
    def message_count(self) -> int:
        return len(self.sent) + len(self.photos) + len(self.documents)


# =============================================================================
# UPDATE BUILDERS
# =============================================================================

def make_user(user_id: int = CUSTOMER_ID, first_name: str = "Ali") -> User:
    return User(id=user_id, is_bot=False, first_name=first_name)


def make_message(
    text: Optional[str] = None,
    user_id: int = CUSTOMER_ID,
    contact: Optional[Contact] = None,
) -> Message:
    return Message(
        message_id=next(_ids),
        date=datetime.now(),
        chat=Chat(id=user_id, type="private"),
        from_user=make_user(user_id),
        text=text,
        contact=contact,
    )


def text_update(update_id: int, text: str, user_id: int = CUSTOMER_ID) -> Update:
    return Update(update_id=update_id, message=make_message(text, user_id))


def contact_update(
    update_id: int,
    phone: str,
    user_id: int = CUSTOMER_ID,
    contact_user_id: Optional[int] = CUSTOMER_ID,
) -> Update:
    contact = Contact(phone_number=phone, first_name="Ali", user_id=contact_user_id)
    return Update(update_id=update_id, message=make_message(None, user_id, contact=contact))


def callback_update(
    update_id: int,
    data: str,
    user_id: int = CUSTOMER_ID,
    with_message: bool = True,
) -> Update:
    return Update(
        update_id=update_id,
        callback_query=CallbackQuery(
            id=f"cb{update_id}",
            from_user=make_user(user_id),
            chat_instance="chat-instance",
            data=data,
            message=make_message("menu", user_id) if with_message else None,
        ),
    )


def inline_update(update_id: int, query: str, user_id: int = CUSTOMER_ID) -> Update:
    return Update(
        update_id=update_id,
        inline_query=InlineQuery(
            id=f"iq{update_id}",
            from_user=make_user(user_id),
            query=query,
            offset="",
        ),
    )


# =============================================================================
# CATALOG FIXTURES
# =============================================================================

ELECTRONICS = Category(id="c1", name="Electronics")
BOOKS = Category(id="c2", name="Books")

HEADPHONE = Product(
    id="p1",
    name="Sony Headphone",
    price=3_500_000,
    code="SN-100",
    category_id="c1",
    created_at=datetime(2024, 1, 1),
)
SPEAKER = Product(
    id="p2",
    name="JBL Speaker",
    price=2_000_000,
    code="JB-200",
    category_id="c1",
    image_url="https://example.com/speaker.jpg",
    created_at=datetime(2024, 2, 1),
)
NOVEL = Product(
    id="p3",
    name="Old Novel",
    price=150_000,
    category_id="gone",
    created_at=datetime(2024, 3, 1),
)


def make_settings(**overrides) -> Settings:
    values = dict(
        telegram_bot_token=None,
        payment_api_key=None,
        storefront_url=None,
        manager_chat_id=None,
        session_ttl_minutes=60,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


class ShopTestCase:
    """
    Mixin building a full shop over a temporary SQLite file.
    Use together with ``unittest.IsolatedAsyncioTestCase``.
    """

    products = (HEADPHONE, SPEAKER)
    categories = (ELECTRONICS,)
    settings_overrides: dict = {}

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "test.sqlite")
        self.database = Database(f"sqlite+aiosqlite:///{self.db_path}")

    async def asyncSetUp(self):
        await self.database.init()
        self.catalog = SqlCatalogStore(self.database)
        self.ledger = SqlOrderLedger(self.database)
        self.contacts = SqlContactRegistry(self.database)
        for category in self.categories:
            await self.catalog.save_category(category)
        for product in self.products:
            await self.catalog.save_product(product)

        self.settings = make_settings(
            data_dir=Path(self.temp_dir.name), **self.settings_overrides
        )
        self.transport = FakeTransport()
        self.sessions = SessionStore(ttl=timedelta(minutes=self.settings.session_ttl_minutes))
        self.cart = CartStore(storefront_url=self.settings.storefront_url)
        self.finalizer = OrderFinalizer(
            self.ledger,
            self.sessions,
            self.cart,
            shipping_method=self.settings.shipping_method,
            shipping_cost=self.settings.shipping_cost,
        )
        self.wizard = OrderWizard(self.sessions, self.contacts, self.finalizer)
        self.ctx = ShopContext(
            transport=self.transport,
            cart=self.cart,
            sessions=self.sessions,
            wizard=self.wizard,
            contacts=self.contacts,
            exporter=OrderExporter(self.settings.orders_dir, self.settings.currency),
            settings=self.settings,
        )
        self.dispatcher = ShopDispatcher(self.ctx)
        self.cursor = CursorTracker()
        self.poller = Poller(
            transport=self.transport,
            loader=CatalogSnapshotLoader(self.catalog),
            dispatcher=self.dispatcher,
            cursor=self.cursor,
            interval=0,
        )

    async def asyncTearDown(self):
        await self.database.close()

    def tearDown(self):
        self.temp_dir.cleanup()

    async def feed(self, *updates: Update) -> int:
        """Queue updates and run one poll tick."""
        self.transport.updates.extend(updates)
        return await self.poller.tick()
