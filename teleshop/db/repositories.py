"""
SQL-backed catalog store, order ledger and contact registry.
"""

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from teleshop.core.catalog.models import Category, Product
from teleshop.core.errors import OrderLedgerError, OrderNotFound
from teleshop.core.interfaces import CatalogStore, ContactRegistry, OrderLedger
from teleshop.core.orders.models import Order, OrderItem, OrderStatus, VerifiedContact
from teleshop.core.orders.validators import normalize_phone
from teleshop.db.models import CategoryRow, OrderRow, ProductRow, VerifiedContactRow
from teleshop.db.sqlite import Database

logger = logging.getLogger(__name__)


# =============================================================================
# ROW CONVERSION
# =============================================================================


def product_from_row(row: ProductRow) -> Product:
    return Product(
        id=row.id,
        code=row.product_code or "",
        name=row.name,
        price=int(row.price),
        pack_size=row.items_per_package or 1,
        category_id=row.category or None,
        description=row.description or "",
        image_url=row.image_url or "",
        created_at=row.created_at,
    )


def order_from_row(row: OrderRow) -> Order:
    return Order(
        id=row.id,
        customer_name=row.customer_name,
        customer_phone=row.customer_phone or "",
        customer_address=row.customer_address or "",
        items=[OrderItem.from_dict(item) for item in row.items or []],
        total_amount=int(row.total_amount),
        status=OrderStatus(row.status),
        shipping_method=row.shipping_method,
        shipping_cost=int(row.shipping_cost or 0),
        created_at=row.created_at,
    )


def contact_from_row(row: VerifiedContactRow) -> VerifiedContact:
    return VerifiedContact(
        user_id=row.user_id,
        phone_number=row.phone_number,
        first_name=row.first_name or "",
        last_name=row.last_name,
        username=row.username,
        verified_at=row.verified_at,
    )


# =============================================================================
# CATALOG
# =============================================================================


class SqlCatalogStore(CatalogStore):
    """Catalog reads for the bot and writes for the administrative surface."""

    def __init__(self, database: Database):
        self.db = database

    async def list_products(self) -> list[Product]:
        async with self.db.session() as session:
            result = await session.execute(select(ProductRow).order_by(ProductRow.created_at))
            return [product_from_row(row) for row in result.scalars()]

    async def list_categories(self) -> list[Category]:
        async with self.db.session() as session:
            result = await session.execute(select(CategoryRow).order_by(CategoryRow.name))
            return [Category(id=row.id, name=row.name) for row in result.scalars()]

    async def save_product(self, product: Product) -> None:
        """Insert or update a product."""
        async with self.db.session() as session:
            row = await session.get(ProductRow, product.id)
            if row is None:
                row = ProductRow(id=product.id, created_at=product.created_at)
                session.add(row)
            row.product_code = product.code
            row.name = product.name
            row.price = product.price
            row.items_per_package = product.pack_size or 1
            row.category = product.category_id
            row.description = product.description
            row.image_url = product.image_url

    async def delete_product(self, product_id: str) -> bool:
        async with self.db.session() as session:
            result = await session.execute(delete(ProductRow).where(ProductRow.id == product_id))
            return result.rowcount > 0

    async def save_category(self, category: Category) -> None:
        async with self.db.session() as session:
            row = await session.get(CategoryRow, category.id)
            if row is None:
                session.add(CategoryRow(id=category.id, name=category.name))
            else:
                row.name = category.name

    async def delete_category(self, category_id: str) -> bool:
        async with self.db.session() as session:
            result = await session.execute(delete(CategoryRow).where(CategoryRow.id == category_id))
            return result.rowcount > 0


# =============================================================================
# ORDERS
# =============================================================================


class SqlOrderLedger(OrderLedger):
    """Orders table; status is the only field changed after creation."""

    def __init__(self, database: Database):
        self.db = database

    async def create_order(self, order: Order) -> None:
        try:
            async with self.db.session() as session:
                session.add(
                    OrderRow(
                        id=order.id,
                        customer_name=order.customer_name,
                        customer_phone=order.customer_phone,
                        customer_address=order.customer_address,
                        total_amount=order.total_amount,
                        status=order.status.value,
                        items=[item.to_dict() for item in order.items],
                        shipping_method=order.shipping_method,
                        shipping_cost=order.shipping_cost,
                        created_at=order.created_at,
                    )
                )
        except SQLAlchemyError as e:
            raise OrderLedgerError(f"Could not save order {order.id}: {e}") from e

    async def get_order(self, order_id: str) -> Optional[Order]:
        async with self.db.session() as session:
            row = await session.get(OrderRow, order_id)
            return order_from_row(row) if row else None

    async def list_orders(self) -> list[Order]:
        async with self.db.session() as session:
            result = await session.execute(select(OrderRow).order_by(OrderRow.created_at.desc()))
            return [order_from_row(row) for row in result.scalars()]

    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        async with self.db.session() as session:
            row = await session.get(OrderRow, order_id)
            if row is None:
                raise OrderNotFound(order_id)
            row.status = status.value
            return order_from_row(row)


# =============================================================================
# CONTACTS
# =============================================================================


class SqlContactRegistry(ContactRegistry):
    """Verified phone numbers keyed by Telegram user id."""

    def __init__(self, database: Database):
        self.db = database

    async def find(self, user_id: int) -> Optional[VerifiedContact]:
        async with self.db.session() as session:
            row = await session.get(VerifiedContactRow, user_id)
            return contact_from_row(row) if row else None

    async def find_by_phone(self, phone: str) -> Optional[VerifiedContact]:
        wanted = normalize_phone(phone)
        if not wanted:
            return None
        for contact in await self.list_contacts():
            if normalize_phone(contact.phone_number) == wanted:
                return contact
        return None

    async def upsert(self, contact: VerifiedContact) -> None:
        async with self.db.session() as session:
            row = await session.get(VerifiedContactRow, contact.user_id)
            if row is None:
                row = VerifiedContactRow(user_id=contact.user_id)
                session.add(row)
            row.first_name = contact.first_name
            row.last_name = contact.last_name
            row.username = contact.username
            row.phone_number = contact.phone_number
            row.verified_at = contact.verified_at
        logger.info(f"Verified contact saved for user {contact.user_id}")

    async def list_contacts(self) -> list[VerifiedContact]:
        async with self.db.session() as session:
            result = await session.execute(select(VerifiedContactRow))
            return [contact_from_row(row) for row in result.scalars()]
