"""
Administrative operations on the shared catalog and order ledger.

Used by operator scripts; runs independently from the polling loop and only
meets it through the database.
"""

import asyncio
import logging
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Optional

from aiogram import Bot

from teleshop.bot.transport import AiogramTransport
from teleshop.config import settings
from teleshop.core.catalog.models import Category, Product
from teleshop.core.errors import OrderNotFound
from teleshop.core.interfaces import OrderLedger
from teleshop.core.orders.exporter import OrderExporter
from teleshop.core.orders.models import Order, OrderStatus
from teleshop.core.orders.notifier import StatusNotifier
from teleshop.db.repositories import SqlCatalogStore, SqlContactRegistry, SqlOrderLedger
from teleshop.db.sqlite import Database

logger = logging.getLogger(__name__)


# Ids travel in button payloads, which Telegram caps at 64 bytes:
# "prod_<product>_<category>" must fit with both ids at full length
MAX_ID_LENGTH = 24


def new_id() -> str:
    """Short hex ids; they never contain the payload separator."""
    return uuid.uuid4().hex[:12]


def check_id(kind: str, value: str) -> None:
    if "_" in value:
        raise ValueError(f"{kind} id must not contain '_': {value!r}")
    if len(value.encode()) > MAX_ID_LENGTH:
        raise ValueError(f"{kind} id longer than {MAX_ID_LENGTH} bytes: {value!r}")


class AdminService:
    """Catalog CRUD and order status changes."""

    def __init__(
        self,
        catalog: SqlCatalogStore,
        ledger: OrderLedger,
        notifier: StatusNotifier,
        exporter: Optional[OrderExporter] = None,
    ):
        self.catalog = catalog
        self.ledger = ledger
        self.notifier = notifier
        self.exporter = exporter

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    async def save_product(self, product: Product) -> Product:
        """Create (empty id) or update a product."""
        if not product.id:
            product = replace(product, id=new_id())
        else:
            check_id("Product", product.id)
        await self.catalog.save_product(product)
        logger.info(f"Product {product.id} saved")
        return product

    async def delete_product(self, product_id: str) -> bool:
        deleted = await self.catalog.delete_product(product_id)
        if deleted:
            logger.info(f"Product {product_id} deleted")
        return deleted

    async def save_category(self, category: Category) -> Category:
        if not category.id:
            category = replace(category, id=new_id())
        else:
            check_id("Category", category.id)
        await self.catalog.save_category(category)
        logger.info(f"Category {category.id} saved")
        return category

    async def delete_category(self, category_id: str) -> bool:
        deleted = await self.catalog.delete_category(category_id)
        if deleted:
            logger.info(f"Category {category_id} deleted")
        return deleted

    async def catalog_stats(self) -> dict:
        """Counters shown on the store dashboard."""
        products = await self.catalog.list_products()
        categories = await self.catalog.list_categories()
        orders = await self.ledger.list_orders()
        by_status = {status.value: 0 for status in OrderStatus}
        for order in orders:
            by_status[order.status.value] += 1
        return {
            "products": len(products),
            "categories": len(categories),
            "catalog_value": sum(p.price for p in products),
            "orders": len(orders),
            "orders_by_status": by_status,
        }

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        """
        Change an order status and tell the customer about it.

        Raises:
            OrderNotFound: if no such order exists
        """
        order = await self.ledger.update_status(order_id, status)
        logger.info(f"Order {order_id} status changed to {status.value}")
        await self.notifier.notify_status_change(order)
        return order

    async def export_order(self, order_id: str, output_dir: Optional[Path] = None) -> Path:
        """Write the XLSX order sheet and return its path."""
        if self.exporter is None:
            raise RuntimeError("No order exporter configured")
        order = await self.ledger.get_order(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return await asyncio.to_thread(self.exporter.export, order, output_dir)


def build_admin_service(database: Database, bot: Optional[Bot] = None) -> AdminService:
    """
    Admin service over ``database``. Status notifications are sent only when
    a bot is given.
    """
    contacts = SqlContactRegistry(database)
    transport = AiogramTransport(bot) if bot is not None else None
    return AdminService(
        catalog=SqlCatalogStore(database),
        ledger=SqlOrderLedger(database),
        notifier=StatusNotifier(contacts, transport),
        exporter=OrderExporter(settings.orders_dir, settings.currency),
    )
