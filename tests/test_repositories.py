import unittest
from datetime import datetime

from teleshop.core.catalog.models import Category, Product
from teleshop.core.catalog.snapshot import CatalogSnapshotLoader
from teleshop.core.errors import OrderLedgerError, OrderNotFound
from teleshop.core.orders.models import Order, OrderItem, OrderStatus, VerifiedContact

from tests.helpers import ShopTestCase


def make_order(order_id: str = "ORD-000001") -> Order:
    return Order(
        id=order_id,
        customer_name="Ali",
        customer_phone="09121111111",
        customer_address="Tehran",
        items=[OrderItem("p1", "Sony Headphone", 2, 3_500_000)],
        total_amount=7_000_000,
        created_at=datetime(2024, 5, 1, 10, 30),
    )


class CatalogStoreTestCase(ShopTestCase, unittest.IsolatedAsyncioTestCase):
    async def test_snapshot_loads_products_and_categories(self):
        snapshot = await CatalogSnapshotLoader(self.catalog).load()
        self.assertEqual([p.id for p in snapshot.products], ["p1", "p2"])
        self.assertEqual(snapshot.product("p1").price, 3_500_000)
        self.assertEqual(snapshot.product("p1").code, "SN-100")
        self.assertEqual(snapshot.category_name("c1"), "Electronics")

    async def test_update_and_delete(self):
        await self.catalog.save_product(
            Product(id="p1", name="Sony WH-1000", price=4_000_000, code="SN-100", category_id="c1")
        )
        products = {p.id: p for p in await self.catalog.list_products()}
        self.assertEqual(products["p1"].name, "Sony WH-1000")
        self.assertEqual(products["p1"].price, 4_000_000)

        self.assertTrue(await self.catalog.delete_product("p1"))
        self.assertFalse(await self.catalog.delete_product("p1"))
        self.assertEqual([p.id for p in await self.catalog.list_products()], ["p2"])

        await self.catalog.save_category(Category(id="c1", name="Audio"))
        self.assertEqual((await self.catalog.list_categories())[0].name, "Audio")


class OrderLedgerTestCase(ShopTestCase, unittest.IsolatedAsyncioTestCase):
    async def test_create_and_read(self):
        await self.ledger.create_order(make_order())
        order = await self.ledger.get_order("ORD-000001")
        self.assertEqual(order.items[0].price_at_time, 3_500_000)
        self.assertEqual(order.items[0].quantity, 2)
        self.assertIs(order.status, OrderStatus.PENDING)
        self.assertIsNone(await self.ledger.get_order("ORD-999999"))

    async def test_duplicate_id_is_a_ledger_error(self):
        await self.ledger.create_order(make_order())
        with self.assertRaises(OrderLedgerError):
            await self.ledger.create_order(make_order())

    async def test_update_status(self):
        await self.ledger.create_order(make_order())
        order = await self.ledger.update_status("ORD-000001", OrderStatus.COMPLETED)
        self.assertIs(order.status, OrderStatus.COMPLETED)
        self.assertIs((await self.ledger.get_order("ORD-000001")).status, OrderStatus.COMPLETED)

        with self.assertRaises(OrderNotFound):
            await self.ledger.update_status("ORD-999999", OrderStatus.COMPLETED)


class ContactRegistryTestCase(ShopTestCase, unittest.IsolatedAsyncioTestCase):
    async def test_upsert_and_find(self):
        await self.contacts.upsert(VerifiedContact(user_id=100, phone_number="09121111111", first_name="Ali"))
        await self.contacts.upsert(VerifiedContact(user_id=100, phone_number="+989122222222", first_name="Ali"))

        contact = await self.contacts.find(100)
        self.assertEqual(contact.phone_number, "+989122222222")
        self.assertEqual(len(await self.contacts.list_contacts()), 1)

        self.assertEqual((await self.contacts.find_by_phone("09122222222")).user_id, 100)
        self.assertIsNone(await self.contacts.find_by_phone("09121111111"))
        self.assertIsNone(await self.contacts.find_by_phone(""))
