import unittest

from teleshop.core.cart import CartStore
from teleshop.core.catalog.snapshot import CatalogSnapshot

from tests.helpers import ELECTRONICS, HEADPHONE, SPEAKER


class CartStoreTestCase(unittest.TestCase):
    def setUp(self):
        self.cart = CartStore()
        self.snapshot = CatalogSnapshot(products=(HEADPHONE, SPEAKER), categories=(ELECTRONICS,))

    def test_add_and_remove(self):
        self.assertEqual(self.cart.add(1, "p1"), 1)
        self.assertEqual(self.cart.add(1, "p1"), 2)
        self.assertEqual(self.cart.remove(1, "p1"), 1)
        self.assertEqual(self.cart.remove(1, "p1"), 0)
        self.assertEqual(self.cart.quantities(1), {})
        # Removing a missing entry is harmless
        self.assertEqual(self.cart.remove(1, "p1"), 0)

    def test_carts_are_per_customer(self):
        self.cart.add(1, "p1")
        self.cart.add(2, "p2")
        self.assertEqual(self.cart.quantities(1), {"p1": 1})
        self.assertEqual(self.cart.quantities(2), {"p2": 1})

    def test_quantities_is_a_copy(self):
        self.cart.add(1, "p1")
        self.cart.quantities(1)["p1"] = 99
        self.assertEqual(self.cart.quantities(1), {"p1": 1})

    def test_view_joins_snapshot(self):
        self.cart.add(1, "p1")
        self.cart.add(1, "p1")
        self.cart.add(1, "p2")
        self.cart.add(1, "deleted")

        view = self.cart.view(1, self.snapshot)
        self.assertEqual(len(view.lines), 2)
        self.assertEqual(view.quantity_of("p1"), 2)
        self.assertEqual(view.subtotal, 2 * 3_500_000 + 2_000_000)
        self.assertEqual(view.missing_product_ids, ("deleted",))

    def test_view_of_unknown_customer_is_empty(self):
        view = self.cart.view(42, self.snapshot)
        self.assertTrue(view.is_empty)
        self.assertEqual(view.subtotal, 0)

    def test_clear(self):
        self.cart.add(1, "p1")
        self.cart.clear(1)
        self.assertTrue(self.cart.view(1, self.snapshot).is_empty)

    def test_draft_items_freeze_price(self):
        self.cart.add(1, "p2")
        item = self.cart.view(1, self.snapshot).lines[0].to_draft_item()
        self.assertEqual(item.product_id, "p2")
        self.assertEqual(item.unit_price, 2_000_000)
        self.assertEqual(item.quantity, 1)


class CheckoutLinkTestCase(unittest.TestCase):
    def test_no_storefront_configured(self):
        cart = CartStore()
        cart.add(1, "p1")
        self.assertIsNone(cart.checkout_link(1))

    def test_empty_cart(self):
        cart = CartStore(storefront_url="https://shop.example.com/")
        self.assertIsNone(cart.checkout_link(1))

    def test_link_encodes_lines(self):
        cart = CartStore(storefront_url="https://shop.example.com/")
        cart.add(1, "p1")
        cart.add(1, "p1")
        cart.add(1, "p2")
        self.assertEqual(
            cart.checkout_link(1),
            "https://shop.example.com/checkout?customer=1&items=p1%3A2%2Cp2%3A1",
        )
