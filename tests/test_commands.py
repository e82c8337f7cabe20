import unittest

from teleshop.core.commands import Command, CommandKind, callback


class CommandDecodeTestCase(unittest.TestCase):
    def test_plain_commands(self):
        self.assertIs(Command.decode("cmd_start").kind, CommandKind.ROOT)
        self.assertIs(Command.decode("cmd_cancel_order").kind, CommandKind.CANCEL_ORDER)
        self.assertIs(Command.decode("cart_view").kind, CommandKind.VIEW_CART)
        self.assertIs(Command.decode("cart_checkout").kind, CommandKind.CHECKOUT)

    def test_prefixed_commands(self):
        cmd = Command.decode("cart_add_p1")
        self.assertIs(cmd.kind, CommandKind.ADD_TO_CART)
        self.assertEqual(cmd.arg, "p1")

        cmd = Command.decode("cart_rm_p1")
        self.assertIs(cmd.kind, CommandKind.REMOVE_FROM_CART)
        self.assertEqual(cmd.arg, "p1")

        cmd = Command.decode("cat_c1")
        self.assertIs(cmd.kind, CommandKind.OPEN_CATEGORY)
        self.assertEqual(cmd.arg, "c1")

        cmd = Command.decode("order_p1")
        self.assertIs(cmd.kind, CommandKind.BUY_NOW)
        self.assertEqual(cmd.arg, "p1")

    def test_product_with_parent_category(self):
        cmd = Command.decode("prod_p1_c1")
        self.assertIs(cmd.kind, CommandKind.OPEN_PRODUCT)
        self.assertEqual(cmd.arg, "p1")
        self.assertEqual(cmd.context, "c1")

        cmd = Command.decode("prod_p1")
        self.assertEqual(cmd.arg, "p1")
        self.assertIsNone(cmd.context)

    def test_unknown_payloads(self):
        for data in (None, "", "xyz_123", "cat_", "order_", "prod__c1", "cmd_unknown"):
            with self.subTest(data=data):
                self.assertIs(Command.decode(data).kind, CommandKind.UNKNOWN)

    def test_raw_payload_is_kept(self):
        self.assertEqual(Command.decode("xyz_123").raw, "xyz_123")


class CommandEncodeTestCase(unittest.TestCase):
    def test_encode(self):
        self.assertEqual(callback(CommandKind.PRODUCTS), "cmd_products")
        self.assertEqual(callback(CommandKind.OPEN_PRODUCT, "p1", "c1"), "prod_p1_c1")
        self.assertEqual(callback(CommandKind.ADD_TO_CART, "p1"), "cart_add_p1")

    def test_unknown_cannot_be_encoded(self):
        with self.assertRaises(ValueError):
            Command(CommandKind.UNKNOWN).encode()

    def test_payload_size_limit(self):
        long_id = "a" * 32
        with self.assertRaises(ValueError):
            callback(CommandKind.OPEN_PRODUCT, long_id, long_id)
        # Generated ids fit with their parent category at the longest allowed length
        self.assertEqual(len(callback(CommandKind.OPEN_PRODUCT, "a" * 24, "b" * 24)), 54)
