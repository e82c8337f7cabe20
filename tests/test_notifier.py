import unittest

from aiogram.exceptions import TelegramForbiddenError
from aiogram.methods import SendMessage

from teleshop.core.orders.models import Order, OrderItem, OrderStatus, VerifiedContact
from teleshop.core.orders.notifier import StatusNotifier, format_status_message
from teleshop.core.orders.validators import normalize_phone

from tests.helpers import FakeTransport, ShopTestCase


def make_order(phone: str, status: OrderStatus = OrderStatus.PROCESSING) -> Order:
    return Order(
        id="ORD-123456",
        customer_name="Ali Mohammadi",
        customer_phone=phone,
        customer_address="Tehran",
        items=[OrderItem("p1", "Sony Headphone", 1, 3_500_000)],
        total_amount=3_500_000,
        status=status,
    )


class NormalizePhoneTestCase(unittest.TestCase):
    def test_country_prefixes_match_local_zero(self):
        for phone in ("09121111111", "+989121111111", "00989121111111", "989121111111", "+98 912 111-1111"):
            with self.subTest(phone=phone):
                self.assertEqual(normalize_phone(phone), "09121111111")

    def test_other_numbers_are_only_stripped(self):
        self.assertEqual(normalize_phone("+1 (555) 123-4567"), "+15551234567")
        self.assertEqual(normalize_phone(None), "")


class StatusNotifierTestCase(ShopTestCase, unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        await super().asyncSetUp()
        await self.contacts.upsert(VerifiedContact(user_id=100, phone_number="+989121111111"))
        self.notifier = StatusNotifier(self.contacts, self.transport)

    async def test_notifies_matching_contact(self):
        self.assertTrue(await self.notifier.notify_status_change(make_order("09121111111")))
        chat_id, text, _ = self.transport.sent[0]
        self.assertEqual(chat_id, 100)
        self.assertIn("ORD-123456", text)
        self.assertIn("Processing", text)

    async def test_no_matching_contact_is_silent(self):
        self.assertFalse(await self.notifier.notify_status_change(make_order("09350000000")))
        self.assertEqual(self.transport.sent, [])

    async def test_no_transport_is_silent(self):
        notifier = StatusNotifier(self.contacts)
        self.assertFalse(await notifier.notify_status_change(make_order("09121111111")))

    async def test_blocked_user(self):
        class BlockedTransport(FakeTransport):
            async def send_text(self, chat_id, text, reply_markup=None):
                raise TelegramForbiddenError(
                    method=SendMessage(chat_id=chat_id, text=text),
                    message="bot was blocked by the user",
                )

        notifier = StatusNotifier(self.contacts, BlockedTransport())
        with self.assertLogs("teleshop.core.orders.notifier", level="WARNING"):
            self.assertFalse(await notifier.notify_status_change(make_order("09121111111")))

    def test_message_escapes_name(self):
        order = make_order("0912")
        order.customer_name = "<Ali>"
        self.assertIn("&lt;Ali&gt;", format_status_message(order))
