import unittest

from teleshop.core.cart import CartStore
from teleshop.core.errors import OrderLedgerError
from teleshop.core.orders.finalize import OrderFinalizer, OrderIdGenerator, build_payment_url
from teleshop.core.orders.models import (
    DraftItem,
    InWizard,
    Order,
    OrderStatus,
    VerifiedContact,
    WizardStep,
)
from teleshop.core.orders.sessions import SessionStore
from teleshop.core.orders.validators import PhoneValidator
from teleshop.core.orders.wizard import OrderWizard, WizardResult

from tests.helpers import ShopTestCase


CHAT_ID = 100

HEADPHONE_ITEM = DraftItem(product_id="p1", product_name="Sony Headphone", unit_price=3_500_000)


class FailingLedger:
    async def create_order(self, order: Order) -> None:
        raise OrderLedgerError("disk full")


class OrderWizardTestCase(ShopTestCase, unittest.IsolatedAsyncioTestCase):
    async def test_full_flow_without_verified_contact(self):
        outcome = self.wizard.start(CHAT_ID, CHAT_ID, [HEADPHONE_ITEM])
        self.assertIs(outcome.result, WizardResult.STARTED)
        self.assertIs(outcome.step, WizardStep.AWAITING_NAME)

        outcome = await self.wizard.handle_input(CHAT_ID, CHAT_ID, "Ali Mohammadi")
        self.assertIs(outcome.result, WizardResult.NAME_ACCEPTED)
        self.assertIs(outcome.step, WizardStep.AWAITING_ADDRESS)

        outcome = await self.wizard.handle_input(CHAT_ID, CHAT_ID, "Tehran, Valiasr St.")
        self.assertIs(outcome.result, WizardResult.ADDRESS_ACCEPTED)
        self.assertIs(outcome.step, WizardStep.AWAITING_PHONE)

        outcome = await self.wizard.handle_input(CHAT_ID, CHAT_ID, "0912 111 1111")
        self.assertIs(outcome.result, WizardResult.FINALIZED)
        self.assertIs(outcome.step, WizardStep.NONE)

        order = await self.ledger.get_order(outcome.order.id)
        self.assertEqual(order.customer_name, "Ali Mohammadi")
        self.assertEqual(order.customer_address, "Tehran, Valiasr St.")
        self.assertEqual(order.customer_phone, "09121111111")
        self.assertEqual(order.total_amount, 3_500_000)
        self.assertIs(order.status, OrderStatus.PENDING)
        self.assertFalse(self.sessions.is_open(CHAT_ID))

    async def test_verified_contact_skips_phone_step(self):
        await self.contacts.upsert(VerifiedContact(user_id=CHAT_ID, phone_number="+989121111111"))

        self.wizard.start(CHAT_ID, CHAT_ID, [HEADPHONE_ITEM])
        await self.wizard.handle_input(CHAT_ID, CHAT_ID, "Ali")
        outcome = await self.wizard.handle_input(CHAT_ID, CHAT_ID, "Tehran")

        self.assertIs(outcome.result, WizardResult.FINALIZED)
        self.assertEqual(outcome.order.customer_phone, "+989121111111")

    async def test_shared_contact_answers_phone_step(self):
        self.wizard.start(CHAT_ID, CHAT_ID, [HEADPHONE_ITEM])
        await self.wizard.handle_input(CHAT_ID, CHAT_ID, "Ali")
        await self.wizard.handle_input(CHAT_ID, CHAT_ID, "Tehran")

        outcome = await self.wizard.handle_input(
            CHAT_ID, CHAT_ID, "not a phone", contact_phone="989121111111"
        )
        self.assertIs(outcome.result, WizardResult.FINALIZED)
        self.assertEqual(outcome.order.customer_phone, "989121111111")

    async def test_invalid_input_keeps_step(self):
        self.wizard.start(CHAT_ID, CHAT_ID, [HEADPHONE_ITEM])

        outcome = await self.wizard.handle_input(CHAT_ID, CHAT_ID, "   ")
        self.assertIs(outcome.result, WizardResult.INVALID_INPUT)
        self.assertIs(outcome.step, WizardStep.AWAITING_NAME)
        self.assertTrue(outcome.error)

        await self.wizard.handle_input(CHAT_ID, CHAT_ID, "Ali")
        await self.wizard.handle_input(CHAT_ID, CHAT_ID, "Tehran")
        for bad_phone in ("call me", "12345", "1234567890123456"):
            with self.subTest(phone=bad_phone):
                outcome = await self.wizard.handle_input(CHAT_ID, CHAT_ID, bad_phone)
                self.assertIs(outcome.result, WizardResult.INVALID_INPUT)
                self.assertIs(outcome.step, WizardStep.AWAITING_PHONE)

    async def test_second_purchase_is_rejected(self):
        self.wizard.start(CHAT_ID, CHAT_ID, [HEADPHONE_ITEM])
        await self.wizard.handle_input(CHAT_ID, CHAT_ID, "Ali")

        other = DraftItem(product_id="p2", product_name="JBL Speaker", unit_price=2_000_000)
        outcome = self.wizard.start(CHAT_ID, CHAT_ID, [other])
        self.assertIs(outcome.result, WizardResult.ALREADY_OPEN)
        self.assertIs(outcome.step, WizardStep.AWAITING_ADDRESS)
        self.assertEqual(outcome.state.draft.items, (HEADPHONE_ITEM,))

    def test_empty_target(self):
        outcome = self.wizard.start(CHAT_ID, CHAT_ID, [])
        self.assertIs(outcome.result, WizardResult.EMPTY_TARGET)
        self.assertFalse(self.sessions.is_open(CHAT_ID))

    async def test_cancel_keywords(self):
        keywords = (
            "/start", "/cancel", "❌ Cancel order", "/CANCEL",
            "/cancel@teleshop_bot", "/start@teleshop_bot",
        )
        for keyword in keywords:
            with self.subTest(keyword=keyword):
                self.wizard.start(CHAT_ID, CHAT_ID, [HEADPHONE_ITEM])
                outcome = await self.wizard.handle_input(CHAT_ID, CHAT_ID, keyword)
                self.assertIs(outcome.result, WizardResult.CANCELLED)
                self.assertFalse(self.sessions.is_open(CHAT_ID))

    async def test_input_without_session(self):
        outcome = await self.wizard.handle_input(CHAT_ID, CHAT_ID, "hello")
        self.assertIs(outcome.result, WizardResult.NO_SESSION)

    async def test_cart_checkout_clears_cart(self):
        self.cart.add(CHAT_ID, "p1")
        self.cart.add(CHAT_ID, "p1")
        items = [DraftItem(product_id="p1", product_name="Sony Headphone", unit_price=3_500_000, quantity=2)]

        self.wizard.start(CHAT_ID, CHAT_ID, items, from_cart=True)
        await self.wizard.handle_input(CHAT_ID, CHAT_ID, "Ali")
        await self.wizard.handle_input(CHAT_ID, CHAT_ID, "Tehran")
        outcome = await self.wizard.handle_input(CHAT_ID, CHAT_ID, "09121111111")

        self.assertEqual(outcome.order.total_amount, 7_000_000)
        self.assertEqual(self.cart.quantities(CHAT_ID), {})

    async def test_buy_now_keeps_cart(self):
        self.cart.add(CHAT_ID, "p2")
        self.wizard.start(CHAT_ID, CHAT_ID, [HEADPHONE_ITEM])
        await self.wizard.handle_input(CHAT_ID, CHAT_ID, "Ali")
        await self.wizard.handle_input(CHAT_ID, CHAT_ID, "Tehran")
        await self.wizard.handle_input(CHAT_ID, CHAT_ID, "09121111111")
        self.assertEqual(self.cart.quantities(CHAT_ID), {"p2": 1})


class FinalizeFailureTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_ledger_failure_preserves_session(self):
        sessions = SessionStore()
        cart = CartStore()
        cart.add(CHAT_ID, "p1")

        class NoContacts:
            async def find(self, user_id):
                return None

        wizard = OrderWizard(sessions, NoContacts(), OrderFinalizer(FailingLedger(), sessions, cart))
        wizard.start(CHAT_ID, CHAT_ID, [HEADPHONE_ITEM], from_cart=True)
        await wizard.handle_input(CHAT_ID, CHAT_ID, "Ali")
        await wizard.handle_input(CHAT_ID, CHAT_ID, "Tehran")

        with self.assertLogs("teleshop.core.orders.wizard", level="ERROR"):
            outcome = await wizard.handle_input(CHAT_ID, CHAT_ID, "09121111111")

        self.assertIs(outcome.result, WizardResult.FINALIZE_FAILED)
        state = sessions.get(CHAT_ID)
        self.assertIsInstance(state, InWizard)
        self.assertIs(state.step, WizardStep.AWAITING_PHONE)
        self.assertEqual(cart.quantities(CHAT_ID), {"p1": 1})


class FinalizeHelpersTestCase(unittest.TestCase):
    def test_order_ids_are_unique_within_process(self):
        generate = OrderIdGenerator(clock_ms=lambda: 1_700_000_123_456)
        first, second = generate(), generate()
        self.assertEqual(first, "ORD-123456")
        self.assertEqual(second, "ORD-123457")

    def test_payment_url_needs_key(self):
        order = Order(
            id="ORD-1",
            customer_name="Ali",
            customer_phone="0912",
            customer_address="Tehran",
            items=[],
            total_amount=3_500_000,
        )
        self.assertIsNone(build_payment_url(order, "https://pay.example.com", None))
        self.assertEqual(
            build_payment_url(order, "https://pay.example.com", "key"),
            "https://pay.example.com?order=ORD-1&amount=3500000",
        )

    def test_phone_validator(self):
        self.assertEqual(PhoneValidator.validate("+98 (912) 111-1111"), (True, "+989121111111", None))
        self.assertFalse(PhoneValidator.validate("")[0])
