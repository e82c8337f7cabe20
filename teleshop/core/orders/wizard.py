"""
Order wizard: collects name, address and phone, then finalizes the order.

    NONE --(buy-now / checkout)--> AWAITING_NAME
    AWAITING_NAME --(name)--> AWAITING_ADDRESS
    AWAITING_ADDRESS --(address, verified contact)--> FINALIZE --> NONE
    AWAITING_ADDRESS --(address)--> AWAITING_PHONE
    AWAITING_PHONE --(phone text or shared contact)--> FINALIZE --> NONE
    ANY --(cancel)--> NONE
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from teleshop.core.errors import OrderLedgerError, SessionAlreadyOpen
from teleshop.core.interfaces import ContactRegistry
from teleshop.core.orders.finalize import OrderFinalizer
from teleshop.core.orders.models import (
    ChatState,
    DraftItem,
    DraftOrder,
    InWizard,
    Order,
    WizardStep,
)
from teleshop.core.orders.sessions import SessionStore
from teleshop.core.orders.validators import PhoneValidator, TextValidator

logger = logging.getLogger(__name__)


CANCEL_BUTTON_TEXT = "❌ Cancel order"

# Texts that tear down an open session before any step handling
CANCEL_KEYWORDS = {"/start", "/cancel", CANCEL_BUTTON_TEXT.lower()}


def is_cancel_keyword(text: Optional[str]) -> bool:
    text = (text or "").strip().lower()
    if text.startswith("/"):
        # "/cancel@botname" is how commands look in groups
        text = text.split("@", 1)[0]
    return text in CANCEL_KEYWORDS


class WizardResult(Enum):
    """What happened after feeding input to the wizard."""
    STARTED = "started"
    ALREADY_OPEN = "already_open"
    EMPTY_TARGET = "empty_target"
    NO_SESSION = "no_session"
    NAME_ACCEPTED = "name_accepted"
    ADDRESS_ACCEPTED = "address_accepted"
    INVALID_INPUT = "invalid_input"
    FINALIZED = "finalized"
    FINALIZE_FAILED = "finalize_failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class WizardOutcome:
    result: WizardResult
    state: ChatState
    order: Optional[Order] = None
    error: Optional[str] = None

    @property
    def step(self) -> WizardStep:
        return self.state.step


class OrderWizard:
    """Drives the per-chat order state machine."""

    def __init__(
        self,
        sessions: SessionStore,
        contacts: ContactRegistry,
        finalizer: OrderFinalizer,
    ):
        self.sessions = sessions
        self.contacts = contacts
        self.finalizer = finalizer

    def state(self, chat_id: int) -> ChatState:
        return self.sessions.get(chat_id)

    def start(
        self,
        chat_id: int,
        customer_id: int,
        items: Sequence[DraftItem],
        from_cart: bool = False,
    ) -> WizardOutcome:
        """Open a wizard targeting ``items``; an open wizard is never replaced."""
        if not items:
            return WizardOutcome(WizardResult.EMPTY_TARGET, self.sessions.get(chat_id))

        draft = DraftOrder(customer_id=customer_id, items=tuple(items), from_cart=from_cart)
        try:
            session = self.sessions.start(chat_id, draft)
        except SessionAlreadyOpen:
            logger.info(f"Chat {chat_id} tried to start a second order")
            return WizardOutcome(WizardResult.ALREADY_OPEN, self.sessions.get(chat_id))

        logger.info(
            f"Order wizard started for chat {chat_id} "
            f"({len(items)} items, from_cart={from_cart})"
        )
        return WizardOutcome(WizardResult.STARTED, session)

    def cancel(self, chat_id: int) -> WizardOutcome:
        if self.sessions.end(chat_id):
            logger.info(f"Order wizard cancelled for chat {chat_id}")
        return WizardOutcome(WizardResult.CANCELLED, self.sessions.get(chat_id))

    async def handle_input(
        self,
        chat_id: int,
        customer_id: int,
        text: Optional[str],
        contact_phone: Optional[str] = None,
    ) -> WizardOutcome:
        """
        Feed one customer message to the current step.

        Args:
            chat_id: Chat the message came from
            customer_id: Telegram user id of the sender
            text: Message text, empty for non-text messages
            contact_phone: Phone of a shared contact card, if any

        Returns:
            WizardOutcome describing the transition
        """
        state = self.sessions.get(chat_id)
        if not isinstance(state, InWizard):
            return WizardOutcome(WizardResult.NO_SESSION, state)

        if contact_phone is None and is_cancel_keyword(text):
            return self.cancel(chat_id)

        if state.step is WizardStep.AWAITING_NAME:
            return self._accept_name(chat_id, state, text)
        if state.step is WizardStep.AWAITING_ADDRESS:
            return await self._accept_address(chat_id, customer_id, state, text)
        if state.step is WizardStep.AWAITING_PHONE:
            return await self._accept_phone(chat_id, state, text, contact_phone)

        logger.error(f"Chat {chat_id} has a session in unexpected step {state.step}")
        return WizardOutcome(WizardResult.INVALID_INPUT, state)

    def _accept_name(self, chat_id: int, state: InWizard, text: Optional[str]) -> WizardOutcome:
        is_valid, name, error = TextValidator.validate(text)
        if not is_valid:
            return WizardOutcome(WizardResult.INVALID_INPUT, state, error=error)

        session = self.sessions.advance(chat_id, WizardStep.AWAITING_ADDRESS, customer_name=name)
        return WizardOutcome(WizardResult.NAME_ACCEPTED, session)

    async def _accept_address(
        self,
        chat_id: int,
        customer_id: int,
        state: InWizard,
        text: Optional[str],
    ) -> WizardOutcome:
        # Free text is always accepted as an address
        is_valid, address, error = TextValidator.validate(text)
        if not is_valid:
            return WizardOutcome(WizardResult.INVALID_INPUT, state, error=error)

        contact = await self.contacts.find(customer_id)
        if contact is not None:
            draft = state.draft.with_fields(customer_address=address)
            return await self._finalize(chat_id, state, draft, contact.phone_number)

        session = self.sessions.advance(chat_id, WizardStep.AWAITING_PHONE, customer_address=address)
        return WizardOutcome(WizardResult.ADDRESS_ACCEPTED, session)

    async def _accept_phone(
        self,
        chat_id: int,
        state: InWizard,
        text: Optional[str],
        contact_phone: Optional[str],
    ) -> WizardOutcome:
        if contact_phone:
            phone = contact_phone.strip()
        else:
            is_valid, phone, error = PhoneValidator.validate(text)
            if not is_valid:
                return WizardOutcome(WizardResult.INVALID_INPUT, state, error=error)

        draft = state.draft.with_fields(customer_phone=phone)
        return await self._finalize(chat_id, state, draft, phone)

    async def _finalize(
        self,
        chat_id: int,
        state: InWizard,
        draft: DraftOrder,
        phone: str,
    ) -> WizardOutcome:
        try:
            order = await self.finalizer.finalize(chat_id, draft, phone)
        except OrderLedgerError as e:
            logger.error(f"Failed to save order for chat {chat_id}: {e}", exc_info=True)
            return WizardOutcome(WizardResult.FINALIZE_FAILED, state, error=str(e))

        return WizardOutcome(WizardResult.FINALIZED, self.sessions.get(chat_id), order=order)
