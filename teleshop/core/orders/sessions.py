"""
Per-chat order wizard sessions.
"""

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Optional

from teleshop.core.errors import SessionAlreadyOpen
from teleshop.core.orders.models import IDLE, ChatState, DraftOrder, InWizard, WizardStep

logger = logging.getLogger(__name__)


class SessionStore:
    """
    In-memory chat states keyed by chat id.

    A chat is either idle or inside exactly one wizard. Sessions are lost on
    process restart. Sessions idle for longer than ``ttl`` are dropped on
    access.
    """

    def __init__(
        self,
        ttl: Optional[timedelta] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.ttl = ttl
        self._clock = clock
        self._sessions: dict[int, InWizard] = {}

    def _expired(self, session: InWizard) -> bool:
        return self.ttl is not None and self._clock() - session.updated_at > self.ttl

    def get(self, chat_id: int) -> ChatState:
        session = self._sessions.get(chat_id)
        if session is None:
            return IDLE
        if self._expired(session):
            del self._sessions[chat_id]
            logger.info(f"Order session of chat {chat_id} expired at step {session.step.value}")
            return IDLE
        return session

    def is_open(self, chat_id: int) -> bool:
        return isinstance(self.get(chat_id), InWizard)

    def start(self, chat_id: int, draft: DraftOrder) -> InWizard:
        """
        Open a wizard for the chat.

        Raises:
            SessionAlreadyOpen: if the chat already has a live session
        """
        if self.is_open(chat_id):
            raise SessionAlreadyOpen(chat_id)
        session = InWizard(draft=draft, step=WizardStep.AWAITING_NAME, updated_at=self._clock())
        self._sessions[chat_id] = session
        return session

    def advance(self, chat_id: int, step: WizardStep, **fields) -> InWizard:
        """Move an open session to ``step`` updating draft fields."""
        state = self.get(chat_id)
        if not isinstance(state, InWizard):
            raise KeyError(f"Chat {chat_id} has no open order session")
        if step is WizardStep.NONE:
            raise ValueError("Use end() to close a session")
        session = replace(
            state,
            draft=state.draft.with_fields(**fields) if fields else state.draft,
            step=step,
            updated_at=self._clock(),
        )
        self._sessions[chat_id] = session
        return session

    def end(self, chat_id: int) -> bool:
        """Close the chat's session; returns whether one was open."""
        return self._sessions.pop(chat_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)
