"""
Orders module for Teleshop bot.
Handles the order wizard sessions, validation and order records.

The wizard, finalizer, exporter and notifier depend on the storage
interfaces and are imported from their own modules.
"""

from teleshop.core.orders.models import (
    ChatState,
    DraftItem,
    DraftOrder,
    Idle,
    InWizard,
    Order,
    OrderItem,
    OrderStatus,
    VerifiedContact,
    WizardStep,
)
from teleshop.core.orders.sessions import SessionStore
from teleshop.core.orders.validators import PhoneValidator, TextValidator, normalize_phone

__all__ = [
    # Models
    "ChatState",
    "DraftItem",
    "DraftOrder",
    "Idle",
    "InWizard",
    "Order",
    "OrderItem",
    "OrderStatus",
    "VerifiedContact",
    "WizardStep",
    # Sessions
    "SessionStore",
    # Validators
    "PhoneValidator",
    "TextValidator",
    "normalize_phone",
]
