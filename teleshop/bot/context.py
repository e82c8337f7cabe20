"""
Shared collaborators handed to every handler.
"""

from dataclasses import dataclass, field

from teleshop.config import Settings
from teleshop.core.cart import CartStore
from teleshop.core.catalog.snapshot import CatalogSnapshot
from teleshop.core.interfaces import ContactRegistry, MessagingTransport
from teleshop.core.orders.exporter import OrderExporter
from teleshop.core.orders.sessions import SessionStore
from teleshop.core.orders.wizard import OrderWizard


@dataclass
class ShopContext:
    """
    Everything a handler may touch while processing one event.

    ``snapshot`` is replaced once per polling tick; every event of the batch
    sees the same catalog.
    """
    transport: MessagingTransport
    cart: CartStore
    sessions: SessionStore
    wizard: OrderWizard
    contacts: ContactRegistry
    exporter: OrderExporter
    settings: Settings
    snapshot: CatalogSnapshot = field(default_factory=CatalogSnapshot)
