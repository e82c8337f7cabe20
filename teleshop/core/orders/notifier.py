"""
Customer notifications for order status changes made by store staff.
"""

import logging
from html import escape
from typing import Optional

from aiogram.exceptions import TelegramAPIError

from teleshop.core.interfaces import ContactRegistry, MessagingTransport
from teleshop.core.orders.models import Order

logger = logging.getLogger(__name__)


def format_status_message(order: Order) -> str:
    return (
        f"Hello {escape(order.customer_name)},\n"
        f"the status of your order <code>{order.id}</code> "
        f"changed to <b>{order.status.label}</b>."
    )


class StatusNotifier:
    """
    Messages the customer when an order status changes.

    The customer is found through the verified contact whose phone matches the
    order phone. No transport (bot token not configured) or no matching contact
    is a silent no-op.
    """

    def __init__(self, contacts: ContactRegistry, transport: Optional[MessagingTransport] = None):
        self.contacts = contacts
        self.transport = transport

    async def notify_status_change(self, order: Order) -> bool:
        """Returns True when a message was sent."""
        if self.transport is None:
            logger.debug(f"No bot configured, status of {order.id} not announced")
            return False

        contact = await self.contacts.find_by_phone(order.customer_phone)
        if contact is None:
            logger.debug(f"No verified contact for order {order.id}")
            return False

        try:
            await self.transport.send_text(contact.user_id, format_status_message(order))
        except TelegramAPIError as e:
            logger.warning(f"Failed to notify user {contact.user_id} about {order.id}: {e}")
            return False

        logger.info(f"User {contact.user_id} notified: {order.id} is {order.status.value}")
        return True
