"""
Domain exceptions.
"""


class TeleshopError(Exception):
    """Base class for Teleshop errors."""


class CatalogUnavailable(TeleshopError):
    """The catalog snapshot could not be loaded."""


class OrderLedgerError(TeleshopError):
    """The order ledger rejected or failed a write."""


class OrderNotFound(TeleshopError):
    """No order with the given id exists."""

    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class SessionAlreadyOpen(TeleshopError):
    """A chat already has an order wizard in progress."""

    def __init__(self, chat_id: int):
        super().__init__(f"Chat {chat_id} already has an open order session")
        self.chat_id = chat_id
