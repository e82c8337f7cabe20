"""
Order models for Teleshop bot.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class OrderStatus(Enum):
    """Order status enum."""
    PENDING = "PENDING"          # Created by the bot, waiting for staff
    PROCESSING = "PROCESSING"    # Staff is preparing the order
    COMPLETED = "COMPLETED"      # Delivered
    CANCELLED = "CANCELLED"      # Cancelled by staff

    @property
    def label(self) -> str:
        return {
            OrderStatus.PENDING: "Pending",
            OrderStatus.PROCESSING: "Processing",
            OrderStatus.COMPLETED: "Completed",
            OrderStatus.CANCELLED: "Cancelled",
        }[self]


class WizardStep(Enum):
    """Steps of the order wizard."""
    NONE = "NONE"
    AWAITING_NAME = "AWAITING_NAME"
    AWAITING_ADDRESS = "AWAITING_ADDRESS"
    AWAITING_PHONE = "AWAITING_PHONE"


@dataclass(frozen=True)
class OrderItem:
    """Single item in order, price frozen at order time."""
    product_id: str
    product_name: str
    quantity: int
    price_at_time: int

    @property
    def total_price(self) -> int:
        return self.quantity * self.price_at_time

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "productId": self.product_id,
            "productName": self.product_name,
            "quantity": self.quantity,
            "priceAtTime": self.price_at_time,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OrderItem":
        return cls(
            product_id=str(data["productId"]),
            product_name=data["productName"],
            quantity=int(data["quantity"]),
            price_at_time=int(data["priceAtTime"]),
        )


@dataclass
class Order:
    """Finalized order as stored in the ledger."""
    id: str
    customer_name: str
    customer_phone: str
    customer_address: str
    items: list[OrderItem]
    total_amount: int
    status: OrderStatus = OrderStatus.PENDING
    shipping_method: Optional[str] = None
    shipping_cost: int = 0
    created_at: datetime = field(default_factory=datetime.now)

    def format_items_summary(self, currency: str = "Toman") -> str:
        """Format items as text summary."""
        lines = []
        for i, item in enumerate(self.items, 1):
            lines.append(
                f"{i}. {item.product_name} — {item.quantity} × "
                f"{item.price_at_time:,} = {item.total_price:,} {currency}"
            )
        return "\n".join(lines)


@dataclass(frozen=True)
class DraftItem:
    """Item target of a draft order, fixed when the wizard starts."""
    product_id: str
    product_name: str
    unit_price: int
    quantity: int = 1
    pack_size: int = 1

    @property
    def total_price(self) -> int:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class DraftOrder:
    """In-progress order collected by the wizard."""
    customer_id: int
    items: tuple[DraftItem, ...]
    from_cart: bool = False
    customer_name: str = ""
    customer_address: str = ""
    customer_phone: str = ""

    def with_fields(self, **fields) -> "DraftOrder":
        return replace(self, **fields)


@dataclass(frozen=True)
class Idle:
    """Chat without an order in progress."""

    @property
    def step(self) -> WizardStep:
        return WizardStep.NONE


@dataclass(frozen=True)
class InWizard:
    """Chat inside the order wizard."""
    draft: DraftOrder
    step: WizardStep
    updated_at: datetime = field(default_factory=datetime.now)


ChatState = Union[Idle, InWizard]

IDLE = Idle()


@dataclass(frozen=True)
class VerifiedContact:
    """Chat identity with a device-verified phone number."""
    user_id: int
    phone_number: str
    first_name: str = ""
    last_name: Optional[str] = None
    username: Optional[str] = None
    verified_at: datetime = field(default_factory=datetime.now)
