"""
SQLAlchemy models for Teleshop Bot.
Tables shared between the bot and the administrative surface.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, BigInteger, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


# =============================================================================
# CATALOG
# =============================================================================


class CategoryRow(Base):
    """Product category."""

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"


class ProductRow(Base):
    """Product in the catalog."""

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    product_code: Mapped[str] = mapped_column(String(50), default="")
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    items_per_package: Mapped[int] = mapped_column(Integer, default=1)

    # Plain id, categories may be deleted while products keep the reference
    category: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    description: Mapped[str] = mapped_column(Text, default="")
    image_url: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    __table_args__ = (
        Index("ix_products_name", "name"),
        Index("ix_products_category", "category"),
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"


# =============================================================================
# CUSTOMERS
# =============================================================================


class VerifiedContactRow(Base):
    """Telegram user who shared their own phone number."""

    __tablename__ = "verified_contacts"

    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(255), default="")
    last_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    username: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[str] = mapped_column(String(50), nullable=False)
    verified_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    def __repr__(self) -> str:
        return f"<VerifiedContact(user_id={self.user_id}, phone='{self.phone_number}')>"


# =============================================================================
# ORDERS
# =============================================================================


class OrderRow(Base):
    """Finalized order; items are stored with their price at order time."""

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(50), default="")
    customer_address: Mapped[str] = mapped_column(Text, default="")
    total_amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    items: Mapped[list] = mapped_column(JSON, nullable=False)
    shipping_method: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    shipping_cost: Mapped[int] = mapped_column(BigInteger, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    __table_args__ = (Index("ix_orders_created_at", "created_at"),)

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, status='{self.status}', total={self.total_amount})>"
