"""Record store ORM models for the admin suite.

These tables back the admin panel and the e-commerce dashboard:
- Directory: User (profile fields flattened onto the user row)
- Metrics: SalesMetric, CustomerMetric (one row per day and channel/snapshot)
- Stock: InventoryItem

Analytics, tables and exports never query these models directly; the
repository materializes rows into flat records first.
"""

import datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.shared.models import TimestampMixin

# ============================================================================
# DIRECTORY
# ============================================================================


class User(TimestampMixin, Base):
    """Admin panel user.

    Attributes:
        id: Primary key.
        email: Unique login email.
        first_name: Given name.
        last_name: Family name.
        phone: Contact phone number.
        address: Postal address (free text, may contain commas).
        role: Role name (e.g., "ADMIN", "MODERATOR", "USER").
        permissions: Granted permission names.
        avatar: Avatar image URL.
        is_active: Whether the account is enabled.
        last_login: Last successful login, null if never logged in.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    first_name: Mapped[str] = mapped_column(String(100), default="")
    last_name: Mapped[str] = mapped_column(String(100), default="")
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(30), index=True, default="USER")
    permissions: Mapped[list[str]] = mapped_column(JSON, default=list)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    last_login: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def status(self) -> str:
        """Display status derived from ``is_active``."""
        return "active" if self.is_active else "inactive"


# ============================================================================
# METRICS
# ============================================================================


class SalesMetric(TimestampMixin, Base):
    """Daily sales figures for one channel.

    Attributes:
        id: Primary key.
        date: Business date.
        revenue: Gross revenue for the day.
        orders: Number of orders.
        customers: Number of distinct purchasing customers.
        channel: Sales channel (e.g., "online", "mobile", "retail").
    """

    __tablename__ = "sales_metric"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    date: Mapped[datetime.date] = mapped_column(Date, index=True)
    revenue: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    orders: Mapped[int] = mapped_column(Integer)
    customers: Mapped[int] = mapped_column(Integer)
    channel: Mapped[str] = mapped_column(String(30))

    __table_args__ = (
        Index("ix_sales_metric_date_channel", "date", "channel"),
        CheckConstraint("revenue >= 0", name="ck_sales_metric_revenue_positive"),
        CheckConstraint("orders >= 0", name="ck_sales_metric_orders_positive"),
        CheckConstraint("customers >= 0", name="ck_sales_metric_customers_positive"),
    )


class CustomerMetric(TimestampMixin, Base):
    """Daily customer base snapshot.

    Attributes:
        id: Primary key.
        date: Snapshot date.
        total_customers: Customer base size at end of day.
        new_customers: First-time purchasers that day.
        returning_customers: Repeat purchasers that day.
        average_order_value: Mean order value that day.
    """

    __tablename__ = "customer_metric"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    date: Mapped[datetime.date] = mapped_column(Date, index=True)
    total_customers: Mapped[int] = mapped_column(Integer)
    new_customers: Mapped[int] = mapped_column(Integer)
    returning_customers: Mapped[int] = mapped_column(Integer)
    average_order_value: Mapped[Decimal] = mapped_column(Numeric(10, 2))

    __table_args__ = (
        CheckConstraint("total_customers >= 0", name="ck_customer_metric_total_positive"),
    )


# ============================================================================
# STOCK
# ============================================================================


class InventoryItem(TimestampMixin, Base):
    """Stock position for one SKU.

    Attributes:
        id: Primary key.
        sku: Unique stock keeping unit.
        name: Product display name.
        category: Product category.
        stock: Units on hand.
        reserved: Units held for open orders.
        price: Retail price per unit.
        cost: Unit cost.
        supplier: Supplier name.
        reorder_level: Stock at or below which the item counts as low stock.
        last_updated: Last stock movement.
    """

    __tablename__ = "inventory_item"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sku: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200))
    category: Mapped[str] = mapped_column(String(100), index=True)
    stock: Mapped[int] = mapped_column(Integer, default=0)
    reserved: Mapped[int] = mapped_column(Integer, default=0)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    cost: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    supplier: Mapped[str | None] = mapped_column(String(100), nullable=True)
    reorder_level: Mapped[int] = mapped_column(Integer, default=10)
    last_updated: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_inventory_item_stock_positive"),
        CheckConstraint("reserved >= 0", name="ck_inventory_item_reserved_positive"),
        CheckConstraint("price >= 0", name="ck_inventory_item_price_positive"),
    )
