"""Pydantic record schemas for the record store.

Each schema reads an ORM row (``from_attributes``) and dumps the flat,
camelCase-keyed record that analytics, tables and exports operate on.
Monetary ``Numeric`` columns become floats so aggregation math never mixes
``Decimal`` and ``float``.
"""

import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.features.data_platform.fields import Entity


class RecordBase(BaseModel):
    """Base schema for flat records."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def decimal_to_float(cls, v: Any) -> Any:
        """Convert ``Decimal`` column values to ``float``."""
        if isinstance(v, Decimal):
            return float(v)
        return v

    def to_record(self) -> dict[str, Any]:
        """Dump as a flat record keyed by camelCase field names."""
        return self.model_dump(by_alias=True)


# ============================================================================
# DIRECTORY
# ============================================================================


class UserRecord(RecordBase):
    """Flat user record (profile fields inlined)."""

    id: int
    email: str
    first_name: str = ""
    last_name: str = ""
    phone: str | None = None
    address: str | None = None
    role: str
    permissions: list[str] = Field(default_factory=list)
    avatar: str | None = None
    is_active: bool = True
    status: str = "active"
    last_login: datetime.datetime | None = None
    created_at: datetime.datetime
    updated_at: datetime.datetime | None = None


# ============================================================================
# METRICS
# ============================================================================


class SalesRecord(RecordBase):
    """Daily sales figures for one channel."""

    id: int
    date: datetime.date
    revenue: float = Field(..., ge=0)
    orders: int = Field(..., ge=0)
    customers: int = Field(..., ge=0)
    channel: str


class CustomerRecord(RecordBase):
    """Daily customer base snapshot."""

    id: int
    date: datetime.date
    total_customers: int = Field(..., ge=0)
    new_customers: int = Field(..., ge=0)
    returning_customers: int = Field(..., ge=0)
    average_order_value: float = Field(..., ge=0)


# ============================================================================
# STOCK
# ============================================================================


class InventoryRecord(RecordBase):
    """Stock position for one SKU."""

    id: int
    sku: str
    name: str
    category: str
    stock: int = Field(..., ge=0)
    reserved: int = Field(..., ge=0)
    price: float = Field(..., ge=0)
    cost: float = Field(..., ge=0)
    supplier: str | None = None
    reorder_level: int = 10
    last_updated: datetime.datetime


RECORD_SCHEMAS: dict[Entity, type[RecordBase]] = {
    Entity.USERS: UserRecord,
    Entity.SALES: SalesRecord,
    Entity.CUSTOMERS: CustomerRecord,
    Entity.INVENTORY: InventoryRecord,
}
