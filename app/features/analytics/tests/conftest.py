"""Test fixtures for analytics module."""

from collections.abc import AsyncGenerator, Iterator
from datetime import UTC, date, datetime
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.database import get_db
from app.features.data_platform.fields import Entity
from app.features.data_platform.repository import RecordRepository
from app.main import app

TODAY = date(2024, 3, 31)


def _user(user_id: int, role: str, created: datetime, is_active: bool = True) -> dict[str, Any]:
    return {
        "id": user_id,
        "email": f"user{user_id}@example.com",
        "firstName": f"User{user_id}",
        "lastName": "Test",
        "role": role,
        "permissions": [],
        "isActive": is_active,
        "status": "active" if is_active else "inactive",
        "lastLogin": None,
        "createdAt": created,
        "updatedAt": None,
    }


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def sample_users() -> list[dict[str, Any]]:
    """Users spread over the 7-day window ending 2024-03-31 and the one before.

    Current window (03-25..03-31): ids 4-8, four active.
    Previous window (03-18..03-24): ids 2-3, both active.
    """
    return [
        _user(1, "admin", datetime(2024, 1, 5, 10, 0, tzinfo=UTC)),
        _user(2, "user", datetime(2024, 3, 18, 8, 0, tzinfo=UTC)),
        _user(3, "user", datetime(2024, 3, 24, 23, 59, tzinfo=UTC)),
        _user(4, "user", datetime(2024, 3, 25, 0, 0, tzinfo=UTC)),
        _user(5, "editor", datetime(2024, 3, 25, 12, 0, tzinfo=UTC)),
        _user(6, "user", datetime(2024, 3, 27, 9, 0, tzinfo=UTC), is_active=False),
        _user(7, "user", datetime(2024, 3, 31, 18, 0, tzinfo=UTC)),
        _user(8, "admin", datetime(2024, 3, 31, 19, 0, tzinfo=UTC)),
    ]


def _sale(sale_id: int, day: date, revenue: float, orders: int, channel: str) -> dict[str, Any]:
    return {
        "id": sale_id,
        "date": day,
        "revenue": revenue,
        "orders": orders,
        "customers": orders,
        "channel": channel,
    }


def _snapshot(snapshot_id: int, day: date, total: int, new: int, aov: float) -> dict[str, Any]:
    return {
        "id": snapshot_id,
        "date": day,
        "totalCustomers": total,
        "newCustomers": new,
        "returningCustomers": total - new,
        "averageOrderValue": aov,
    }


def _item(
    item_id: int,
    category: str,
    stock: int,
    reserved: int,
    price: float,
    reorder_level: int | None,
) -> dict[str, Any]:
    return {
        "id": item_id,
        "sku": f"SKU-{item_id}",
        "name": f"Item {item_id}",
        "category": category,
        "stock": stock,
        "reserved": reserved,
        "price": price,
        "cost": price / 2,
        "reorderLevel": reorder_level,
    }


@pytest.fixture
def sample_sales() -> list[dict[str, Any]]:
    """Sales rows for two channels around the start of 2024."""
    return [
        _sale(1, date(2023, 12, 30), 80.0, 2, "online"),
        _sale(2, date(2024, 1, 1), 100.0, 2, "online"),
        _sale(3, date(2024, 1, 1), 60.0, 1, "retail"),
        _sale(4, date(2024, 1, 3), 40.0, 1, "online"),
    ]


@pytest.fixture
def sample_snapshots() -> list[dict[str, Any]]:
    """Customer base snapshots, not in date order."""
    return [
        _snapshot(1, date(2024, 1, 1), 100, 10, 42.5),
        _snapshot(2, date(2024, 1, 3), 125, 15, 40.123),
        _snapshot(3, date(2024, 1, 2), 110, 10, 41.0),
    ]


@pytest.fixture
def sample_inventory() -> list[dict[str, Any]]:
    """One low-stock item, one out-of-stock item and one without a reorder level."""
    return [
        _item(1, "Peripherals", 40, 5, 50.0, 10),
        _item(2, "Peripherals", 3, 1, 20.0, 5),
        _item(3, "Computers", 0, 0, 1000.0, 2),
        _item(4, "Accessories", 8, 0, 5.0, None),
    ]



@pytest.fixture
def record_store(
    sample_users: list[dict[str, Any]],
    sample_sales: list[dict[str, Any]],
    sample_snapshots: list[dict[str, Any]],
    sample_inventory: list[dict[str, Any]],
) -> Iterator[AsyncMock]:
    """Patch the repository to serve in-memory records per entity."""
    store: dict[Entity, list[dict[str, Any]]] = {
        Entity.USERS: sample_users,
        Entity.SALES: sample_sales,
        Entity.CUSTOMERS: sample_snapshots,
        Entity.INVENTORY: sample_inventory,
    }

    def fetch(_db: Any, entity: Entity, *_args: Any, **_kwargs: Any) -> list[dict[str, Any]]:
        return store[entity]

    mock = AsyncMock(side_effect=fetch)
    with patch.object(RecordRepository, "fetch_records", new=mock):
        yield mock


@pytest.fixture
async def client(record_store: AsyncMock) -> AsyncGenerator[AsyncClient, None]:
    """Create test client backed by the in-memory record store."""

    async def override_get_db() -> AsyncGenerator[None, None]:
        yield None

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
