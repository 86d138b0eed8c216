"""Test fixtures for tables module."""

from collections.abc import AsyncGenerator, Iterator
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.database import get_db
from app.features.data_platform.fields import Entity
from app.features.data_platform.repository import RecordRepository
from app.main import app


def _user(
    user_id: int,
    first: str,
    last: str,
    role: str,
    is_active: bool = True,
    created_day: int = 1,
) -> dict[str, Any]:
    return {
        "id": user_id,
        "email": f"{first.lower()}.{last.lower()}@example.com",
        "firstName": first,
        "lastName": last,
        "phone": None,
        "address": None,
        "role": role,
        "permissions": [],
        "avatar": None,
        "isActive": is_active,
        "status": "active" if is_active else "inactive",
        "lastLogin": None,
        "createdAt": datetime(2024, 1, created_day, 9, 0, tzinfo=UTC),
        "updatedAt": None,
    }


@pytest.fixture
def sample_users() -> list[dict[str, Any]]:
    """Twelve users in primary key order."""
    return [
        _user(1, "Alice", "Smith", "admin", created_day=1),
        _user(2, "bob", "Jones", "user", created_day=2),
        _user(3, "Carol", "Smith", "user", is_active=False, created_day=3),
        _user(4, "Dave", "Brown", "editor", created_day=3),
        _user(5, "Eve", "Black", "user", created_day=5),
        _user(6, "Frank", "White", "admin", is_active=False, created_day=6),
        _user(7, "Grace", "Green", "user", created_day=7),
        _user(8, "Heidi", "Gray", "editor", created_day=8),
        _user(9, "Ivan", "Smithers", "user", created_day=9),
        _user(10, "Judy", "Stone", "user", created_day=10),
        _user(11, "Mallory", "Reed", "admin", created_day=11),
        _user(12, "Niaj", "Hill", "user", is_active=False, created_day=12),
    ]


@pytest.fixture
def sample_inventory() -> list[dict[str, Any]]:
    """Inventory items with mixed categories and stock levels."""
    updated = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
    return [
        {
            "id": 1,
            "sku": "KB-001",
            "name": "Keyboard",
            "category": "Peripherals",
            "stock": 40,
            "reserved": 5,
            "price": 49.99,
            "cost": 20.0,
            "supplier": "Acme",
            "reorderLevel": 10,
            "lastUpdated": updated,
        },
        {
            "id": 2,
            "sku": "MS-002",
            "name": "Mouse",
            "category": "Peripherals",
            "stock": 3,
            "reserved": 0,
            "price": 19.99,
            "cost": 7.5,
            "supplier": "Globex",
            "reorderLevel": 10,
            "lastUpdated": updated,
        },
        {
            "id": 3,
            "sku": "LP-003",
            "name": "Laptop",
            "category": "Computers",
            "stock": 0,
            "reserved": 0,
            "price": 999.0,
            "cost": 700.0,
            "supplier": "Acme",
            "reorderLevel": 2,
            "lastUpdated": updated,
        },
    ]


@pytest.fixture
def record_store(
    sample_users: list[dict[str, Any]],
    sample_inventory: list[dict[str, Any]],
) -> Iterator[AsyncMock]:
    """Patch the repository to serve in-memory records per entity."""
    store: dict[Entity, list[dict[str, Any]]] = {
        Entity.USERS: sample_users,
        Entity.SALES: [],
        Entity.CUSTOMERS: [],
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
