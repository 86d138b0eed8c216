"""Test fixtures for exports module."""

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


@pytest.fixture
def export_users() -> list[dict[str, Any]]:
    """Users exercising every cell rule."""
    return [
        {
            "id": 1,
            "email": "ada@example.com",
            "firstName": "Ada",
            "lastName": "Lovelace",
            "phone": "555-0100",
            "address": "New York, NY",
            "role": "admin",
            "permissions": ["read", "write"],
            "avatar": None,
            "isActive": True,
            "status": "active",
            "lastLogin": datetime(2024, 1, 15, 14, 30, 5, tzinfo=UTC),
            "createdAt": datetime(2024, 1, 2, 9, 5, 0, tzinfo=UTC),
            "updatedAt": None,
        },
        {
            "id": 2,
            "email": "grace@example.com",
            "firstName": "Grace",
            "lastName": 'Hopper "Amazing"',
            "phone": None,
            "address": None,
            "role": "user",
            "permissions": [],
            "avatar": None,
            "isActive": False,
            "status": "inactive",
            "lastLogin": None,
            "createdAt": datetime(2024, 1, 3, 0, 0, 0, tzinfo=UTC),
            "updatedAt": None,
        },
    ]


@pytest.fixture
def record_store(export_users: list[dict[str, Any]]) -> Iterator[AsyncMock]:
    """Patch the repository to serve in-memory records per entity."""
    store: dict[Entity, list[dict[str, Any]]] = {
        Entity.USERS: export_users,
        Entity.SALES: [],
        Entity.CUSTOMERS: [],
        Entity.INVENTORY: [],
    }

    def fetch(
        _db: Any,
        entity: Entity,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[dict[str, Any]]:
        records = store[entity]
        if entity is not Entity.USERS or start_date is None or end_date is None:
            return records
        return [
            record
            for record in records
            if start_date <= record["createdAt"].date() <= end_date
        ]

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
