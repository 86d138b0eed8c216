"""Fixtures for record store tests.

The db_session fixture is duplicated from tests/conftest.py because feature
tests under app/features/*/tests/ do not see fixtures outside their own
directory path.
"""

from collections.abc import AsyncGenerator
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.core.database import Base
from app.features.data_platform.models import CustomerMetric, InventoryItem, SalesMetric, User


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for integration tests.

    Creates all tables, provides a session, and drops the tables afterwards.
    Requires PostgreSQL to be running (docker-compose up -d).
    """
    settings = get_settings()
    engine = create_async_engine(settings.database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def user_row() -> User:
    """Unsaved user with every profile field set."""
    return User(
        id=1,
        email="ada@example.com",
        first_name="Ada",
        last_name="Lovelace",
        phone="555-0100",
        address="New York, NY",
        role="ADMIN",
        permissions=["users:read", "users:write"],
        avatar=None,
        is_active=False,
        last_login=None,
        created_at=datetime(2024, 1, 2, 9, 0, tzinfo=UTC),
        updated_at=datetime(2024, 1, 3, 9, 0, tzinfo=UTC),
    )


@pytest.fixture
def sales_row() -> SalesMetric:
    return SalesMetric(
        id=7,
        date=date(2024, 1, 1),
        revenue=Decimal("1234.50"),
        orders=12,
        customers=10,
        channel="online",
    )


@pytest.fixture
def customer_row() -> CustomerMetric:
    return CustomerMetric(
        id=3,
        date=date(2024, 1, 1),
        total_customers=120,
        new_customers=20,
        returning_customers=100,
        average_order_value=Decimal("45.10"),
    )


@pytest.fixture
def inventory_row() -> InventoryItem:
    return InventoryItem(
        id=5,
        sku="KB-001",
        name="Keyboard",
        category="Peripherals",
        stock=4,
        reserved=1,
        price=Decimal("49.99"),
        cost=Decimal("20.00"),
        supplier="Acme",
        reorder_level=10,
        last_updated=datetime(2024, 3, 1, 12, 0, tzinfo=UTC),
    )
