"""Tests for the record repository."""

from datetime import UTC, date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import DatabaseError
from app.features.data_platform.fields import Entity
from app.features.data_platform.models import SalesMetric, User
from app.features.data_platform.repository import RecordRepository


def _session_returning(rows: list[object]) -> AsyncMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    session = AsyncMock()
    session.execute.return_value = result
    return session


class TestFetchRecords:
    """Unit tests with a mocked session."""

    async def test_rows_become_flat_records(self, sales_row):
        session = _session_returning([sales_row])

        records = await RecordRepository().fetch_records(session, Entity.SALES)

        assert records == [
            {
                "id": 7,
                "date": date(2024, 1, 1),
                "revenue": 1234.5,
                "orders": 12,
                "customers": 10,
                "channel": "online",
            }
        ]

    async def test_date_range_adds_where_clause(self, user_row):
        session = _session_returning([user_row])

        await RecordRepository().fetch_records(
            session, Entity.USERS, date(2024, 1, 1), date(2024, 1, 31)
        )

        stmt = session.execute.await_args.args[0]
        assert "WHERE" in str(stmt)
        assert "app_user.created_at" in str(stmt)

    async def test_inventory_ignores_date_range(self, inventory_row):
        session = _session_returning([inventory_row])

        await RecordRepository().fetch_records(
            session, Entity.INVENTORY, date(2024, 1, 1), date(2024, 1, 31)
        )

        assert "WHERE" not in str(session.execute.await_args.args[0])

    async def test_query_failure_raises_database_error(self):
        session = AsyncMock()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError) as exc_info:
            await RecordRepository().fetch_records(session, Entity.CUSTOMERS)

        assert exc_info.value.details == {"entity": "customers"}


@pytest.mark.integration
class TestFetchRecordsIntegration:
    """Integration tests against PostgreSQL."""

    async def test_user_date_range_is_inclusive_utc_days(self, db_session):
        db_session.add_all(
            [
                User(
                    id=1,
                    email="a@example.com",
                    role="USER",
                    created_at=datetime(2023, 12, 31, 23, 59, tzinfo=UTC),
                ),
                User(
                    id=2,
                    email="b@example.com",
                    role="USER",
                    created_at=datetime(2024, 1, 1, 0, 0, tzinfo=UTC),
                ),
                User(
                    id=3,
                    email="c@example.com",
                    role="USER",
                    created_at=datetime(2024, 1, 31, 23, 59, tzinfo=UTC),
                ),
                User(
                    id=4,
                    email="d@example.com",
                    role="USER",
                    created_at=datetime(2024, 2, 1, 0, 0, tzinfo=UTC),
                ),
            ]
        )
        await db_session.flush()

        records = await RecordRepository().fetch_records(
            db_session, Entity.USERS, date(2024, 1, 1), date(2024, 1, 31)
        )

        assert [record["id"] for record in records] == [2, 3]
        assert records[0]["status"] == "active"

    async def test_sales_in_primary_key_order(self, db_session):
        db_session.add_all(
            [
                SalesMetric(
                    id=2,
                    date=date(2024, 1, 1),
                    revenue=Decimal("10.00"),
                    orders=1,
                    customers=1,
                    channel="online",
                ),
                SalesMetric(
                    id=1,
                    date=date(2024, 1, 2),
                    revenue=Decimal("5.50"),
                    orders=1,
                    customers=1,
                    channel="retail",
                ),
            ]
        )
        await db_session.flush()

        records = await RecordRepository().fetch_records(db_session, Entity.SALES)

        assert [record["id"] for record in records] == [1, 2]
        assert records[0]["revenue"] == 5.5
