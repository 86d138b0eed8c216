"""Record repository: materializes record store rows into flat records.

Every feature works on an in-memory snapshot. This is the only place that
issues queries; the snapshot order (primary key ascending) is the insertion
order that stable sorting falls back on.
"""

import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from app.core.exceptions import DatabaseError
from app.core.logging import get_logger
from app.features.data_platform.fields import Entity
from app.features.data_platform.models import CustomerMetric, InventoryItem, SalesMetric, User
from app.features.data_platform.schemas import RECORD_SCHEMAS

logger = get_logger(__name__)

_MODELS: dict[Entity, Any] = {
    Entity.USERS: User,
    Entity.SALES: SalesMetric,
    Entity.CUSTOMERS: CustomerMetric,
    Entity.INVENTORY: InventoryItem,
}

# Column used for date-range restriction; inventory is a current-state table.
_DATE_COLUMNS: dict[Entity, InstrumentedAttribute[Any] | None] = {
    Entity.USERS: User.created_at,
    Entity.SALES: SalesMetric.date,
    Entity.CUSTOMERS: CustomerMetric.date,
    Entity.INVENTORY: None,
}


def _range_bounds(
    entity: Entity,
    start_date: datetime.date,
    end_date: datetime.date,
) -> tuple[Any, Any]:
    """Translate an inclusive date range into column comparison bounds.

    Timestamp columns get ``[start 00:00 UTC, end + 1 day 00:00 UTC)``.
    """
    if entity is Entity.USERS:
        lower = datetime.datetime.combine(start_date, datetime.time.min, tzinfo=datetime.UTC)
        upper = datetime.datetime.combine(
            end_date + datetime.timedelta(days=1), datetime.time.min, tzinfo=datetime.UTC
        )
        return lower, upper
    return start_date, end_date + datetime.timedelta(days=1)


class RecordRepository:
    """Load entity snapshots as flat records."""

    async def fetch_records(
        self,
        db: AsyncSession,
        entity: Entity,
        start_date: datetime.date | None = None,
        end_date: datetime.date | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch all records of an entity, optionally within a date range.

        Args:
            db: Database session.
            entity: Entity to load.
            start_date: Inclusive lower bound on the entity's date column.
            end_date: Inclusive upper bound on the entity's date column.

        Returns:
            Records in primary key order.

        Raises:
            DatabaseError: If the query fails.
        """
        model = _MODELS[entity]
        stmt = select(model).order_by(model.id)

        date_column = _DATE_COLUMNS[entity]
        if date_column is not None and start_date is not None and end_date is not None:
            lower, upper = _range_bounds(entity, start_date, end_date)
            stmt = stmt.where((date_column >= lower) & (date_column < upper))

        try:
            result = await db.execute(stmt)
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(
                "records.fetch_failed",
                entity=entity.value,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            raise DatabaseError(
                message=f"Failed to load {entity.value} records",
                details={"entity": entity.value},
            ) from e

        schema = RECORD_SCHEMAS[entity]
        records = [schema.model_validate(row).to_record() for row in rows]

        logger.debug(
            "records.fetched",
            entity=entity.value,
            count=len(records),
            start_date=str(start_date) if start_date else None,
            end_date=str(end_date) if end_date else None,
        )
        return records
