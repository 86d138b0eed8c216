#!/usr/bin/env python
"""Check database connectivity and the record tables behind AdminInsights.

Usage:
    uv run python scripts/check_db.py
"""

import asyncio
import sys

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine

from app.core.config import get_settings
from app.features.data_platform.models import CustomerMetric, InventoryItem, SalesMetric, User

RECORD_TABLES = (User, SalesMetric, CustomerMetric, InventoryItem)


async def check_database() -> int:
    """Verify the connection and report row counts per record table."""
    settings = get_settings()

    print("AdminInsights - Database Connectivity Check")
    print("=" * 45)
    print(f"Database URL: {settings.database_url.split('@')[-1]}")  # Hide credentials
    print()

    engine = create_async_engine(settings.database_url)

    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            assert result.scalar() == 1
            print("[OK] Basic connectivity")

            result = await conn.execute(text("SELECT version()"))
            version = result.scalar() or ""
            print(f"[OK] PostgreSQL version: {version[:50]}...")

            missing = 0
            for model in RECORD_TABLES:
                table = model.__tablename__
                exists = await conn.run_sync(
                    lambda sync_conn, name=table: sync_conn.dialect.has_table(sync_conn, name)
                )
                if not exists:
                    print(f"[WARN] Table {table} not found")
                    missing += 1
                    continue
                count = await conn.scalar(select(func.count()).select_from(model))
                print(f"[OK] {table}: {count} rows")

            if missing:
                print("       Create the schema before serving the dashboard.")

        print()
        print("Database check completed successfully!")
        return 0

    except SQLAlchemyError as e:
        print(f"[FAIL] Connection failed: {e}")
        print()
        print("Troubleshooting:")
        print("  1. Ensure PostgreSQL is running")
        print("  2. Check DATABASE_URL in .env file")
        return 1

    finally:
        await engine.dispose()


def main() -> None:
    sys.exit(asyncio.run(check_database()))


if __name__ == "__main__":
    main()
