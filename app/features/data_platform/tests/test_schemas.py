"""Tests for flat record schemas."""

from datetime import UTC, date, datetime

from app.features.data_platform.schemas import (
    CustomerRecord,
    InventoryRecord,
    SalesRecord,
    UserRecord,
)


def test_user_record_from_row(user_row):
    """ORM rows dump to camelCase keys with the derived status."""
    record = UserRecord.model_validate(user_row).to_record()

    assert record["firstName"] == "Ada"
    assert record["isActive"] is False
    assert record["status"] == "inactive"
    assert record["lastLogin"] is None
    assert record["permissions"] == ["users:read", "users:write"]
    assert record["createdAt"] == datetime(2024, 1, 2, 9, 0, tzinfo=UTC)
    assert "first_name" not in record


def test_sales_record_decimal_becomes_float(sales_row):
    record = SalesRecord.model_validate(sales_row).to_record()

    assert record == {
        "id": 7,
        "date": date(2024, 1, 1),
        "revenue": 1234.5,
        "orders": 12,
        "customers": 10,
        "channel": "online",
    }
    assert isinstance(record["revenue"], float)


def test_customer_record(customer_row):
    record = CustomerRecord.model_validate(customer_row).to_record()

    assert record["totalCustomers"] == 120
    assert record["averageOrderValue"] == 45.1


def test_inventory_record(inventory_row):
    record = InventoryRecord.model_validate(inventory_row).to_record()

    assert record["reorderLevel"] == 10
    assert record["price"] == 49.99
    assert record["lastUpdated"] == datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


def test_populate_by_field_name():
    record = SalesRecord(
        id=1, date=date(2024, 1, 1), revenue=1, orders=1, customers=1, channel="retail"
    )
    assert record.to_record()["channel"] == "retail"
