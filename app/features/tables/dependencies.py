"""Query parameters shared by the table and export endpoints."""

from dataclasses import dataclass
from typing import Any

from fastapi import Query

from app.features.data_platform.fields import InventoryField, SalesField, UserField


@dataclass
class FilterParams:
    """Search term and exact-match predicates read from the query string."""

    search: str
    predicates: dict[str, Any]


def filter_params(
    search: str = Query("", description="Case-insensitive substring search."),
    role: str | None = Query(None, description="Users: exact role."),
    status: str | None = Query(None, description="Users: active or inactive."),
    is_active: bool | None = Query(None, description="Users: active flag."),
    category: str | None = Query(None, description="Inventory: exact category."),
    supplier: str | None = Query(None, description="Inventory: exact supplier."),
    channel: str | None = Query(None, description="Sales: exact channel."),
) -> FilterParams:
    """Collect filter query parameters keyed by record field key.

    Parameters left out of the request stay ``None`` and are dropped, so
    only predicates the caller actually sent are checked against the
    entity's filterable fields.
    """
    predicates = {
        UserField.ROLE.value: role,
        UserField.STATUS.value: status,
        UserField.IS_ACTIVE.value: is_active,
        InventoryField.CATEGORY.value: category,
        InventoryField.SUPPLIER.value: supplier,
        SalesField.CHANNEL.value: channel,
    }
    return FilterParams(
        search=search,
        predicates={key: value for key, value in predicates.items() if value is not None},
    )
