"""Pydantic schemas describing one table view.

A table view is the triple (filter, sort, page) applied to a record
collection. All three are built per request and discarded.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.features.data_platform.fields import SortDirection
from app.shared.schemas import PaginatedResponse, PaginationParams

# A page window is the shared pagination schema.
PageSpec = PaginationParams

# Rows are flat records; values stay Python objects (datetimes, lists).
PageResult = PaginatedResponse[dict[str, Any]]


class FilterSpec(BaseModel):
    """Which records to keep.

    A record passes when the search term matches any searchable field
    (case-insensitive substring) and every non-empty predicate matches
    exactly. Predicates with a None or empty-string value are ignored.
    """

    model_config = ConfigDict(frozen=True)

    search: str = Field("", description="Free-text search term.")
    predicates: dict[str, Any] = Field(
        default_factory=dict,
        description="Exact-match predicates keyed by field key.",
    )

    def active_predicates(self) -> dict[str, Any]:
        """Predicates that take part in filtering."""
        return {key: value for key, value in self.predicates.items() if value not in (None, "")}


class SortSpec(BaseModel):
    """Sort key and direction."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Field key to sort by.")
    direction: SortDirection = Field(SortDirection.ASC, description="asc or desc.")
