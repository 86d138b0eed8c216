"""Shared utility functions."""

import math
from typing import TypeVar

from app.shared.schemas import PaginatedResponse, PaginationParams

T = TypeVar("T")


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` items (0 when empty)."""
    return math.ceil(total / page_size) if total > 0 else 0


def paginate_response(
    items: list[T],
    total: int,
    pagination: PaginationParams,
) -> PaginatedResponse[T]:
    """Create a paginated response from items and total count.

    Args:
        items: List of items for the current page.
        total: Total count of all items.
        pagination: Pagination parameters used for the query.

    Returns:
        PaginatedResponse with computed page count.
    """
    return PaginatedResponse[T](
        items=items,
        total_items=total,
        total_pages=page_count(total, pagination.page_size),
        page=pagination.page,
        page_size=pagination.page_size,
    )
