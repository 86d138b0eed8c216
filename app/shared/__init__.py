"""Shared utilities used across 3+ features."""

from app.shared.models import TimestampMixin
from app.shared.schemas import PaginatedResponse, PaginationParams
from app.shared.utils import page_count, paginate_response

__all__ = [
    "PaginatedResponse",
    "PaginationParams",
    "TimestampMixin",
    "page_count",
    "paginate_response",
]
