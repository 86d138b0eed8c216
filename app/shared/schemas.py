"""Shared Pydantic schemas for paginated API responses."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginationParams(BaseModel):
    """1-indexed page window.

    ``page`` is deliberately unconstrained: a page outside
    ``1..pages`` is a valid request that yields an empty window.
    """

    page: int = Field(1, description="Page number (1-indexed)")
    page_size: int = Field(10, ge=1, description="Items per page")

    @property
    def offset(self) -> int:
        """Zero-based index of the first item on the page."""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        """Return page size as the window length."""
        return self.page_size


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response wrapper."""

    items: list[T] = Field(..., description="Page of items")
    total_items: int = Field(..., ge=0, description="Item count across all pages")
    total_pages: int = Field(..., ge=0, description="Total number of pages")
    page: int = Field(..., description="Requested page number")
    page_size: int = Field(..., ge=1, description="Items per page")
