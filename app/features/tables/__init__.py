"""Tables module: filter, sort and paginate record collections."""

from app.features.tables.engine import (
    filter_records,
    paginate_records,
    query_table,
    sort_records,
)
from app.features.tables.routes import router
from app.features.tables.schemas import FilterSpec, PageResult, PageSpec, SortSpec
from app.features.tables.service import TableService
from app.features.tables.state import TableState

__all__ = [
    "FilterSpec",
    "PageResult",
    "PageSpec",
    "SortSpec",
    "TableService",
    "TableState",
    "filter_records",
    "paginate_records",
    "query_table",
    "router",
    "sort_records",
]
