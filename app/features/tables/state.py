"""Immutable table view state.

Each transition returns a new ``TableState``; nothing is mutated in place.
Changing the filters, the sort or the page size jumps back to page 1 so a
narrowed result never opens on a page that no longer exists.
"""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from app.features.data_platform.fields import Entity, Record, get_entity_schema
from app.features.tables.engine import query_table
from app.features.tables.schemas import FilterSpec, PageResult, PageSpec, SortSpec


class TableState(BaseModel):
    """Filter, sort and page selection for one table view."""

    model_config = ConfigDict(frozen=True)

    filters: FilterSpec = Field(default_factory=FilterSpec)
    sort: SortSpec | None = None
    page: PageSpec = Field(default_factory=PageSpec)

    def with_filters(self, filters: FilterSpec) -> "TableState":
        return self.model_copy(
            update={"filters": filters, "page": PageSpec(page=1, page_size=self.page.page_size)}
        )

    def with_sort(self, sort: SortSpec | None) -> "TableState":
        return self.model_copy(
            update={"sort": sort, "page": PageSpec(page=1, page_size=self.page.page_size)}
        )

    def with_page(self, page: int) -> "TableState":
        return self.model_copy(
            update={"page": PageSpec(page=page, page_size=self.page.page_size)}
        )

    def with_page_size(self, page_size: int) -> "TableState":
        return self.model_copy(update={"page": PageSpec(page=1, page_size=page_size)})

    def run(self, records: Sequence[Record], entity: Entity) -> PageResult:
        """Render the current page of ``records`` for ``entity``."""
        schema = get_entity_schema(entity)
        return query_table(records, self.filters, self.sort, self.page, schema.searchable)
