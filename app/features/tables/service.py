"""Service layer for table views.

Turns raw query parameters into validated ``FilterSpec``/``SortSpec``/
``PageSpec`` values for an entity, then runs the engine over a freshly
loaded snapshot.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import BadRequestError, ValidationError
from app.core.logging import get_logger
from app.features.data_platform.fields import Entity, SortDirection, get_entity_schema
from app.features.data_platform.repository import RecordRepository
from app.features.tables.schemas import FilterSpec, PageResult, PageSpec, SortSpec
from app.features.tables.state import TableState

logger = get_logger(__name__)


class TableService:
    """Build and run table views for any entity."""

    def __init__(self, repository: RecordRepository | None = None) -> None:
        """Initialize table service."""
        self.settings = get_settings()
        self.repository = repository or RecordRepository()

    def resolve_filters(
        self,
        entity: Entity,
        search: str = "",
        predicates: dict[str, Any] | None = None,
    ) -> FilterSpec:
        """Validate predicates against the entity's filterable fields.

        Raises:
            BadRequestError: If an active predicate names a field that cannot
                be filtered on for this entity.
        """
        schema = get_entity_schema(entity)
        spec = FilterSpec(search=search or "", predicates=predicates or {})
        rejected = [key for key in spec.active_predicates() if key not in schema.filterable]
        if rejected:
            raise BadRequestError(
                message=f"Cannot filter {entity.value} by: {', '.join(rejected)}",
                details={"entity": entity.value, "fields": rejected},
            )
        return spec

    def resolve_sort(
        self,
        entity: Entity,
        sort_by: str | None = None,
        sort_order: SortDirection | None = None,
    ) -> SortSpec:
        """Build a SortSpec, falling back to the entity's default column.

        Raises:
            BadRequestError: If ``sort_by`` is not a field of the entity.
        """
        schema = get_entity_schema(entity)
        if sort_by is None:
            return SortSpec(
                field=schema.default_sort,
                direction=sort_order or schema.default_direction,
            )
        if not schema.has_field(sort_by):
            raise BadRequestError(
                message=f"Unknown sort field for {entity.value}: {sort_by}",
                details={"entity": entity.value, "field": sort_by},
            )
        return SortSpec(field=sort_by, direction=sort_order or SortDirection.ASC)

    def resolve_page(self, page: int = 1, page_size: int | None = None) -> PageSpec:
        """Build a PageSpec bounded by the configured maximum page size.

        Raises:
            ValidationError: If ``page_size`` is outside ``1..tables_max_page_size``.
        """
        size = page_size if page_size is not None else self.settings.tables_default_page_size
        if not 1 <= size <= self.settings.tables_max_page_size:
            raise ValidationError(
                message=f"page_size must be between 1 and {self.settings.tables_max_page_size}",
                details={"page_size": size},
            )
        return PageSpec(page=page, page_size=size)

    async def list_page(
        self,
        db: AsyncSession,
        entity: Entity,
        search: str = "",
        predicates: dict[str, Any] | None = None,
        sort_by: str | None = None,
        sort_order: SortDirection | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> PageResult:
        """Load an entity and return one filtered, sorted page.

        Args:
            db: Database session.
            entity: Entity to list.
            search: Free-text search term.
            predicates: Exact-match predicates keyed by field key.
            sort_by: Field key to sort by (entity default when omitted).
            sort_order: Sort direction.
            page: 1-indexed page number.
            page_size: Items per page (configured default when omitted).

        Returns:
            Page of records with pagination metadata.
        """
        state = TableState(
            filters=self.resolve_filters(entity, search, predicates),
            sort=self.resolve_sort(entity, sort_by, sort_order),
            page=self.resolve_page(page, page_size),
        )
        records = await self.repository.fetch_records(db, entity)
        result = state.run(records, entity)

        logger.info(
            "tables.page_computed",
            entity=entity.value,
            search=search or None,
            predicates=state.filters.active_predicates(),
            sort_by=state.sort.field if state.sort else None,
            sort_order=state.sort.direction.value if state.sort else None,
            page=result.page,
            page_size=result.page_size,
            total_items=result.total_items,
        )
        return result
