"""API routes for table views."""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.features.data_platform.fields import Entity, SortDirection
from app.features.tables.dependencies import FilterParams, filter_params
from app.features.tables.schemas import PageResult
from app.features.tables.service import TableService

router = APIRouter(prefix="/tables", tags=["tables"])


@router.get(
    "/{entity}",
    response_model=PageResult,
    summary="Table page",
    description="""
One page of an entity's records after search, filtering and sorting.

**Search** matches a case-insensitive substring against the entity's
searchable fields (users: first name, last name, email; inventory: sku,
name, category; sales: channel).

**Filters** are exact matches and must be filterable for the entity
(users: role, status, is_active; inventory: category, supplier;
sales: channel). Others are rejected with 400.

**Sorting** is stable: rows with equal keys keep their stored order, so
paging through unchanged data is repeatable.

**Paging** is 1-indexed. A page past the end returns no items with the
real totals.
""",
)
async def get_table_page(
    entity: Entity = Path(..., description="Entity to list."),
    filters: FilterParams = Depends(filter_params),
    sort_by: str | None = Query(None, description="Field key to sort by, e.g. createdAt."),
    sort_order: SortDirection | None = Query(None, description="asc or desc."),
    page: int = Query(1, ge=1, description="Page number (1-indexed)."),
    page_size: int | None = Query(None, ge=1, description="Items per page."),
    db: AsyncSession = Depends(get_db),
) -> PageResult:
    """Return one page of records for an entity."""
    service = TableService()
    return await service.list_page(
        db=db,
        entity=entity,
        search=filters.search,
        predicates=filters.predicates,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )
