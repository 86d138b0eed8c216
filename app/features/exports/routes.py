"""API routes for report exports."""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.features.data_platform.fields import Entity, SortDirection
from app.features.exports.csv_export import content_disposition, default_export_filename
from app.features.exports.schemas import ExportFormat, ExportSummary, JsonExportResponse
from app.features.exports.service import ExportService
from app.features.tables.dependencies import FilterParams, filter_params

router = APIRouter(prefix="/reports", tags=["reports"])


def _split_fields(fields: str | None) -> list[str]:
    if not fields:
        return []
    return [key.strip() for key in fields.split(",") if key.strip()]


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": content_disposition(filename)}


@router.get(
    "/export",
    summary="Export records",
    description="""
Download an entity's records as CSV or JSON, after the same search,
filters and sort as `GET /tables/{entity}` (no paging).

**CSV**: Title Case header row (unless `include_headers=false`), UTF-8
with a byte order mark so spreadsheet tools detect the encoding. Booleans
render as Yes/No, date-times as `MM/DD/YYYY, HH:MM:SS AM`, empty last
logins as `Never`, permissions as a quoted `; `-separated list.

**Columns**: `fields=id,firstName,email` selects and orders columns;
omitted means the entity's default export columns.

**Date range**: `start_date` and `end_date` (both inclusive, given together)
restrict users by creation day and sales and customer snapshots by date.
Inventory ignores them.

**Example**: `GET /reports/export?entity=users&role=admin&fields=id,email,lastLogin`
""",
    responses={
        200: {
            "content": {"text/csv": {}, "application/json": {}},
            "description": "CSV file or JSON export.",
        }
    },
)
async def export_records(
    entity: Entity = Query(..., description="Entity to export."),
    fields: str | None = Query(None, description="Comma-separated field keys, in column order."),
    include_headers: bool = Query(True, description="Emit a header row (CSV only)."),
    format: ExportFormat = Query(ExportFormat.CSV, description="csv or json."),
    filename: str | None = Query(None, description="Download filename override."),
    filters: FilterParams = Depends(filter_params),
    sort_by: str | None = Query(None, description="Field key to sort by."),
    sort_order: SortDirection | None = Query(None, description="asc or desc."),
    start_date: date | None = Query(None, description="Start of range (inclusive). YYYY-MM-DD."),
    end_date: date | None = Query(None, description="End of range (inclusive). YYYY-MM-DD."),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Download matching records as a CSV or JSON attachment."""
    service = ExportService()
    options = service.build_options(entity, _split_fields(fields), include_headers, filename)

    if format == ExportFormat.JSON:
        body: JsonExportResponse = await service.export_json(
            db=db,
            entity=entity,
            options=options,
            search=filters.search,
            predicates=filters.predicates,
            sort_by=sort_by,
            sort_order=sort_order,
            start_date=start_date,
            end_date=end_date,
        )
        return JSONResponse(
            content=jsonable_encoder(body),
            headers=_attachment(filename or default_export_filename(entity, extension="json")),
        )

    export = await service.export_csv(
        db=db,
        entity=entity,
        options=options,
        search=filters.search,
        predicates=filters.predicates,
        sort_by=sort_by,
        sort_order=sort_order,
        start_date=start_date,
        end_date=end_date,
    )
    return Response(
        content=export.content,
        media_type="text/csv; charset=utf-8",
        headers=_attachment(export.filename),
    )


@router.get(
    "/export/summary",
    response_model=ExportSummary,
    summary="Export preview",
    description="""
Row count, header labels and an estimated file size for an export with
the given entity, columns and filters. The estimate is one sample row
(plus header) times the row count.
""",
)
async def get_export_summary(
    entity: Entity = Query(..., description="Entity to export."),
    fields: str | None = Query(None, description="Comma-separated field keys, in column order."),
    include_headers: bool = Query(True, description="Count the header row in the estimate."),
    filters: FilterParams = Depends(filter_params),
    start_date: date | None = Query(None, description="Start of range (inclusive). YYYY-MM-DD."),
    end_date: date | None = Query(None, description="End of range (inclusive). YYYY-MM-DD."),
    db: AsyncSession = Depends(get_db),
) -> ExportSummary:
    """Preview an export."""
    service = ExportService()
    options = service.build_options(entity, _split_fields(fields), include_headers)
    return await service.summarize(
        db=db,
        entity=entity,
        options=options,
        search=filters.search,
        predicates=filters.predicates,
        start_date=start_date,
        end_date=end_date,
    )
