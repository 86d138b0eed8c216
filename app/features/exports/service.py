"""Service layer for report exports.

An export is a table view without paging: the same filters and sort as the
table endpoint, projected onto the selected columns.
"""

import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import BadRequestError, ValidationError
from app.core.logging import get_logger
from app.features.data_platform.fields import Entity, Record, SortDirection, get_entity_schema
from app.features.data_platform.repository import RecordRepository
from app.features.exports.csv_export import (
    default_export_filename,
    encode_csv,
    export_summary,
    selected_fields,
    to_csv,
)
from app.features.exports.schemas import (
    CsvExport,
    ExportFormat,
    ExportInfo,
    ExportOptions,
    ExportSummary,
    JsonExportResponse,
)
from app.features.tables.engine import filter_records, sort_records
from app.features.tables.service import TableService

logger = get_logger(__name__)


class ExportService:
    """Build CSV and JSON exports and export previews."""

    def __init__(self, repository: RecordRepository | None = None) -> None:
        """Initialize export service."""
        self.settings = get_settings()
        self.repository = repository or RecordRepository()
        self.tables = TableService(repository=self.repository)

    def build_options(
        self,
        entity: Entity,
        fields: list[str] | None = None,
        include_headers: bool = True,
        filename: str | None = None,
    ) -> ExportOptions:
        """Validate the column selection for an entity.

        Raises:
            BadRequestError: If a selected field is not a field of the entity.
        """
        schema = get_entity_schema(entity)
        selection = [key for key in fields or [] if key]
        unknown = schema.unknown_fields(selection)
        if unknown:
            raise BadRequestError(
                message=f"Unknown export fields for {entity.value}: {', '.join(unknown)}",
                details={"entity": entity.value, "fields": unknown},
            )
        return ExportOptions(
            fields=tuple(selection),
            include_headers=include_headers,
            filename=filename,
            datetime_format=self.settings.export_datetime_format,
        )

    def resolve_window(
        self,
        start_date: datetime.date | None = None,
        end_date: datetime.date | None = None,
    ) -> tuple[datetime.date | None, datetime.date | None]:
        """Check an optional inclusive date range.

        The range restricts users by creation day and sales and customer
        snapshots by their date; inventory has no date column and ignores it.

        Raises:
            ValidationError: If only one end is given or the range is inverted.
        """
        if (start_date is None) != (end_date is None):
            raise ValidationError(
                message="start_date and end_date must be given together",
                details={"start_date": str(start_date), "end_date": str(end_date)},
            )
        if start_date is not None and end_date is not None and end_date < start_date:
            raise ValidationError(
                message="end_date must be >= start_date",
                details={"start_date": str(start_date), "end_date": str(end_date)},
            )
        return start_date, end_date

    async def load_rows(
        self,
        db: AsyncSession,
        entity: Entity,
        search: str = "",
        predicates: dict[str, Any] | None = None,
        sort_by: str | None = None,
        sort_order: SortDirection | None = None,
        start_date: datetime.date | None = None,
        end_date: datetime.date | None = None,
    ) -> list[Record]:
        """Load, filter and sort every matching record.

        Raises:
            ValidationError: If more rows match than ``export_max_rows``.
        """
        filter_spec = self.tables.resolve_filters(entity, search, predicates)
        sort_spec = self.tables.resolve_sort(entity, sort_by, sort_order)
        start_date, end_date = self.resolve_window(start_date, end_date)
        records = await self.repository.fetch_records(db, entity, start_date, end_date)
        rows = sort_records(
            filter_records(records, filter_spec, get_entity_schema(entity).searchable),
            sort_spec,
        )
        if len(rows) > self.settings.export_max_rows:
            raise ValidationError(
                message=f"Export of {len(rows)} rows exceeds the limit of "
                f"{self.settings.export_max_rows}; narrow the filters",
                details={"rows": len(rows), "limit": self.settings.export_max_rows},
            )
        return rows

    def render_csv(
        self,
        rows: list[Record],
        options: ExportOptions,
        entity: Entity,
        today: datetime.date | None = None,
    ) -> CsvExport:
        """Serialize rows into a BOM-prefixed CSV download."""
        text = to_csv(rows, options, entity)
        export = CsvExport(
            content=encode_csv(text),
            filename=options.filename or default_export_filename(entity, today),
            row_count=len(rows),
        )
        logger.info(
            "exports.csv_generated",
            entity=entity.value,
            rows=export.row_count,
            columns=len(selected_fields(options, get_entity_schema(entity))),
            bytes=len(export.content),
            filename=export.filename,
        )
        return export

    def render_json(
        self,
        rows: list[Record],
        options: ExportOptions,
        entity: Entity,
    ) -> JsonExportResponse:
        """Project rows onto the selected columns with export info."""
        fields = selected_fields(options, get_entity_schema(entity))
        data = [{key: row.get(key) for key in fields} for row in rows]
        response = JsonExportResponse(
            data=data,
            export_info=ExportInfo(
                entity=entity,
                format=ExportFormat.JSON,
                count=len(data),
                fields=fields,
                exported_at=datetime.datetime.now(datetime.UTC),
            ),
        )
        logger.info(
            "exports.json_generated",
            entity=entity.value,
            rows=len(data),
            columns=len(fields),
        )
        return response

    async def export_csv(
        self,
        db: AsyncSession,
        entity: Entity,
        options: ExportOptions,
        search: str = "",
        predicates: dict[str, Any] | None = None,
        sort_by: str | None = None,
        sort_order: SortDirection | None = None,
        start_date: datetime.date | None = None,
        end_date: datetime.date | None = None,
    ) -> CsvExport:
        """Load matching records and render them as CSV."""
        rows = await self.load_rows(
            db, entity, search, predicates, sort_by, sort_order, start_date, end_date
        )
        return self.render_csv(rows, options, entity)

    async def export_json(
        self,
        db: AsyncSession,
        entity: Entity,
        options: ExportOptions,
        search: str = "",
        predicates: dict[str, Any] | None = None,
        sort_by: str | None = None,
        sort_order: SortDirection | None = None,
        start_date: datetime.date | None = None,
        end_date: datetime.date | None = None,
    ) -> JsonExportResponse:
        """Load matching records and return them as JSON."""
        rows = await self.load_rows(
            db, entity, search, predicates, sort_by, sort_order, start_date, end_date
        )
        return self.render_json(rows, options, entity)

    async def summarize(
        self,
        db: AsyncSession,
        entity: Entity,
        options: ExportOptions,
        search: str = "",
        predicates: dict[str, Any] | None = None,
        start_date: datetime.date | None = None,
        end_date: datetime.date | None = None,
    ) -> ExportSummary:
        """Preview row count, headers and estimated size of an export."""
        filter_spec = self.tables.resolve_filters(entity, search, predicates)
        start_date, end_date = self.resolve_window(start_date, end_date)
        records = await self.repository.fetch_records(db, entity, start_date, end_date)
        rows = filter_records(records, filter_spec, get_entity_schema(entity).searchable)
        summary = export_summary(rows, options, entity)

        logger.info(
            "exports.summary_computed",
            entity=entity.value,
            total_records=summary.total_records,
            estimated_bytes=summary.estimated_bytes,
        )
        return summary
