"""Pydantic schemas for report exports."""

import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.features.data_platform.fields import Entity


class ExportFormat(str, Enum):
    """Download formats offered by the report endpoint."""

    CSV = "csv"
    JSON = "json"


class ExportOptions(BaseModel):
    """Column selection and rendering options for one export.

    An empty ``fields`` list means the entity's default export columns.
    """

    model_config = ConfigDict(frozen=True)

    fields: tuple[str, ...] = Field(
        default=(),
        description="Field keys in column order.",
    )
    include_headers: bool = Field(True, description="Emit a Title Case header row.")
    filename: str | None = Field(None, description="Download filename override.")
    datetime_format: str = Field(
        "%m/%d/%Y, %I:%M:%S %p",
        description="strftime format for date-valued fields.",
    )


class ExportSummary(BaseModel):
    """Preview of what an export would contain."""

    entity: Entity
    total_records: int = Field(..., ge=0)
    fields: list[str] = Field(..., description="Field keys in column order.")
    headers: list[str] = Field(..., description="Header labels in column order.")
    estimated_size: str = Field(..., description="e.g. '812 bytes', '3.4 KB', '1.2 MB'.")
    estimated_bytes: int = Field(..., ge=0)


class ExportInfo(BaseModel):
    """Metadata attached to a JSON export."""

    entity: Entity
    format: ExportFormat
    count: int = Field(..., ge=0)
    fields: list[str]
    exported_at: datetime.datetime


class JsonExportResponse(BaseModel):
    """JSON export body: the selected columns of each record plus export info."""

    data: list[dict[str, Any]]
    export_info: ExportInfo


class CsvExport(BaseModel):
    """A rendered CSV download."""

    content: bytes = Field(..., description="UTF-8 bytes with a leading BOM.")
    filename: str
    row_count: int = Field(..., ge=0)
