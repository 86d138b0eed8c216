"""Exports module: CSV and JSON report downloads."""

from app.features.exports.csv_export import (
    default_export_filename,
    encode_csv,
    export_summary,
    to_csv,
    with_bom,
)
from app.features.exports.routes import router
from app.features.exports.schemas import ExportFormat, ExportOptions, ExportSummary
from app.features.exports.service import ExportService

__all__ = [
    "ExportFormat",
    "ExportOptions",
    "ExportService",
    "ExportSummary",
    "default_export_filename",
    "encode_csv",
    "export_summary",
    "router",
    "to_csv",
    "with_bom",
]
