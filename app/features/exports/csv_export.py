"""CSV serialization of record sets.

Output is meant to open cleanly in spreadsheet tools: a Title Case header
row, human-readable cells (``Yes``/``No``, formatted date-times, ``Never``
for logins that never happened) and RFC 4180 quoting. Files written to disk
or sent for download carry a UTF-8 byte order mark.

Nothing here raises for empty input: no records and headers on gives the
header row alone, headers off gives ``""``.

Quoting is done per cell rather than through ``csv.writer`` because
multi-value cells are always quoted, even when no character requires it.
"""

import datetime
import re
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote as url_quote

from app.features.data_platform.fields import Entity, EntitySchema, Record, get_entity_schema
from app.features.exports.schemas import ExportOptions, ExportSummary

BOM = "\ufeff"

_INTERNAL_UPPER = re.compile(r"(?<!^)([A-Z])")
_NEEDS_QUOTING = (",", '"', "\n")

KB = 1024
MB = 1024 * 1024


def title_case_header(key: str) -> str:
    """``lastLogin`` -> ``Last Login``; ``id`` -> ``Id``."""
    spaced = _INTERNAL_UPPER.sub(r" \1", key)
    return spaced[:1].upper() + spaced[1:]


def quote(text: str) -> str:
    """Wrap in double quotes, doubling any quotes inside."""
    return '"' + text.replace('"', '""') + '"'


def escape(text: str) -> str:
    """Quote ``text`` only if it contains a comma, a quote or a newline."""
    if any(char in text for char in _NEEDS_QUOTING):
        return quote(text)
    return text


def _as_datetime(value: Any) -> datetime.datetime | None:
    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time.min)
    elif isinstance(value, str):
        try:
            parsed = datetime.datetime.fromisoformat(value)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(datetime.UTC)
    return parsed


def format_cell(
    key: str,
    value: Any,
    schema: EntitySchema,
    datetime_format: str,
) -> str:
    """Render one cell.

    Rules apply in order: ``Never`` for an empty never-logged field, blank
    for null, ``Yes``/``No`` for booleans, formatted date-times for date
    fields, quoted ``"; "``-joined lists for multi-value fields, and plain
    escaped text for everything else. A date field holding an unparseable
    string falls through to plain text.
    """
    if value is None:
        return "Never" if key in schema.never_when_empty else ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if key in schema.date_fields:
        moment = _as_datetime(value)
        if moment is not None:
            return escape(moment.strftime(datetime_format))
    if key in schema.multi_value_fields and isinstance(value, list | tuple):
        return quote("; ".join(str(item) for item in value))
    return escape(str(value))


def selected_fields(options: ExportOptions, schema: EntitySchema) -> list[str]:
    """Columns to emit, in order; the entity default when none are selected."""
    return list(options.fields) if options.fields else list(schema.default_export)


def to_csv(records: Sequence[Record], options: ExportOptions, entity: Entity) -> str:
    """Serialize records to CSV text.

    Args:
        records: Records to export, already filtered and sorted.
        options: Column selection, header flag and date-time format.
        entity: Entity the records belong to.

    Returns:
        CSV text, rows joined with ``\\n`` and no trailing newline.
    """
    schema = get_entity_schema(entity)
    fields = selected_fields(options, schema)

    rows: list[str] = []
    if options.include_headers:
        rows.append(",".join(escape(title_case_header(key)) for key in fields))
    for record in records:
        rows.append(
            ",".join(
                format_cell(key, record.get(key), schema, options.datetime_format)
                for key in fields
            )
        )
    return "\n".join(rows)


def with_bom(text: str) -> str:
    """Prefix the UTF-8 byte order mark."""
    return BOM + text


def encode_csv(text: str) -> bytes:
    """Encode for download; the result starts with ``EF BB BF``."""
    return with_bom(text).encode("utf-8")


def default_export_filename(
    entity: Entity,
    today: datetime.date | None = None,
    extension: str = "csv",
) -> str:
    """``users-export-2024-01-31.csv``."""
    today = today or datetime.datetime.now(datetime.UTC).date()
    return f"{entity.value}-export-{today.isoformat()}.{extension}"


def content_disposition(filename: str) -> str:
    """Attachment header value safe for any filename.

    Header values travel as Latin-1, so non-ASCII characters, quotes and
    backslashes are replaced with ``_`` in the plain ``filename``; the exact
    name is then sent as an RFC 5987 ``filename*``.
    """
    fallback = "".join(
        char if char.isascii() and char.isprintable() and char not in '"\\' else "_"
        for char in filename
    )
    value = f'attachment; filename="{fallback}"'
    if fallback != filename:
        value += f"; filename*=UTF-8''{url_quote(filename, safe='')}"
    return value


def format_size(size: int) -> str:
    """Human-readable byte count: ``N bytes``, ``N.N KB`` or ``N.N MB``."""
    if size < KB:
        return f"{size} bytes"
    if size < MB:
        return f"{size / KB:.1f} KB"
    return f"{size / MB:.1f} MB"


def export_summary(
    records: Sequence[Record],
    options: ExportOptions,
    entity: Entity,
) -> ExportSummary:
    """Preview an export without building it.

    The size estimate is the encoded size of a one-record sample
    (header included) multiplied by the record count.
    """
    schema = get_entity_schema(entity)
    fields = selected_fields(options, schema)
    sample = to_csv(records[:1], options, entity)
    estimated = len(sample.encode("utf-8")) * len(records)
    return ExportSummary(
        entity=entity,
        total_records=len(records),
        fields=fields,
        headers=[title_case_header(key) for key in fields],
        estimated_size=format_size(estimated),
        estimated_bytes=estimated,
    )
