"""Filter, sort and paginate record collections for table views.

Callers always compose the three steps in the same order:
``paginate_records(sort_records(filter_records(...)))``. Filtering runs
first because it shrinks the collection; windowing runs last.

None of these functions raise on odd input: unknown fields read as missing,
and out-of-range pages come back empty.
"""

import datetime
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from app.features.data_platform.fields import Record, SortDirection
from app.features.tables.schemas import FilterSpec, PageResult, PageSpec, SortSpec
from app.shared.utils import paginate_response

# Sort ranks: strings (and missing values, read as ""), numbers, timestamps.
_TEXT, _NUMBER, _TIMESTAMP = 0, 1, 2


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def matches_search(record: Record, term: str, searchable: Sequence[str]) -> bool:
    """Case-insensitive substring match against any searchable field."""
    if not term:
        return True
    needle = term.casefold()
    return any(needle in _as_text(record.get(key)).casefold() for key in searchable)


def matches_predicates(record: Record, predicates: dict[str, Any]) -> bool:
    """Exact match on every predicate.

    Values compare directly first, then by text form, so a query-string
    ``"true"`` matches a boolean ``True`` and ``"3"`` matches ``3``.
    """
    for key, expected in predicates.items():
        actual = record.get(key)
        if actual != expected and _as_text(actual) != _as_text(expected):
            return False
    return True


def filter_records(
    records: Sequence[Record],
    spec: FilterSpec,
    searchable: Sequence[str],
) -> list[Record]:
    """Keep records matching the search term and all active predicates.

    Args:
        records: Full collection.
        spec: Search term and predicates.
        searchable: Field keys the search term is matched against.

    Returns:
        Matching records in their original order.
    """
    predicates = spec.active_predicates()
    return [
        record
        for record in records
        if matches_search(record, spec.search, searchable)
        and matches_predicates(record, predicates)
    ]


def sort_key(value: Any) -> tuple[int, Any, str]:
    """Total-order key for one field value.

    Strings compare case-insensitively with an ordinal tiebreak, numbers
    numerically, dates and datetimes chronologically. Missing values sort
    as the empty string.
    """
    if value is None:
        return (_TEXT, "", "")
    if isinstance(value, bool | int | float | Decimal):
        return (_NUMBER, value, "")
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(datetime.UTC).replace(tzinfo=None)
        return (_TIMESTAMP, value, "")
    if isinstance(value, datetime.date):
        return (_TIMESTAMP, datetime.datetime.combine(value, datetime.time.min), "")
    text = _as_text(value)
    return (_TEXT, text.casefold(), text)


def sort_records(records: Sequence[Record], spec: SortSpec | None) -> list[Record]:
    """Stable sort by one field.

    Records with equal keys keep their input order in both directions, so
    repeated calls on unchanged input page identically.
    """
    if spec is None:
        return list(records)
    return sorted(
        records,
        key=lambda record: sort_key(record.get(spec.field)),
        reverse=spec.direction == SortDirection.DESC,
    )


def paginate_records(records: Sequence[Record], spec: PageSpec) -> PageResult:
    """Cut one page out of a collection.

    ``total_pages`` is ``ceil(total_items / page_size)``. A page below 1 or
    past the last page yields an empty ``items`` list with correct totals.
    """
    if spec.page < 1:
        window: Sequence[Record] = []
    else:
        window = records[spec.offset : spec.offset + spec.limit]
    return paginate_response([dict(record) for record in window], len(records), spec)


def query_table(
    records: Sequence[Record],
    filter_spec: FilterSpec,
    sort_spec: SortSpec | None,
    page_spec: PageSpec,
    searchable: Sequence[str],
) -> PageResult:
    """Filter, then sort, then paginate."""
    return paginate_records(
        sort_records(filter_records(records, filter_spec, searchable), sort_spec),
        page_spec,
    )
