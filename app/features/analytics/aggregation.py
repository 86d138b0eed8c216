"""Pure aggregation functions over flat records.

Nothing here raises on bad data. Division by zero returns 0, and values that
are missing, null or malformed are skipped (numbers) or excluded from buckets
(dates). Callers get a well-defined degenerate result instead of an error.
"""

import datetime
import math
from collections import Counter
from collections.abc import Iterable, Sequence
from decimal import Decimal
from enum import Enum
from typing import Any

from app.features.analytics.schemas import (
    BreakdownItem,
    DailyCount,
    DailyTotal,
    TimeGranularity,
    TrendPoint,
)
from app.features.data_platform.fields import Record, field_key

Number = int | float


def _numeric(value: Any) -> Number | None:
    """Return ``value`` as a number, or None if it is not numeric.

    Booleans are not numbers here even though ``bool`` subclasses ``int``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return value
    if isinstance(value, Decimal):
        return float(value)
    return None


def to_day(value: Any) -> datetime.date | None:
    """Resolve a record value to a calendar day.

    Accepts ``date``, ``datetime`` (aware values are converted to UTC first)
    and ISO-8601 strings. Anything else, including unparseable strings,
    yields None.
    """
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(datetime.UTC)
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        try:
            return to_day(datetime.datetime.fromisoformat(value))
        except ValueError:
            return None
    return None


def _days(start: datetime.date, end: datetime.date) -> list[datetime.date]:
    span = (end - start).days
    return [start + datetime.timedelta(days=offset) for offset in range(span + 1)]


def sum_field(records: Iterable[Record], field: str | Enum) -> Number:
    """Sum the numeric values of ``field`` across records.

    Args:
        records: Records to aggregate.
        field: Field key or field enum member.

    Returns:
        Sum of numeric values; 0 for empty input.
    """
    key = field_key(field)
    total: Number = 0
    for record in records:
        value = _numeric(record.get(key))
        if value is not None:
            total += value
    return total


def average(total: Number, count: int) -> float:
    """Return ``total / count``, or 0 when ``count`` is 0."""
    if count == 0:
        return 0
    return total / count


def growth_rate(current: Number, previous: Number) -> float:
    """Percentage change from ``previous`` to ``current``.

    A zero baseline returns 0. That is a guard, not a claim of zero growth:
    the change from nothing is undefined.
    """
    if previous == 0:
        return 0
    return ((current - previous) / previous) * 100


def numeric_value(record: Record, field: str | Enum) -> Number:
    """Numeric value of one field, or 0 when missing or not a number."""
    value = _numeric(record.get(field_key(field)))
    return 0 if value is None else value


def count_where(records: Iterable[Record], field: str | Enum, value: Any) -> int:
    """Count records whose ``field`` equals ``value``."""
    key = field_key(field)
    return sum(1 for record in records if record.get(key) == value)


def group_by_day(
    records: Iterable[Record],
    date_field: str | Enum,
    start: datetime.date,
    end: datetime.date,
) -> list[DailyCount]:
    """Count records per calendar day over an inclusive range.

    The output is dense: one bucket per day in ``[start, end]``, ascending,
    with ``count=0`` for days without records. Records whose date is
    missing, malformed or outside the range are ignored. ``start > end``
    yields an empty list.

    Args:
        records: Records to bucket.
        date_field: Field holding the record date.
        start: First day (inclusive).
        end: Last day (inclusive).

    Returns:
        Dense daily counts.
    """
    key = field_key(date_field)
    counts: Counter[datetime.date] = Counter()
    for record in records:
        day = to_day(record.get(key))
        if day is not None and start <= day <= end:
            counts[day] += 1
    return [DailyCount(date=day, count=counts[day]) for day in _days(start, end)]


def sum_by_day(
    records: Iterable[Record],
    date_field: str | Enum,
    value_field: str | Enum,
    start: datetime.date,
    end: datetime.date,
) -> list[DailyTotal]:
    """Sum a numeric field per calendar day over an inclusive range.

    Same bucketing rules as ``group_by_day``; non-numeric values add nothing.
    """
    date_key = field_key(date_field)
    value_key = field_key(value_field)
    totals: dict[datetime.date, Number] = {}
    for record in records:
        day = to_day(record.get(date_key))
        if day is None or not start <= day <= end:
            continue
        value = _numeric(record.get(value_key))
        if value is not None:
            totals[day] = totals.get(day, 0) + value
    return [DailyTotal(date=day, total=totals.get(day, 0)) for day in _days(start, end)]


def _period_key(day: datetime.date, granularity: TimeGranularity) -> str:
    if granularity == TimeGranularity.WEEK:
        # Weeks start on Sunday; isoweekday() is 7 for Sunday.
        week_start = day - datetime.timedelta(days=day.isoweekday() % 7)
        return week_start.isoformat()
    if granularity == TimeGranularity.MONTH:
        return f"{day.year:04d}-{day.month:02d}"
    return day.isoformat()


def group_by_period(
    records: Iterable[Record],
    date_field: str | Enum,
    granularity: TimeGranularity = TimeGranularity.DAY,
) -> list[TrendPoint]:
    """Count records per day, week or month.

    Unlike ``group_by_day`` the output is sparse: only periods that contain
    at least one record appear. Periods are ordered ascending.
    """
    key = field_key(date_field)
    counts: Counter[str] = Counter()
    for record in records:
        day = to_day(record.get(key))
        if day is not None:
            counts[_period_key(day, granularity)] += 1
    return [TrendPoint(period=period, count=counts[period]) for period in sorted(counts)]


def breakdown(records: Sequence[Record], field: str | Enum) -> list[BreakdownItem]:
    """Count records per distinct value of ``field`` with percentage shares.

    Percentages are rounded half-up to whole numbers. Items are ordered by count
    descending; equal counts keep first-appearance order.
    """
    key = field_key(field)
    counts: Counter[str] = Counter()
    for record in records:
        value = record.get(key)
        counts["" if value is None else str(value)] += 1

    total = len(records)
    items = [
        BreakdownItem(
            value=value,
            count=count,
            percentage=math.floor(count / total * 100 + 0.5) if total else 0,
        )
        for value, count in counts.items()
    ]
    return sorted(items, key=lambda item: item.count, reverse=True)
