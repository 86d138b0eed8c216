"""Pydantic schemas for analytics endpoints.

These schemas describe dashboard cards and chart series derived from
records. They are computed per request and never stored.
"""

import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

# =============================================================================
# Enums
# =============================================================================


class TimeGranularity(str, Enum):
    """Time granularity for trend aggregations."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class DashboardPeriod(str, Enum):
    """Look-back windows offered by the dashboard period selector."""

    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"
    YEAR = "1y"

    @property
    def days(self) -> int:
        """Window length in days."""
        return {"7d": 7, "30d": 30, "90d": 90, "1y": 365}[self.value]


# =============================================================================
# Chart Series
# =============================================================================


class DailyCount(BaseModel):
    """Number of records dated on one calendar day."""

    date: datetime.date = Field(..., description="Calendar day.")
    count: int = Field(..., ge=0, description="Records dated on this day.")


class DailyTotal(BaseModel):
    """Sum of a numeric field over records dated on one calendar day."""

    date: datetime.date = Field(..., description="Calendar day.")
    total: float = Field(..., description="Sum of the field for this day.")


class TrendPoint(BaseModel):
    """Record count for one day, week or month."""

    period: str = Field(
        ...,
        description="Period key: YYYY-MM-DD for days and weeks (week start, Sunday), "
        "YYYY-MM for months.",
    )
    count: int = Field(..., ge=0, description="Records in the period.")


class BreakdownItem(BaseModel):
    """Share of records holding one value of a categorical field."""

    value: str = Field(..., description="Field value (empty string for missing).")
    count: int = Field(..., ge=0, description="Records holding this value.")
    percentage: int = Field(
        ...,
        ge=0,
        le=100,
        description="Share of all records, rounded to a whole percent.",
    )


# =============================================================================
# Dashboard
# =============================================================================


class GrowthMetrics(BaseModel):
    """Period-over-period growth percentages.

    Each figure compares the selected window with the preceding window of
    equal length. A zero baseline reports 0.
    """

    users: float = Field(..., description="Growth of new sign-ups, in percent.")
    active_users: float = Field(..., description="Growth of active new sign-ups, in percent.")


class DashboardOverview(BaseModel):
    """Headline numbers for the dashboard cards."""

    total_users: int = Field(..., ge=0)
    active_users: int = Field(..., ge=0)
    total_roles: int = Field(..., ge=0, description="Distinct roles held by users.")
    new_users: int = Field(..., ge=0, description="Users created within the period.")
    growth: GrowthMetrics


class DashboardCharts(BaseModel):
    """Chart series for the dashboard."""

    user_growth: list[DailyCount] = Field(
        ...,
        description="Sign-ups per day across the period; one entry per day.",
    )
    users_by_role: list[BreakdownItem]


class RecentActivity(BaseModel):
    """A recent sign-up shown in the dashboard activity feed."""

    id: int
    name: str = Field(..., description="Full name, or the email when no name is set.")
    email: str
    role: str
    action: str = "User registered"
    timestamp: datetime.datetime | None = Field(None, description="When the user was created.")
    avatar: str | None = None


class DashboardResponse(BaseModel):
    """Dashboard overview, charts and recent sign-ups for a period."""

    overview: DashboardOverview
    charts: DashboardCharts
    recent_activity: list[RecentActivity] = Field(
        default_factory=list,
        description="The most recently created users, newest first.",
    )
    period: DashboardPeriod
    start_date: datetime.date
    end_date: datetime.date
    generated_at: datetime.datetime


class UserAnalyticsResponse(BaseModel):
    """User distribution and registration trend for a period."""

    total_users: int = Field(..., ge=0, description="Users created within the period.")
    users_by_role: dict[str, int]
    users_by_status: dict[str, int]
    registration_trend: list[TrendPoint]
    period: DashboardPeriod
    group_by: TimeGranularity


# =============================================================================
# Sales / Customers / Inventory
# =============================================================================


class ChannelShare(BaseModel):
    """Revenue attributed to one sales channel."""

    channel: str
    revenue: float = Field(..., ge=0)
    share_pct: float = Field(..., ge=0, le=100)


class SalesSummaryResponse(BaseModel):
    """Sales totals, growth and daily series for a date range."""

    total_revenue: float = Field(..., ge=0)
    total_orders: int = Field(..., ge=0)
    total_customers: int = Field(..., ge=0)
    average_order_value: float = Field(
        ...,
        ge=0,
        description="total_revenue / total_orders; 0 when there are no orders.",
    )
    revenue_growth_pct: float = Field(
        ...,
        description="Revenue change versus the preceding range of equal length, in percent.",
    )
    orders_growth_pct: float = Field(
        ...,
        description="Order change versus the preceding range of equal length, in percent.",
    )
    daily_revenue: list[DailyTotal]
    daily_records: list[DailyCount]
    revenue_by_channel: list[ChannelShare]
    start_date: datetime.date
    end_date: datetime.date
    channel: str | None = Field(None, description="Channel filter applied (if any).")


class CustomerMetricsResponse(BaseModel):
    """Latest customer snapshot in range with growth versus the prior one."""

    total_customers: int = Field(..., ge=0)
    new_customers: int = Field(..., ge=0)
    returning_customers: int = Field(..., ge=0)
    average_order_value: float = Field(..., ge=0)
    growth_rate: float = Field(
        ...,
        description="totalCustomers change between the two most recent snapshots, "
        "in percent. 0 with fewer than two snapshots.",
    )
    snapshot_date: datetime.date | None = None
    start_date: datetime.date
    end_date: datetime.date


class CategoryStock(BaseModel):
    """Stock held in one product category."""

    category: str
    items: int = Field(..., ge=0)
    stock: int = Field(..., ge=0)
    reserved: int = Field(..., ge=0)


class InventorySummaryResponse(BaseModel):
    """Stock position across inventory items."""

    total_items: int = Field(..., ge=0)
    total_stock: int = Field(..., ge=0)
    total_reserved: int = Field(..., ge=0)
    stock_value: float = Field(..., ge=0, description="Sum of price x stock.")
    low_stock_items: int = Field(
        ...,
        ge=0,
        description="Items with stock at or below their reorder level.",
    )
    out_of_stock_items: int = Field(..., ge=0)
    by_category: list[CategoryStock]
    category: str | None = None
    low_stock_only: bool = False


# =============================================================================
# Date Range Validation
# =============================================================================


class DateRangeParams(BaseModel):
    """Inclusive analysis window."""

    start_date: datetime.date = Field(..., description="Start of the window (inclusive).")
    end_date: datetime.date = Field(..., description="End of the window (inclusive).")

    @field_validator("end_date")
    @classmethod
    def validate_date_range(cls, v: datetime.date, info: object) -> datetime.date:
        """Ensure end_date >= start_date."""
        data = getattr(info, "data", {})
        if "start_date" in data and v < data["start_date"]:
            msg = "end_date must be >= start_date"
            raise ValueError(msg)
        return v

    @property
    def days(self) -> int:
        """Number of days in the window, both ends included."""
        return (self.end_date - self.start_date).days + 1

    def previous(self) -> "DateRangeParams":
        """The window of equal length ending the day before this one."""
        end = self.start_date - datetime.timedelta(days=1)
        return DateRangeParams(
            start_date=end - datetime.timedelta(days=self.days - 1),
            end_date=end,
        )
