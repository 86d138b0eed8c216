"""API routes for analytics endpoints.

These endpoints feed the dashboard cards and charts of the admin panel and
the e-commerce dashboard.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging import get_logger
from app.features.analytics.schemas import (
    CustomerMetricsResponse,
    DashboardPeriod,
    DashboardResponse,
    InventorySummaryResponse,
    SalesSummaryResponse,
    TimeGranularity,
    UserAnalyticsResponse,
)
from app.features.analytics.service import AnalyticsService

logger = get_logger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


# =============================================================================
# Dashboard Endpoints
# =============================================================================


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Dashboard overview",
    description="""
Headline user numbers and chart series for a look-back period.

**Periods**: `7d`, `30d`, `90d`, `1y`; omitted means `ANALYTICS_DEFAULT_PERIOD`
(`30d` unless configured). The window ends today (UTC) and covers exactly
that many days.

**Growth figures** compare the window with the preceding window of equal
length. A zero baseline reports 0.

**Charts**:
- `user_growth`: sign-ups per day, one entry for every day in the window
- `users_by_role`: count and whole-percent share per role
""",
)
async def get_dashboard(
    period: DashboardPeriod | None = Query(
        None,
        description="Look-back period: 7d, 30d, 90d or 1y. Defaults to the configured period.",
    ),
    db: AsyncSession = Depends(get_db),
) -> DashboardResponse:
    """Compute the dashboard for a period.

    Args:
        period: Look-back period.
        db: Database session.

    Returns:
        Dashboard overview and charts.
    """
    service = AnalyticsService()
    return await service.compute_dashboard(db=db, period=period)


@router.get(
    "/users",
    response_model=UserAnalyticsResponse,
    summary="User analytics",
    description="""
Role and status distribution of users created in a period, with a
registration trend grouped by day, week (Sunday start) or month.
""",
)
async def get_user_analytics(
    period: DashboardPeriod | None = Query(None, description="Look-back period."),
    group_by: TimeGranularity = Query(
        TimeGranularity.DAY,
        description="Trend granularity: day, week or month.",
    ),
    db: AsyncSession = Depends(get_db),
) -> UserAnalyticsResponse:
    """Compute user analytics for a period."""
    service = AnalyticsService()
    return await service.compute_user_analytics(db=db, period=period, group_by=group_by)


# =============================================================================
# Commerce Endpoints
# =============================================================================


@router.get(
    "/sales",
    response_model=SalesSummaryResponse,
    summary="Sales summary",
    description="""
Revenue, orders and customers for a date range, with growth versus the
preceding range of equal length and daily series for charting.

**Date Range**: both ends inclusive; maximum 730 days.

**Example**: `GET /analytics/sales?start_date=2024-01-01&end_date=2024-01-31&channel=online`
""",
)
async def get_sales_summary(
    start_date: date = Query(..., description="Start of range (inclusive). YYYY-MM-DD."),
    end_date: date = Query(..., description="End of range (inclusive). YYYY-MM-DD."),
    channel: str | None = Query(None, description="Restrict to one sales channel."),
    db: AsyncSession = Depends(get_db),
) -> SalesSummaryResponse:
    """Compute the sales summary for a date range."""
    service = AnalyticsService()
    return await service.compute_sales_summary(
        db=db,
        start_date=start_date,
        end_date=end_date,
        channel=channel,
    )


@router.get(
    "/customers",
    response_model=CustomerMetricsResponse,
    summary="Customer metrics",
    description="""
Latest customer snapshot in the range and the growth rate of the customer
base between the two most recent snapshots.
""",
)
async def get_customer_metrics(
    start_date: date = Query(..., description="Start of range (inclusive). YYYY-MM-DD."),
    end_date: date = Query(..., description="End of range (inclusive). YYYY-MM-DD."),
    db: AsyncSession = Depends(get_db),
) -> CustomerMetricsResponse:
    """Compute customer metrics for a date range."""
    service = AnalyticsService()
    return await service.compute_customer_metrics(db=db, start_date=start_date, end_date=end_date)


@router.get(
    "/inventory",
    response_model=InventorySummaryResponse,
    summary="Inventory summary",
    description="""
Stock totals, stock value (price x stock), low-stock and out-of-stock
counts, and a per-category breakdown.

An item is low on stock when its stock is at or below its reorder level.
""",
)
async def get_inventory_summary(
    category: str | None = Query(None, description="Restrict to one category (exact match)."),
    low_stock: bool = Query(False, description="Only include low-stock items."),
    db: AsyncSession = Depends(get_db),
) -> InventorySummaryResponse:
    """Compute the inventory summary."""
    service = AnalyticsService()
    return await service.compute_inventory_summary(
        db=db,
        category=category,
        low_stock_only=low_stock,
    )
