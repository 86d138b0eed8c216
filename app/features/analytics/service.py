"""Service layer for analytics operations.

Each summary has a pure ``build_*`` function that works on already-loaded
records and an ``AnalyticsService`` method that loads the snapshot through
the record repository first.
"""

import datetime
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import ValidationError
from app.core.logging import get_logger
from app.features.analytics.aggregation import (
    average,
    breakdown,
    count_where,
    group_by_day,
    group_by_period,
    growth_rate,
    numeric_value,
    sum_by_day,
    sum_field,
    to_day,
)
from app.features.analytics.schemas import (
    CategoryStock,
    ChannelShare,
    CustomerMetricsResponse,
    DashboardCharts,
    DashboardOverview,
    DashboardPeriod,
    DashboardResponse,
    DateRangeParams,
    GrowthMetrics,
    InventorySummaryResponse,
    RecentActivity,
    SalesSummaryResponse,
    TimeGranularity,
    UserAnalyticsResponse,
)
from app.features.data_platform.fields import (
    CustomerField,
    Entity,
    InventoryField,
    Record,
    SalesField,
    SortDirection,
    UserField,
)
from app.features.data_platform.repository import RecordRepository
from app.features.tables.engine import sort_records
from app.features.tables.schemas import SortSpec

logger = get_logger(__name__)

RECENT_ACTIVITY_LIMIT = 5


def period_window(period: DashboardPeriod, today: datetime.date) -> DateRangeParams:
    """The ``period.days`` days ending on ``today``."""
    return DateRangeParams(
        start_date=today - datetime.timedelta(days=period.days - 1),
        end_date=today,
    )


def _within(
    records: Sequence[Record], date_field: str, window: DateRangeParams
) -> list[Record]:
    selected = []
    for record in records:
        day = to_day(record.get(date_field))
        if day is not None and window.start_date <= day <= window.end_date:
            selected.append(record)
    return selected


# =============================================================================
# Pure builders
# =============================================================================


def build_recent_activity(
    users: Sequence[Record], limit: int = RECENT_ACTIVITY_LIMIT
) -> list[RecentActivity]:
    """The ``limit`` most recently created users, newest first."""
    newest = sort_records(
        users, SortSpec(field=UserField.CREATED_AT.value, direction=SortDirection.DESC)
    )
    activity = []
    for user in newest[:limit]:
        email = str(user.get(UserField.EMAIL.value) or "")
        first = user.get(UserField.FIRST_NAME.value) or ""
        last = user.get(UserField.LAST_NAME.value) or ""
        created = user.get(UserField.CREATED_AT.value)
        activity.append(
            RecentActivity(
                id=user[UserField.ID.value],
                name=f"{first} {last}".strip() or email,
                email=email,
                role=str(user.get(UserField.ROLE.value) or ""),
                timestamp=created if isinstance(created, datetime.datetime) else None,
                avatar=user.get(UserField.AVATAR.value),
            )
        )
    return activity


def build_dashboard(
    users: Sequence[Record],
    period: DashboardPeriod,
    today: datetime.date,
) -> DashboardResponse:
    """Build dashboard cards and charts from the full user list.

    Args:
        users: All user records.
        period: Look-back window.
        today: Last day of the window.

    Returns:
        Dashboard overview and charts.
    """
    window = period_window(period, today)
    created = UserField.CREATED_AT.value
    current = _within(users, created, window)
    previous = _within(users, created, window.previous())

    overview = DashboardOverview(
        total_users=len(users),
        active_users=count_where(users, UserField.IS_ACTIVE, True),
        total_roles=len({user.get(UserField.ROLE.value) for user in users}),
        new_users=len(current),
        growth=GrowthMetrics(
            users=round(growth_rate(len(current), len(previous)), 2),
            active_users=round(
                growth_rate(
                    count_where(current, UserField.IS_ACTIVE, True),
                    count_where(previous, UserField.IS_ACTIVE, True),
                ),
                2,
            ),
        ),
    )
    charts = DashboardCharts(
        user_growth=group_by_day(users, created, window.start_date, window.end_date),
        users_by_role=breakdown(users, UserField.ROLE),
    )
    return DashboardResponse(
        overview=overview,
        charts=charts,
        recent_activity=build_recent_activity(users),
        period=period,
        start_date=window.start_date,
        end_date=window.end_date,
        generated_at=datetime.datetime.now(datetime.UTC),
    )


def build_user_analytics(
    users: Sequence[Record],
    period: DashboardPeriod,
    group_by: TimeGranularity,
    today: datetime.date,
) -> UserAnalyticsResponse:
    """Role/status distribution and registration trend of users created in a period."""
    window = period_window(period, today)
    current = _within(users, UserField.CREATED_AT.value, window)
    return UserAnalyticsResponse(
        total_users=len(current),
        users_by_role={item.value: item.count for item in breakdown(current, UserField.ROLE)},
        users_by_status={
            item.value: item.count for item in breakdown(current, UserField.STATUS)
        },
        registration_trend=group_by_period(current, UserField.CREATED_AT, group_by),
        period=period,
        group_by=group_by,
    )


def build_sales_summary(
    sales: Sequence[Record],
    window: DateRangeParams,
    channel: str | None = None,
) -> SalesSummaryResponse:
    """Sales totals for a window compared with the preceding window.

    Args:
        sales: Sales records covering at least the window and its predecessor.
        window: Analysis window.
        channel: Restrict to one channel (optional).

    Returns:
        Sales summary.
    """
    if channel is not None:
        sales = [record for record in sales if record.get(SalesField.CHANNEL.value) == channel]

    date_key = SalesField.DATE.value
    current = _within(sales, date_key, window)
    previous = _within(sales, date_key, window.previous())

    revenue = sum_field(current, SalesField.REVENUE)
    orders = int(sum_field(current, SalesField.ORDERS))

    channel_revenue: dict[str, float] = {}
    for record in current:
        name = str(record.get(SalesField.CHANNEL.value) or "")
        channel_revenue[name] = channel_revenue.get(name, 0) + numeric_value(
            record, SalesField.REVENUE
        )
    by_channel = [
        ChannelShare(
            channel=name,
            revenue=round(amount, 2),
            share_pct=round(amount / revenue * 100, 2) if revenue else 0,
        )
        for name, amount in sorted(channel_revenue.items(), key=lambda kv: kv[1], reverse=True)
    ]

    return SalesSummaryResponse(
        total_revenue=round(revenue, 2),
        total_orders=orders,
        total_customers=int(sum_field(current, SalesField.CUSTOMERS)),
        average_order_value=round(average(revenue, orders), 2),
        revenue_growth_pct=round(
            growth_rate(revenue, sum_field(previous, SalesField.REVENUE)), 2
        ),
        orders_growth_pct=round(growth_rate(orders, sum_field(previous, SalesField.ORDERS)), 2),
        daily_revenue=sum_by_day(
            current, date_key, SalesField.REVENUE, window.start_date, window.end_date
        ),
        daily_records=group_by_day(current, date_key, window.start_date, window.end_date),
        revenue_by_channel=by_channel,
        start_date=window.start_date,
        end_date=window.end_date,
        channel=channel,
    )


def build_customer_metrics(
    snapshots: Sequence[Record],
    window: DateRangeParams,
) -> CustomerMetricsResponse:
    """Latest customer snapshot in the window, with growth versus the one before."""
    date_key = CustomerField.DATE.value
    in_window = _within(snapshots, date_key, window)
    ordered = sorted(in_window, key=lambda record: to_day(record.get(date_key)), reverse=True)

    latest: Record = ordered[0] if ordered else {}
    growth = 0.0
    if len(ordered) > 1:
        growth = growth_rate(
            numeric_value(ordered[0], CustomerField.TOTAL_CUSTOMERS),
            numeric_value(ordered[1], CustomerField.TOTAL_CUSTOMERS),
        )

    return CustomerMetricsResponse(
        total_customers=int(numeric_value(latest, CustomerField.TOTAL_CUSTOMERS)),
        new_customers=int(numeric_value(latest, CustomerField.NEW_CUSTOMERS)),
        returning_customers=int(numeric_value(latest, CustomerField.RETURNING_CUSTOMERS)),
        average_order_value=round(numeric_value(latest, CustomerField.AVERAGE_ORDER_VALUE), 2),
        growth_rate=round(growth, 2),
        snapshot_date=to_day(latest.get(date_key)),
        start_date=window.start_date,
        end_date=window.end_date,
    )


def build_inventory_summary(
    items: Sequence[Record],
    category: str | None = None,
    low_stock_only: bool = False,
    default_reorder_level: int = 10,
) -> InventorySummaryResponse:
    """Stock totals and per-category breakdown.

    Args:
        items: Inventory records.
        category: Restrict to one category (optional).
        low_stock_only: Keep only items at or below their reorder level.
        default_reorder_level: Reorder level for items that carry none.

    Returns:
        Inventory summary.
    """

    def is_low(item: Record) -> bool:
        reorder_level = item.get(InventoryField.REORDER_LEVEL.value)
        if reorder_level is None:
            reorder_level = default_reorder_level
        return numeric_value(item, InventoryField.STOCK) <= reorder_level

    if category is not None:
        items = [item for item in items if item.get(InventoryField.CATEGORY.value) == category]
    if low_stock_only:
        items = [item for item in items if is_low(item)]

    categories: dict[str, CategoryStock] = {}
    for item in items:
        name = str(item.get(InventoryField.CATEGORY.value) or "")
        entry = categories.setdefault(
            name, CategoryStock(category=name, items=0, stock=0, reserved=0)
        )
        entry.items += 1
        entry.stock += int(numeric_value(item, InventoryField.STOCK))
        entry.reserved += int(numeric_value(item, InventoryField.RESERVED))

    stock_value = sum(
        numeric_value(item, InventoryField.PRICE) * numeric_value(item, InventoryField.STOCK)
        for item in items
    )

    return InventorySummaryResponse(
        total_items=len(items),
        total_stock=int(sum_field(items, InventoryField.STOCK)),
        total_reserved=int(sum_field(items, InventoryField.RESERVED)),
        stock_value=round(stock_value, 2),
        low_stock_items=sum(1 for item in items if is_low(item)),
        out_of_stock_items=count_where(items, InventoryField.STOCK, 0),
        by_category=sorted(categories.values(), key=lambda entry: entry.category),
        category=category,
        low_stock_only=low_stock_only,
    )


# =============================================================================
# Service
# =============================================================================


class AnalyticsService:
    """Service for computing dashboard analytics.

    Loads record snapshots through the repository and hands them to the
    pure builders above.
    """

    def __init__(self, repository: RecordRepository | None = None) -> None:
        """Initialize analytics service."""
        self.settings = get_settings()
        self.repository = repository or RecordRepository()

    def resolve_period(self, period: DashboardPeriod | None) -> DashboardPeriod:
        """Fall back to the configured look-back period."""
        return period or DashboardPeriod(self.settings.analytics_default_period)

    def validate_window(
        self, start_date: datetime.date, end_date: datetime.date
    ) -> DateRangeParams:
        """Check an explicit date range against ordering and size limits.

        Raises:
            ValidationError: If the range is inverted or too long.
        """
        if end_date < start_date:
            raise ValidationError(
                message="end_date must be >= start_date",
                details={"start_date": str(start_date), "end_date": str(end_date)},
            )
        window = DateRangeParams(start_date=start_date, end_date=end_date)
        if window.days > self.settings.analytics_max_date_range_days:
            raise ValidationError(
                message=f"Date range exceeds {self.settings.analytics_max_date_range_days} days",
                details={"days": window.days},
            )
        return window

    async def compute_dashboard(
        self,
        db: AsyncSession,
        period: DashboardPeriod | None = None,
        today: datetime.date | None = None,
    ) -> DashboardResponse:
        """Compute the dashboard for a look-back period ending today."""
        period = self.resolve_period(period)
        today = today or datetime.datetime.now(datetime.UTC).date()
        users = await self.repository.fetch_records(db, Entity.USERS)
        response = build_dashboard(users, period, today)

        logger.info(
            "analytics.dashboard_computed",
            period=period.value,
            total_users=response.overview.total_users,
            new_users=response.overview.new_users,
        )
        return response

    async def compute_user_analytics(
        self,
        db: AsyncSession,
        period: DashboardPeriod | None = None,
        group_by: TimeGranularity = TimeGranularity.DAY,
        today: datetime.date | None = None,
    ) -> UserAnalyticsResponse:
        """Compute user distribution and registration trend for a period."""
        period = self.resolve_period(period)
        today = today or datetime.datetime.now(datetime.UTC).date()
        window = period_window(period, today)
        users = await self.repository.fetch_records(
            db, Entity.USERS, window.start_date, window.end_date
        )
        response = build_user_analytics(users, period, group_by, today)

        logger.info(
            "analytics.user_analytics_computed",
            period=period.value,
            group_by=group_by.value,
            total_users=response.total_users,
        )
        return response

    async def compute_sales_summary(
        self,
        db: AsyncSession,
        start_date: datetime.date,
        end_date: datetime.date,
        channel: str | None = None,
    ) -> SalesSummaryResponse:
        """Compute sales totals and growth for a date range."""
        window = self.validate_window(start_date, end_date)
        sales = await self.repository.fetch_records(
            db, Entity.SALES, window.previous().start_date, window.end_date
        )
        response = build_sales_summary(sales, window, channel)

        logger.info(
            "analytics.sales_summary_computed",
            start_date=str(start_date),
            end_date=str(end_date),
            channel=channel,
            total_revenue=response.total_revenue,
            total_orders=response.total_orders,
        )
        return response

    async def compute_customer_metrics(
        self,
        db: AsyncSession,
        start_date: datetime.date,
        end_date: datetime.date,
    ) -> CustomerMetricsResponse:
        """Compute the latest customer snapshot and its growth rate."""
        window = self.validate_window(start_date, end_date)
        snapshots = await self.repository.fetch_records(
            db, Entity.CUSTOMERS, window.start_date, window.end_date
        )
        response = build_customer_metrics(snapshots, window)

        logger.info(
            "analytics.customer_metrics_computed",
            start_date=str(start_date),
            end_date=str(end_date),
            growth_rate=response.growth_rate,
        )
        return response

    async def compute_inventory_summary(
        self,
        db: AsyncSession,
        category: str | None = None,
        low_stock_only: bool = False,
    ) -> InventorySummaryResponse:
        """Compute stock totals with optional category and low-stock filters."""
        items = await self.repository.fetch_records(db, Entity.INVENTORY)
        response = build_inventory_summary(
            items,
            category=category,
            low_stock_only=low_stock_only,
            default_reorder_level=self.settings.inventory_low_stock_threshold,
        )

        logger.info(
            "analytics.inventory_summary_computed",
            category=category,
            low_stock_only=low_stock_only,
            total_items=response.total_items,
            low_stock_items=response.low_stock_items,
        )
        return response
