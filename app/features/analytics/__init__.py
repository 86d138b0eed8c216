"""Analytics module: metric aggregation for dashboard cards and charts.

Pure aggregation functions live in ``aggregation``; ``service`` assembles
them into dashboard, user, sales, customer and inventory summaries.
"""

from app.features.analytics.aggregation import (
    average,
    group_by_day,
    growth_rate,
    sum_field,
)
from app.features.analytics.routes import router
from app.features.analytics.schemas import (
    DashboardPeriod,
    DashboardResponse,
    TimeGranularity,
)
from app.features.analytics.service import AnalyticsService

__all__ = [
    "AnalyticsService",
    "DashboardPeriod",
    "DashboardResponse",
    "TimeGranularity",
    "average",
    "group_by_day",
    "growth_rate",
    "router",
    "sum_field",
]
