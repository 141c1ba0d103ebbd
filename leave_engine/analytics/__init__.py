"""Team analytics — grouped balances and the caller-owned result cache."""

from leave_engine.analytics.cache import AnalyticsCache, settings_fingerprint
from leave_engine.analytics.schemas import (
    AnalyticsTotals,
    MemberAnalytics,
    SubgroupAnalytics,
    TeamAnalytics,
)

__all__ = [
    "AnalyticsCache",
    "AnalyticsTotals",
    "MemberAnalytics",
    "SubgroupAnalytics",
    "TeamAnalytics",
    "settings_fingerprint",
]
