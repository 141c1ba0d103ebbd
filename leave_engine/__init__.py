"""Leave analytics & scheduling engine.

Pure computations for a team leave tool: shift-pattern evaluation, day
counting, leave balances, team analytics and subgroup suggestions.
"""

from leave_engine.analytics.service import AnalyticsService
from leave_engine.balance.service import BalanceService
from leave_engine.grouping.service import GroupingService
from leave_engine.schedule.service import ScheduleService

__version__ = "1.0.0"

is_working_day = ScheduleService.is_working_day
count_days = ScheduleService.count_days
compute_balance = BalanceService.compute_balance
aggregate_team = AnalyticsService.aggregate_team
find_partial_overlap = GroupingService.find_partial_overlap
suggest_subgroup_assignments = GroupingService.suggest_subgroup_assignments

__all__ = [
    "AnalyticsService",
    "BalanceService",
    "GroupingService",
    "ScheduleService",
    "aggregate_team",
    "compute_balance",
    "count_days",
    "find_partial_overlap",
    "is_working_day",
    "suggest_subgroup_assignments",
]
