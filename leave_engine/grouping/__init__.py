"""Subgroup grouping — day-off overlap and assignment suggestions."""

from leave_engine.grouping.schemas import (
    ApplyFailure,
    ApplyReport,
    OverlapMatrix,
    PairOverlap,
    SubgroupConflict,
    SubgroupScore,
    SubgroupSuggestion,
    SubgroupSuggestions,
)

__all__ = [
    "ApplyFailure",
    "ApplyReport",
    "OverlapMatrix",
    "PairOverlap",
    "SubgroupConflict",
    "SubgroupScore",
    "SubgroupSuggestion",
    "SubgroupSuggestions",
]
