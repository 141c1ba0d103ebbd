"""Grouping schemas — day-off overlap and subgroup advice."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, computed_field


# ═════════════════════════════════════════════════════════════════════
# Overlap
# ═════════════════════════════════════════════════════════════════════


class PairOverlap(BaseModel):
    """Shared rest days of two members over the lookahead window.

    ``window_fraction`` is shared days / lookahead days; ``overlap_ratio`` is
    shared days / days either member is off, so identical schedules score 1.0.
    """

    model_config = ConfigDict(frozen=True)

    member_a: str
    member_b: str
    shared_off_days: int
    # Days on which at least one of the two is off
    either_off_days: int
    overlap_ratio: float
    window_fraction: float


class OverlapMatrix(BaseModel):
    """Symmetric pairwise overlap; ``pairs[a][b] is pairs[b][a]``."""

    model_config = ConfigDict(frozen=True)

    as_of: date
    lookahead_days: int
    member_ids: list[str]
    pairs: dict[str, dict[str, PairOverlap]]

    def pair(self, a: str, b: str) -> Optional[PairOverlap]:
        return self.pairs.get(a, {}).get(b)

    def ratio(self, a: str, b: str) -> float:
        found = self.pair(a, b)
        return found.overlap_ratio if found is not None else 0.0

    def overlapping_members(self, member_id: str, min_ratio: float = 0.0) -> list[str]:
        """Members sharing more than ``min_ratio`` of rest days, best first."""
        row = self.pairs.get(member_id, {})
        hits = [(p.overlap_ratio, other) for other, p in row.items() if p.overlap_ratio > min_ratio]
        hits.sort(key=lambda h: (-h[0], h[1]))
        return [other for _, other in hits]


# ═════════════════════════════════════════════════════════════════════
# Suggestions
# ═════════════════════════════════════════════════════════════════════


class SubgroupScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    subgroup: str
    peers: int
    # None when the subgroup has no other members to compare with
    mean_overlap_ratio: Optional[float] = None


class SubgroupSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    member_id: str
    current_subgroup: str
    suggested_subgroup: str
    reason: str = "partial-overlap"
    score: float
    overlapping_members: list[str]
    scores: list[SubgroupScore]

    @property
    def changes_assignment(self) -> bool:
        return self.current_subgroup != self.suggested_subgroup


class SubgroupConflict(BaseModel):
    model_config = ConfigDict(frozen=True)

    member_id: str
    current_subgroup: str
    suggested_subgroup: str
    current_score: float
    suggested_score: float
    reason: str


class SubgroupSuggestions(BaseModel):
    model_config = ConfigDict(frozen=True)

    suggestions: list[SubgroupSuggestion]
    conflicts: list[SubgroupConflict]
    total_members: int
    total_groups: int

    def for_member(self, member_id: str) -> Optional[SubgroupSuggestion]:
        return next((s for s in self.suggestions if s.member_id == member_id), None)


# ═════════════════════════════════════════════════════════════════════
# Apply report
# ═════════════════════════════════════════════════════════════════════


class ApplyFailure(BaseModel):
    member_id: str
    error_type: str
    error: str


class ApplyReport(BaseModel):
    """Outcome of applying suggestions one member at a time."""

    applied: list[str] = []
    failed: list[ApplyFailure] = []

    @computed_field
    @property
    def applied_count(self) -> int:
        return len(self.applied)

    @computed_field
    @property
    def failed_count(self) -> int:
        return len(self.failed)
