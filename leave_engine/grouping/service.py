"""Grouping service — day-off overlap detection and subgroup suggestions.

Business logic:
  - Pairwise shared rest days over a lookahead window
  - Best subgroup per member by mean overlap, balanced on ties
  - Conflicts for members who clearly belong elsewhere
  - Caller-driven apply flow with per-member success / failure
"""

from __future__ import annotations

import logging
from datetime import date
from itertools import combinations
from typing import Callable, Iterable, Optional, Sequence

from leave_engine.common.constants import UNGROUPED, MemberRole
from leave_engine.common.dates import resolve_as_of
from leave_engine.common.exceptions import (
    AppException,
    EmptyCollectionError,
    InvalidInputError,
    NotFoundException,
    ValidationException,
)
from leave_engine.config import settings
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
from leave_engine.schedule.service import ScheduleService
from leave_engine.team.schemas import Member

logger = logging.getLogger(__name__)

SubgroupWriter = Callable[[str, str], None]


class GroupingService:
    """Pure overlap analysis plus the apply helper for the calling layer."""

    # ─────────────────────────────────────────────────────────────────
    # Overlap
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def find_partial_overlap(
        members: Sequence[Member],
        lookahead_days: Optional[int] = None,
        as_of: Optional[date] = None,
    ) -> OverlapMatrix:
        """Pairwise day-off overlap over ``[as_of, as_of + lookahead_days)``.

        ``overlap_ratio`` = shared off days / days either member is off, so
        identical schedules score 1.0; ``window_fraction`` = shared off days /
        lookahead days.
        """
        lookahead = settings.OVERLAP_LOOKAHEAD_DAYS if lookahead_days is None else lookahead_days
        if lookahead < 1:
            raise InvalidInputError("lookahead_days", "must be at least 1")
        as_of = resolve_as_of(as_of)

        ids = [m.id for m in members]
        if len(set(ids)) != len(ids):
            raise InvalidInputError("members", "member ids must be unique")

        off = {m.id: ScheduleService.off_days(m, as_of, lookahead) for m in members}
        pairs: dict[str, dict[str, PairOverlap]] = {i: {} for i in ids}
        for a, b in combinations(ids, 2):
            shared = len(off[a] & off[b])
            either = len(off[a] | off[b])
            overlap = PairOverlap(
                member_a=a,
                member_b=b,
                shared_off_days=shared,
                either_off_days=either,
                overlap_ratio=shared / either if either else 0.0,
                window_fraction=shared / lookahead,
            )
            pairs[a][b] = overlap
            pairs[b][a] = overlap

        return OverlapMatrix(as_of=as_of, lookahead_days=lookahead, member_ids=ids, pairs=pairs)

    # ─────────────────────────────────────────────────────────────────
    # Suggestions
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def _score(
        member_id: str,
        names: Sequence[str],
        assignment: dict[str, list[str]],
        matrix: OverlapMatrix,
    ) -> list[SubgroupScore]:
        scores = []
        for name in names:
            peers = [p for p in assignment[name] if p != member_id]
            mean = (
                sum(matrix.ratio(member_id, p) for p in peers) / len(peers)
                if peers else None
            )
            scores.append(SubgroupScore(subgroup=name, peers=len(peers), mean_overlap_ratio=mean))
        return scores

    @staticmethod
    def _best(scores: list[SubgroupScore]) -> SubgroupScore:
        """Highest mean, then fewest peers, then declaration order."""
        ranked = sorted(
            enumerate(scores),
            key=lambda item: (-(item[1].mean_overlap_ratio or 0.0), item[1].peers, item[0]),
        )
        return ranked[0][1]

    @staticmethod
    def _suggest(
        member: Member,
        names: Sequence[str],
        assignment: dict[str, list[str]],
        matrix: OverlapMatrix,
    ) -> SubgroupSuggestion:
        scores = GroupingService._score(member.id, names, assignment, matrix)
        current = next((s for s in scores if s.subgroup == member.subgroup_tag), None)
        if current is not None and current.peers == 0:
            # Alone in its subgroup: no overlap evidence either way, stay put
            best = current
        else:
            best = GroupingService._best(scores)
        peers = [p for p in assignment[best.subgroup] if p != member.id]
        evidence = sorted(
            (p for p in peers if matrix.ratio(member.id, p) > 0),
            key=lambda p: (-matrix.ratio(member.id, p), p),
        )
        return SubgroupSuggestion(
            member_id=member.id,
            current_subgroup=member.subgroup_tag or UNGROUPED,
            suggested_subgroup=best.subgroup,
            score=best.mean_overlap_ratio or 0.0,
            overlapping_members=evidence,
            scores=scores,
        )

    @staticmethod
    def suggest_subgroup_assignments(
        members: Sequence[Member],
        subgroup_names: Sequence[str],
        lookahead_days: Optional[int] = None,
        as_of: Optional[date] = None,
        low_overlap_threshold: Optional[float] = None,
    ) -> SubgroupSuggestions:
        """Advise a subgroup per member; nothing is mutated.

        Members already in a named subgroup are scored against the current
        assignment. Unassigned members are then placed one by one in input
        order, each placement visible to the next.
        """
        if not members:
            raise EmptyCollectionError("members")
        names = list(dict.fromkeys(subgroup_names))
        if not names:
            raise EmptyCollectionError("subgroup_names")
        threshold = (
            settings.LOW_OVERLAP_THRESHOLD if low_overlap_threshold is None
            else low_overlap_threshold
        )

        team = [m for m in members if m.role == MemberRole.member]
        matrix = GroupingService.find_partial_overlap(team, lookahead_days, as_of)

        assignment: dict[str, list[str]] = {name: [] for name in names}
        for m in team:
            if m.subgroup_tag in assignment:
                assignment[m.subgroup_tag].append(m.id)

        assigned = [m for m in team if m.subgroup_tag in assignment]
        unassigned = [m for m in team if m.subgroup_tag not in assignment]

        by_member: dict[str, SubgroupSuggestion] = {}
        conflicts: list[SubgroupConflict] = []

        for m in assigned:
            suggestion = GroupingService._suggest(m, names, assignment, matrix)
            by_member[m.id] = suggestion
            if suggestion.suggested_subgroup == m.subgroup_tag:
                continue
            current = next(s for s in suggestion.scores if s.subgroup == m.subgroup_tag)
            current_score = current.mean_overlap_ratio or 0.0
            if current_score < threshold * suggestion.score:
                conflicts.append(
                    SubgroupConflict(
                        member_id=m.id,
                        current_subgroup=m.subgroup_tag,
                        suggested_subgroup=suggestion.suggested_subgroup,
                        current_score=current_score,
                        suggested_score=suggestion.score,
                        reason=(
                            f"Shares more rest days with {suggestion.suggested_subgroup} "
                            f"({suggestion.score:.2f}) than with {m.subgroup_tag} "
                            f"({current_score:.2f})"
                        ),
                    )
                )

        working = {name: list(ids) for name, ids in assignment.items()}
        for m in unassigned:
            suggestion = GroupingService._suggest(m, names, working, matrix)
            by_member[m.id] = suggestion
            working[suggestion.suggested_subgroup].append(m.id)

        suggestions = [by_member[m.id] for m in team]
        logger.debug(
            "Subgroup suggestions: members=%d conflicts=%d lookahead=%d",
            len(suggestions), len(conflicts), matrix.lookahead_days,
        )
        return SubgroupSuggestions(
            suggestions=suggestions,
            conflicts=conflicts,
            total_members=len(team),
            total_groups=len({s.suggested_subgroup for s in suggestions}),
        )

    # ─────────────────────────────────────────────────────────────────
    # Apply (calling layer)
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def _failure_message(exc: AppException) -> str:
        """First field message when present, else the exception detail."""
        for messages in (exc.errors or {}).values():
            if messages:
                return messages[0]
        return exc.detail

    @staticmethod
    def apply_suggestions(
        suggestions: Iterable[SubgroupSuggestion],
        subgroup_names: Sequence[str],
        writer: SubgroupWriter,
        member_ids: Optional[Iterable[str]] = None,
    ) -> ApplyReport:
        """Write selected suggestions through ``writer(member_id, subgroup)``.

        Each write stands alone: failures are collected and the remaining
        members are still processed.
        """
        by_member = {s.member_id: s for s in suggestions}
        if member_ids is None:
            selected = list(by_member)
        else:
            selected = list(dict.fromkeys(member_ids))

        report = ApplyReport()
        for member_id in selected:
            try:
                suggestion = by_member.get(member_id)
                if suggestion is None:
                    raise NotFoundException("Suggestion", member_id)
                if suggestion.suggested_subgroup not in subgroup_names:
                    raise ValidationException({
                        "suggested_subgroup": [
                            f'Subgroup "{suggestion.suggested_subgroup}" does not exist',
                        ],
                    })
                writer(member_id, suggestion.suggested_subgroup)
            except AppException as exc:
                report.failed.append(
                    ApplyFailure(
                        member_id=member_id,
                        error_type=exc.error_type,
                        error=GroupingService._failure_message(exc),
                    )
                )
            except Exception as exc:
                logger.warning("Failed to apply subgroup for member %s: %s", member_id, exc)
                report.failed.append(
                    ApplyFailure(member_id=member_id, error_type="write-failed", error=str(exc))
                )
            else:
                report.applied.append(member_id)

        logger.info(
            "Applied subgroup suggestions: applied=%d failed=%d",
            report.applied_count, report.failed_count,
        )
        return report
