"""Analytics service — team-wide balance aggregation for leader dashboards."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Sequence

from leave_engine.analytics.schemas import (
    AnalyticsTotals,
    MemberAnalytics,
    SubgroupAnalytics,
    TeamAnalytics,
)
from leave_engine.balance.service import BalanceService
from leave_engine.common.constants import UNGROUPED, MemberRole
from leave_engine.common.dates import resolve_as_of
from leave_engine.common.exceptions import EmptyCollectionError
from leave_engine.schedule.service import ScheduleService
from leave_engine.team.policy import LeavePolicy, resolve_policy
from leave_engine.team.schemas import LeaveRequest, Member, Team

logger = logging.getLogger(__name__)


def _bucket(member: Member, policy: LeavePolicy) -> str:
    if not policy.subgrouping_enabled:
        return UNGROUPED
    return member.subgroup_tag or UNGROUPED


def _group_order(tags: Iterable[str], policy: LeavePolicy) -> list[str]:
    """Declared subgroups first, then unknown tags A–Z, sentinel last."""
    declared = [t for t in policy.subgroups if t in tags]
    extra = sorted(t for t in tags if t not in policy.subgroups and t != UNGROUPED)
    tail = [UNGROUPED] if UNGROUPED in tags else []
    return declared + extra + tail


class AnalyticsService:
    """Pure team aggregation."""

    @staticmethod
    def aggregate_team(
        members: Sequence[Member],
        team: Team,
        all_requests: Iterable[LeaveRequest],
        year: int,
        as_of: Optional[date] = None,
    ) -> TeamAnalytics:
        """Balances for every member of ``team``, grouped by subgroup tag.

        Requests are filtered to approved once and indexed by member;
        leaders are left out of the view.
        """
        if not members:
            raise EmptyCollectionError("members")

        as_of = resolve_as_of(as_of)
        policy = resolve_policy(team.settings)

        approved_by_member: dict[str, list[LeaveRequest]] = defaultdict(list)
        for req in all_requests:
            if req.is_approved:
                approved_by_member[req.user_id].append(req)

        by_bucket: dict[str, list[MemberAnalytics]] = defaultdict(list)
        for member in members:
            if member.role != MemberRole.member:
                continue
            balance = BalanceService.compute_for_policy(
                member, policy, approved_by_member.get(member.id, []), year, as_of,
            )
            tag = _bucket(member, policy)
            by_bucket[tag].append(
                MemberAnalytics(
                    member_id=member.id,
                    username=member.username,
                    full_name=member.full_name,
                    subgroup_tag=tag,
                    working_days_tag=ScheduleService.working_days_tag(member, as_of),
                    balance=balance,
                )
            )

        groups = [
            SubgroupAnalytics(
                subgroup_tag=tag,
                aggregate=AnalyticsTotals.from_members(by_bucket[tag]),
                members=by_bucket[tag],
            )
            for tag in _group_order(by_bucket.keys(), policy)
        ]
        everyone = [m for g in groups for m in g.members]

        logger.debug(
            "Aggregated team=%s year=%d members=%d groups=%d",
            team.id, year, len(everyone), len(groups),
        )
        return TeamAnalytics(
            team_id=team.id,
            year=year,
            as_of=as_of,
            aggregate=AnalyticsTotals.from_members(everyone),
            groups=groups,
        )
