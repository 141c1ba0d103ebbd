"""Tests for team aggregation and the analytics result cache."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from leave_engine import aggregate_team, compute_balance
from leave_engine.analytics.cache import AnalyticsCache, settings_fingerprint
from leave_engine.common.constants import UNGROUPED, LeaveStatus, MemberRole
from leave_engine.common.exceptions import EmptyCollectionError
from leave_engine.team.schemas import TeamSettings
from tests.conftest import (
    AS_OF,
    FOUR_ON_FOUR_OFF,
    _make_member,
    _make_request,
    _make_schedule,
    _make_team,
)


# ═════════════════════════════════════════════════════════════════════
# 1. Team aggregator
# ═════════════════════════════════════════════════════════════════════


class TestAggregateTeam:
    """Tests for AnalyticsService.aggregate_team."""

    def test_empty_members_raises(self, team):
        with pytest.raises(EmptyCollectionError):
            aggregate_team([], team, [], 2024, as_of=AS_OF)

    def test_totals_are_sums_of_member_results(self, team):
        members = [_make_member("a"), _make_member("b")]
        requests = [
            _make_request("a", date(2024, 2, 5), date(2024, 2, 9)),
            _make_request("b", date(2024, 2, 12), date(2024, 2, 14)),
            _make_request("b", date(2024, 2, 20), status=LeaveStatus.pending),
        ]
        analytics = aggregate_team(members, team, requests, 2024, as_of=AS_OF)
        assert analytics.aggregate.members_count == 2
        assert analytics.aggregate.total_days_used == Decimal("8")
        assert analytics.aggregate.total_leave_balance == Decimal("32")
        assert analytics.aggregate.average_leave_balance == Decimal("16")
        assert analytics.aggregate.total_leave_balance == sum(
            m.balance.leave_balance for m in analytics.members
        )

    def test_matches_per_member_balance(self, team):
        """Each member result equals a direct balance computation."""
        member = _make_member("a")
        requests = [_make_request("a", date(2024, 2, 5), date(2024, 2, 9))]
        analytics = aggregate_team([member], team, requests, 2024, as_of=AS_OF)
        assert analytics.members[0].balance == compute_balance(
            member, team, requests, 2024, as_of=AS_OF,
        )

    def test_leaders_excluded(self, team):
        members = [_make_member("lead", role=MemberRole.leader), _make_member("a")]
        analytics = aggregate_team(members, team, [], 2024, as_of=AS_OF)
        assert [m.member_id for m in analytics.members] == ["a"]

    def test_groups_by_subgroup_when_enabled(self):
        """Declared subgroups first, unknown tags next, Ungrouped last."""
        team = _make_team(enable_subgrouping=True, subgroups=["Night", "Day"])
        members = [
            _make_member("a", subgroup_tag="Day"),
            _make_member("b"),
            _make_member("c", subgroup_tag="Legacy"),
            _make_member("d", subgroup_tag="Night"),
            _make_member("e", subgroup_tag="Day"),
        ]
        analytics = aggregate_team(members, team, [], 2024, as_of=AS_OF)
        assert [g.subgroup_tag for g in analytics.groups] == ["Night", "Day", "Legacy", UNGROUPED]
        day = analytics.group("Day")
        assert [m.member_id for m in day.members] == ["a", "e"]
        assert day.aggregate.members_count == 2
        assert day.aggregate.total_leave_balance == Decimal("40")

    def test_single_bucket_when_subgrouping_disabled(self, team):
        members = [_make_member("a", subgroup_tag="Day"), _make_member("b", subgroup_tag="Night")]
        analytics = aggregate_team(members, team, [], 2024, as_of=AS_OF)
        assert [g.subgroup_tag for g in analytics.groups] == [UNGROUPED]
        assert analytics.members[0].subgroup_tag == UNGROUPED

    def test_working_days_tag_reported(self, team):
        members = [
            _make_member("a", schedule=_make_schedule(FOUR_ON_FOUR_OFF)),
            _make_member("b"),
        ]
        analytics = aggregate_team(members, team, [], 2024, as_of=date(2024, 1, 1))
        tags = {m.member_id: m.working_days_tag for m in analytics.members}
        assert tags == {"a": "1111000011", "b": "no-schedule"}

    def test_serializes(self, team):
        analytics = aggregate_team([_make_member("a")], team, [], 2024, as_of=AS_OF)
        dumped = analytics.model_dump(mode="json")
        assert dumped["team_id"] == "t1"
        assert dumped["groups"][0]["members"][0]["balance"]["annual"]["leave_balance"] == "20"


# ═════════════════════════════════════════════════════════════════════
# 2. Analytics cache
# ═════════════════════════════════════════════════════════════════════


class TestAnalyticsCache:
    """TTL cache owned by the calling layer."""

    def test_set_and_get(self, clock):
        cache = AnalyticsCache(ttl_seconds=30, clock=clock)
        cache.set("k", {"v": 1})
        assert cache.get("k") == {"v": 1}
        assert cache.get("missing") is None

    def test_entries_expire(self, clock):
        cache = AnalyticsCache(ttl_seconds=30, clock=clock)
        cache.set("k", 1)
        clock.advance(29)
        assert cache.get("k") == 1
        clock.advance(2)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_default_ttl_from_settings(self):
        assert AnalyticsCache().ttl_seconds == 30.0

    def test_key_depends_on_settings(self):
        a = TeamSettings(max_leave_per_year=Decimal("20"))
        b = TeamSettings(max_leave_per_year=Decimal("25"))
        key = AnalyticsCache.build_key("t1", 2024, "leader", a)
        assert key.startswith("t1:2024:leader:")
        assert key == AnalyticsCache.build_key("t1", 2024, "leader", a.model_copy())
        assert key != AnalyticsCache.build_key("t1", 2024, "leader", b)

    def test_fingerprint_ignores_key_order(self):
        assert settings_fingerprint({"a": 1, "b": 2}) == settings_fingerprint({"b": 2, "a": 1})

    def test_get_or_compute_calls_factory_once(self, clock):
        cache = AnalyticsCache(ttl_seconds=30, clock=clock)
        calls = []

        def factory():
            calls.append(1)
            return "result"

        assert cache.get_or_compute("k", factory) == "result"
        assert cache.get_or_compute("k", factory) == "result"
        assert len(calls) == 1

    def test_invalidate_by_team(self, clock):
        cache = AnalyticsCache(ttl_seconds=30, clock=clock)
        cache.set("t1:2024:leader:x", 1)
        cache.set("t1:2024:member:x", 2)
        cache.set("t2:2024:leader:x", 3)
        assert cache.invalidate("t1") == 2
        assert cache.get("t2:2024:leader:x") == 3
        assert cache.invalidate() == 1
        assert len(cache) == 0
