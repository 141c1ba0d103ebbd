"""Shared test helpers — factories for schedules, members, teams, requests.

The engine is pure, so there is no database or client here: every test builds
its inputs with the factories below and passes an explicit ``as_of``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

import pytest

from leave_engine.common.constants import LeaveStatus, MemberRole, ShiftType
from leave_engine.schedule.schemas import ShiftHistoryEntry, ShiftSchedule
from leave_engine.team.schemas import LeaveRequest, Member, Team, TeamSettings

# 2024-01-01 is a Monday
EPOCH = date(2024, 1, 1)
AS_OF = date(2024, 3, 15)

FOUR_ON_FOUR_OFF = "11110000"
FOUR_OFF_FOUR_ON = "00001111"
WEEKDAYS = "1111100"


# ── Model factories ─────────────────────────────────────────────────

def _pattern(bits: str) -> list[bool]:
    return [c == "1" for c in bits]


def _make_schedule(
    bits: str = FOUR_ON_FOUR_OFF,
    *,
    start: date = EPOCH,
    shift_type: ShiftType = ShiftType.rotating,
) -> ShiftSchedule:
    return ShiftSchedule(pattern=_pattern(bits), start_date=start, type=shift_type)


def _make_history(
    bits: str,
    start: date,
    end: date,
    shift_type: ShiftType = ShiftType.rotating,
) -> ShiftHistoryEntry:
    return ShiftHistoryEntry(
        pattern=_pattern(bits), start_date=start, end_date=end, type=shift_type,
    )


def _make_member(
    member_id: str = "m1",
    *,
    schedule: Optional[ShiftSchedule] = None,
    **overrides,
) -> Member:
    data = dict(
        id=member_id,
        username=member_id,
        full_name=f"Member {member_id.upper()}",
        role=MemberRole.member,
        shift_schedule=schedule,
    )
    data.update(overrides)
    return Member(**data)


def _make_team(team_id: str = "t1", **settings) -> Team:
    settings.setdefault("max_leave_per_year", Decimal("20"))
    return Team(id=team_id, name="Support", settings=TeamSettings(**settings))


def _make_request(
    user_id: str,
    start: date,
    end: Optional[date] = None,
    *,
    status: LeaveStatus = LeaveStatus.approved,
    reason: str = "Vacation",
    request_id: Optional[str] = None,
) -> LeaveRequest:
    return LeaveRequest(
        id=request_id,
        user_id=user_id,
        start_date=start,
        end_date=end or start,
        status=status,
        reason=reason,
    )


# ── Fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def team() -> Team:
    """Team with 20 days a year and no optional features."""
    return _make_team()


@pytest.fixture
def member() -> Member:
    return _make_member(schedule=_make_schedule())


class FakeClock:
    """Manually advanced monotonic clock for cache tests."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
