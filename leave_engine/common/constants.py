"""Enums and constants for the leave analytics engine."""

from __future__ import annotations

import enum


# ── Shift schedules ─────────────────────────────────────────────────

class ShiftType(str, enum.Enum):
    rotating = "rotating"
    fixed = "fixed"


class CountingMethod(str, enum.Enum):
    calendar = "calendar"
    working = "working"


# ── Members ─────────────────────────────────────────────────────────

class MemberRole(str, enum.Enum):
    leader = "leader"
    member = "member"


class ParentalLeaveType(str, enum.Enum):
    maternity = "maternity"
    paternity = "paternity"


# ── Leave ───────────────────────────────────────────────────────────

class LeaveStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class Provenance(str, enum.Enum):
    """Where a reported figure came from."""

    computed = "computed"
    overridden = "overridden"


class CarryoverStatus(str, enum.Enum):
    disabled = "disabled"
    active = "active"
    expired = "expired"
    outside_window = "outside_window"


# ── Misc constants ──────────────────────────────────────────────────

UNGROUPED = "Ungrouped"
NO_SCHEDULE_TAG = "no-schedule"
WEEKDAY_LETTERS = ("M", "T", "W", "T", "F", "S", "S")
DEFAULT_PARENTAL_LEAVE_DAYS = 90
