"""Team, member and leave request schemas consumed by the engine.

These mirror the entities owned by the surrounding application. The engine
only reads them; every optional policy field may be missing.

Naming conventions:
  - *Settings   → raw, optional-heavy policy input
  - LeavePolicy → resolved policy (see ``leave_engine.team.policy``)
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from leave_engine.common.constants import (
    CountingMethod,
    LeaveStatus,
    MemberRole,
    ParentalLeaveType,
)
from leave_engine.schedule.schemas import ShiftHistoryEntry, ShiftSchedule


# ═════════════════════════════════════════════════════════════════════
# Team policy
# ═════════════════════════════════════════════════════════════════════


class CarryoverSettings(BaseModel):
    """Limits on days carried over from the previous year."""

    max_carryover_days: Optional[Decimal] = Field(default=None, ge=0)
    expiry_date: Optional[date] = None
    limited_to_months: Optional[list[int]] = Field(
        default=None,
        description="Calendar months (1 = January) in which carryover may be used",
    )

    @field_validator("limited_to_months")
    @classmethod
    def validate_months(cls, value: Optional[list[int]]) -> Optional[list[int]]:
        if value is None:
            return value
        bad = [m for m in value if not 1 <= m <= 12]
        if bad:
            raise ValueError(f"limited_to_months must be within 1-12, got {bad}.")
        return sorted(set(value))


class ParentalLeaveSettings(BaseModel):
    """Maternity or paternity leave allowance."""

    enabled: Optional[bool] = None
    max_days: Optional[int] = Field(default=None, ge=0)
    counting_method: Optional[CountingMethod] = None


class TeamSettings(BaseModel):
    """Leader-configured policy of a team."""

    max_leave_per_year: Decimal = Field(default=Decimal("0"), ge=0)
    concurrent_leave: Optional[int] = None
    allow_carryover: Optional[bool] = None
    carryover_settings: Optional[CarryoverSettings] = None
    enable_subgrouping: Optional[bool] = None
    subgroups: Optional[list[str]] = None
    maternity_leave: Optional[ParentalLeaveSettings] = None
    paternity_leave: Optional[ParentalLeaveSettings] = None


class Team(BaseModel):
    id: str
    name: Optional[str] = None
    settings: TeamSettings = Field(default_factory=TeamSettings)


# ═════════════════════════════════════════════════════════════════════
# Member
# ═════════════════════════════════════════════════════════════════════


class Member(BaseModel):
    """Team member with schedule and leader-set leave overrides."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    role: MemberRole = MemberRole.member

    shift_schedule: Optional[ShiftSchedule] = None
    shift_history: list[ShiftHistoryEntry] = Field(default_factory=list)
    subgroup_tag: Optional[str] = None

    # Carryover granted at year start
    carryover_from_previous_year: Optional[Decimal] = Field(default=None, ge=0)
    carryover_expiry_date: Optional[date] = None

    # Leader overrides; replace computed figures when present
    manual_leave_balance: Optional[Decimal] = None
    manual_year_to_date_used: Optional[Decimal] = None
    manual_year_to_date_used_year: Optional[int] = None
    manual_maternity_leave_balance: Optional[Decimal] = None
    manual_maternity_year_to_date_used: Optional[Decimal] = None
    maternity_paternity_type: Optional[ParentalLeaveType] = None

    @model_validator(mode="after")
    def validate_history(self) -> "Member":
        entries = sorted(self.shift_history, key=lambda e: e.start_date)
        for previous, current in zip(entries, entries[1:]):
            if current.start_date <= previous.end_date:
                raise ValueError(
                    "shift_history entries overlap: "
                    f"{previous.start_date}..{previous.end_date} and "
                    f"{current.start_date}..{current.end_date}."
                )
        return self

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or self.id


# ═════════════════════════════════════════════════════════════════════
# Leave Request
# ═════════════════════════════════════════════════════════════════════


class LeaveRequest(BaseModel):
    """A leave booking over an inclusive date range."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    user_id: str
    start_date: date = Field(..., description="Leave start date (inclusive)")
    end_date: date = Field(..., description="Leave end date (inclusive)")
    status: LeaveStatus = LeaveStatus.pending
    reason: str = ""

    @model_validator(mode="after")
    def validate_dates(self) -> "LeaveRequest":
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date.")
        return self

    @property
    def is_approved(self) -> bool:
        return self.status == LeaveStatus.approved
