"""Resolve optional team settings into one immutable policy.

All defaults live here so the calculators never branch on ``None``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from leave_engine.common.constants import CountingMethod, ParentalLeaveType
from leave_engine.config import settings as app_settings
from leave_engine.team.schemas import ParentalLeaveSettings, TeamSettings


class CarryoverPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    max_days: Optional[Decimal] = None
    expiry_date: Optional[date] = None
    limited_to_months: tuple[int, ...] = ()

    def allows_month(self, month: int) -> bool:
        return not self.limited_to_months or month in self.limited_to_months


class ParentalLeavePolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    max_days: int = app_settings.DEFAULT_PARENTAL_LEAVE_DAYS
    counting_method: CountingMethod = CountingMethod.working


class LeavePolicy(BaseModel):
    """Fully resolved team policy."""

    model_config = ConfigDict(frozen=True)

    max_leave_per_year: Decimal
    carryover: CarryoverPolicy
    subgrouping_enabled: bool = False
    subgroups: tuple[str, ...] = ()
    maternity: ParentalLeavePolicy
    paternity: ParentalLeavePolicy

    def parental(self, leave_type: ParentalLeaveType) -> ParentalLeavePolicy:
        if leave_type == ParentalLeaveType.paternity:
            return self.paternity
        return self.maternity


def _resolve_parental(raw: Optional[ParentalLeaveSettings]) -> ParentalLeavePolicy:
    if raw is None:
        return ParentalLeavePolicy()
    return ParentalLeavePolicy(
        enabled=bool(raw.enabled),
        max_days=(
            raw.max_days if raw.max_days is not None
            else app_settings.DEFAULT_PARENTAL_LEAVE_DAYS
        ),
        counting_method=raw.counting_method or CountingMethod.working,
    )


def resolve_policy(raw: Optional[TeamSettings]) -> LeavePolicy:
    """Build a ``LeavePolicy``; absent sections become disabled features."""
    raw = raw or TeamSettings()

    carryover = CarryoverPolicy()
    if raw.allow_carryover:
        cs = raw.carryover_settings
        carryover = CarryoverPolicy(
            enabled=True,
            max_days=cs.max_carryover_days if cs else None,
            expiry_date=cs.expiry_date if cs else None,
            limited_to_months=tuple(cs.limited_to_months or ()) if cs else (),
        )

    return LeavePolicy(
        max_leave_per_year=raw.max_leave_per_year,
        carryover=carryover,
        subgrouping_enabled=bool(raw.enable_subgrouping),
        subgroups=tuple(raw.subgroups or ()),
        maternity=_resolve_parental(raw.maternity_leave),
        paternity=_resolve_parental(raw.paternity_leave),
    )
