"""Balance result schemas.

Every figure block carries a ``source`` (``computed`` | ``overridden``) so
callers can tell leader overrides from engine output.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from leave_engine.common.constants import (
    CarryoverStatus,
    CountingMethod,
    ParentalLeaveType,
    Provenance,
)


class AnnualLeaveFigures(BaseModel):
    """Annual entitlement usage for one member and year."""

    model_config = ConfigDict(frozen=True)

    entitlement: Decimal
    leave_balance: Decimal
    days_used_this_year: Decimal
    # Part of days_used_this_year charged to the annual entitlement
    days_drawn_from_entitlement: Decimal = Decimal("0")
    overdrawn_days: Decimal = Decimal("0")
    surplus_balance: Decimal = Decimal("0")
    source: Provenance = Provenance.computed


class CarryoverFigures(BaseModel):
    """Carryover from the previous year."""

    model_config = ConfigDict(frozen=True)

    status: CarryoverStatus = CarryoverStatus.disabled
    opening_balance: Decimal = Decimal("0")
    carryover_balance: Decimal = Decimal("0")
    carryover_days_used: Decimal = Decimal("0")
    # Remaining days before expiry / month-window zeroing
    stored_balance: Decimal = Decimal("0")
    expiry_date: Optional[date] = None
    limited_to_months: list[int] = []


class ParentalLeaveFigures(BaseModel):
    """Maternity or paternity allowance."""

    model_config = ConfigDict(frozen=True)

    leave_type: ParentalLeaveType
    counting_method: CountingMethod
    entitlement: Decimal
    leave_balance: Decimal
    days_used_this_year: Decimal
    surplus_balance: Decimal = Decimal("0")
    source: Provenance = Provenance.computed


class BalanceResult(BaseModel):
    """Everything the dashboards render for one member."""

    model_config = ConfigDict(frozen=True)

    member_id: str
    year: int
    as_of: date
    annual: AnnualLeaveFigures
    carryover: CarryoverFigures
    parental: Optional[ParentalLeaveFigures] = None

    # Flat accessors matching the dashboard field names
    @property
    def leave_balance(self) -> Decimal:
        return self.annual.leave_balance

    @property
    def days_used_this_year(self) -> Decimal:
        return self.annual.days_used_this_year

    @property
    def carryover_balance(self) -> Decimal:
        return self.carryover.carryover_balance

    @property
    def carryover_days_used(self) -> Decimal:
        return self.carryover.carryover_days_used


class YearEndCarryover(BaseModel):
    """Carryover a member is expected to take into the following year."""

    model_config = ConfigDict(frozen=True)

    member_id: str
    from_year: int
    days_used: Decimal
    expected_carryover: Decimal
    expiry_date: Optional[date] = None
