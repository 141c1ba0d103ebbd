"""Balance service — annual, carryover and parental leave figures.

Business logic:
  - Annual usage in calendar days, clipped to the target year
  - Carryover consumed before the fresh entitlement, day by day
  - Carryover expiry and month-window zeroing of the reported balance
  - Maternity / paternity pools with their own counting method
  - Leader overrides reported with ``Provenance.overridden``
  - Year-end carryover projection
"""

from __future__ import annotations

import calendar
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from leave_engine.balance.reasons import matches_parental_type
from leave_engine.balance.schemas import (
    AnnualLeaveFigures,
    BalanceResult,
    CarryoverFigures,
    ParentalLeaveFigures,
    YearEndCarryover,
)
from leave_engine.common.constants import (
    CarryoverStatus,
    Provenance,
)
from leave_engine.common.dates import clip_to_year, iter_dates, resolve_as_of
from leave_engine.schedule.service import ScheduleService
from leave_engine.team.policy import LeavePolicy, resolve_policy
from leave_engine.team.schemas import LeaveRequest, Member, Team

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")


class BalanceService:
    """Pure per-member balance computation."""

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def _is_parental(request: LeaveRequest, member: Member, policy: LeavePolicy) -> bool:
        """True when the request is drawn from the member's own enabled
        parental pool. Every other request is annual leave."""
        leave_type = member.maternity_paternity_type
        if leave_type is None or not policy.parental(leave_type).enabled:
            return False
        return matches_parental_type(request.reason, leave_type)

    @staticmethod
    def _annual_leave_days(
        requests: Iterable[LeaveRequest],
        member: Member,
        policy: LeavePolicy,
        year: int,
    ) -> list[date]:
        """Booked annual-leave dates inside ``year``, in date order.

        Overlapping bookings are each counted; they consume what was booked.
        """
        days: list[date] = []
        for req in requests:
            if BalanceService._is_parental(req, member, policy):
                continue
            clipped = clip_to_year(req.start_date, req.end_date, year)
            if clipped is None:
                continue
            days.extend(iter_dates(*clipped))
        days.sort()
        return days

    # ─────────────────────────────────────────────────────────────────
    # Carryover
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def _carryover(
        member: Member,
        policy: LeavePolicy,
        leave_days: Sequence[date],
        as_of: date,
    ) -> CarryoverFigures:
        rules = policy.carryover
        if not rules.enabled:
            return CarryoverFigures()

        opening = member.carryover_from_previous_year or ZERO
        if rules.max_days is not None:
            opening = min(opening, rules.max_days)
        expiry = member.carryover_expiry_date or rules.expiry_date

        # Oldest balance first: each eligible day draws from carryover
        # until it runs out.
        remaining = opening
        used = ZERO
        for day in leave_days:
            if remaining <= ZERO:
                break
            if expiry is not None and day > expiry:
                continue
            if not rules.allows_month(day.month):
                continue
            draw = min(ONE, remaining)
            remaining -= draw
            used += draw

        if expiry is not None and expiry < as_of:
            status = CarryoverStatus.expired
        elif not rules.allows_month(as_of.month):
            status = CarryoverStatus.outside_window
        else:
            status = CarryoverStatus.active

        return CarryoverFigures(
            status=status,
            opening_balance=opening,
            carryover_balance=remaining if status == CarryoverStatus.active else ZERO,
            carryover_days_used=used,
            stored_balance=remaining,
            expiry_date=expiry,
            limited_to_months=list(rules.limited_to_months),
        )

    # ─────────────────────────────────────────────────────────────────
    # Annual
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def _manual_year_to_date_used(member: Member, year: int) -> Optional[Decimal]:
        """Override scoped to its year; unscoped values apply to any year."""
        if member.manual_year_to_date_used is None:
            return None
        scoped = member.manual_year_to_date_used_year
        if scoped is not None and scoped != year:
            return None
        return member.manual_year_to_date_used

    @staticmethod
    def _annual(
        member: Member,
        policy: LeavePolicy,
        days_used: int,
        carryover_used: Decimal,
        year: int,
    ) -> AnnualLeaveFigures:
        entitlement = policy.max_leave_per_year
        used = Decimal(days_used)
        drawn = used - carryover_used

        manual_balance = member.manual_leave_balance
        manual_used = BalanceService._manual_year_to_date_used(member, year)
        surplus = (
            max(ZERO, manual_balance - entitlement) if manual_balance is not None else ZERO
        )

        if manual_balance is None and manual_used is None:
            return AnnualLeaveFigures(
                entitlement=entitlement,
                leave_balance=max(ZERO, entitlement - drawn),
                days_used_this_year=used,
                days_drawn_from_entitlement=drawn,
                overdrawn_days=max(ZERO, drawn - entitlement),
            )

        if manual_used is not None:
            used = drawn = manual_used
        if manual_balance is not None:
            balance = manual_balance
            overdrawn = ZERO
        else:
            balance = max(ZERO, entitlement - drawn)
            overdrawn = max(ZERO, drawn - entitlement)

        return AnnualLeaveFigures(
            entitlement=entitlement,
            leave_balance=balance,
            days_used_this_year=used,
            days_drawn_from_entitlement=drawn,
            overdrawn_days=overdrawn,
            surplus_balance=surplus,
            source=Provenance.overridden,
        )

    # ─────────────────────────────────────────────────────────────────
    # Maternity / paternity
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def _parental(
        member: Member,
        policy: LeavePolicy,
        requests: Iterable[LeaveRequest],
        year: int,
    ) -> Optional[ParentalLeaveFigures]:
        leave_type = member.maternity_paternity_type
        if leave_type is None:
            return None
        rules = policy.parental(leave_type)
        if not rules.enabled:
            return None

        computed_used = 0
        for req in requests:
            if not matches_parental_type(req.reason, leave_type):
                continue
            clipped = clip_to_year(req.start_date, req.end_date, year)
            if clipped is None:
                continue
            computed_used += ScheduleService.count_days(
                clipped[0], clipped[1], rules.counting_method, member,
            )

        entitlement = Decimal(rules.max_days)
        manual_balance = member.manual_maternity_leave_balance
        manual_used = member.manual_maternity_year_to_date_used
        overridden = manual_balance is not None or manual_used is not None

        used = manual_used if manual_used is not None else Decimal(computed_used)
        if manual_balance is not None:
            balance = manual_balance
        else:
            balance = max(ZERO, entitlement - used)

        return ParentalLeaveFigures(
            leave_type=leave_type,
            counting_method=rules.counting_method,
            entitlement=entitlement,
            leave_balance=balance,
            days_used_this_year=used,
            surplus_balance=(
                max(ZERO, manual_balance - entitlement)
                if manual_balance is not None else ZERO
            ),
            source=Provenance.overridden if overridden else Provenance.computed,
        )

    # ─────────────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def compute_for_policy(
        member: Member,
        policy: LeavePolicy,
        approved_requests: Sequence[LeaveRequest],
        year: int,
        as_of: date,
    ) -> BalanceResult:
        """Balance from an already-resolved policy and an approved-only
        request set. The team aggregator calls this directly."""
        leave_days = BalanceService._annual_leave_days(approved_requests, member, policy, year)
        carryover = BalanceService._carryover(member, policy, leave_days, as_of)
        annual = BalanceService._annual(
            member, policy, len(leave_days), carryover.carryover_days_used, year,
        )
        parental = BalanceService._parental(member, policy, approved_requests, year)

        logger.debug(
            "Balance member=%s year=%d used=%s balance=%s carryover=%s (%s) source=%s",
            member.id, year, annual.days_used_this_year, annual.leave_balance,
            carryover.carryover_balance, carryover.status.value, annual.source.value,
        )
        return BalanceResult(
            member_id=member.id,
            year=year,
            as_of=as_of,
            annual=annual,
            carryover=carryover,
            parental=parental,
        )

    @staticmethod
    def compute_balance(
        member: Member,
        team: Team,
        member_approved_requests: Iterable[LeaveRequest],
        year: int,
        as_of: Optional[date] = None,
    ) -> BalanceResult:
        """Annual, carryover and parental figures for ``member`` in ``year``.

        Requests that are not approved, or that belong to another member, are
        ignored. ``as_of`` ("now") decides carryover expiry and month window;
        it defaults to today in the configured timezone.
        """
        approved = [
            r for r in member_approved_requests
            if r.is_approved and r.user_id == member.id
        ]
        return BalanceService.compute_for_policy(
            member,
            resolve_policy(team.settings),
            approved,
            year,
            resolve_as_of(as_of),
        )

    @staticmethod
    def project_year_end_carryover(
        member: Member,
        team: Team,
        member_approved_requests: Iterable[LeaveRequest],
        previous_year: int,
    ) -> YearEndCarryover:
        """Days ``member`` carries out of ``previous_year``.

        ``min(max(0, entitlement - used), max_carryover_days)``; manual
        overrides are not year-specific and are ignored here.
        """
        policy = resolve_policy(team.settings)
        approved = [
            r for r in member_approved_requests
            if r.is_approved and r.user_id == member.id
        ]
        used = Decimal(len(BalanceService._annual_leave_days(approved, member, policy, previous_year)))

        if not policy.carryover.enabled:
            return YearEndCarryover(
                member_id=member.id,
                from_year=previous_year,
                days_used=used,
                expected_carryover=ZERO,
            )

        expected = max(ZERO, policy.max_leave_per_year - used)
        if policy.carryover.max_days is not None:
            expected = min(expected, policy.carryover.max_days)

        return YearEndCarryover(
            member_id=member.id,
            from_year=previous_year,
            days_used=used,
            expected_carryover=expected,
            expiry_date=(
                BalanceService._projected_expiry(policy, previous_year + 1)
                if expected > ZERO else None
            ),
        )

    @staticmethod
    def _projected_expiry(policy: LeavePolicy, next_year: int) -> Optional[date]:
        """Configured expiry date, else the last day of the latest allowed
        month in ``next_year``."""
        rules = policy.carryover
        if rules.expiry_date is not None:
            return rules.expiry_date
        if rules.limited_to_months:
            last_month = max(rules.limited_to_months)
            return date(next_year, last_month, calendar.monthrange(next_year, last_month)[1])
        return None
