"""Team analytics schemas — leader dashboard view."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict

from leave_engine.balance.schemas import BalanceResult


class MemberAnalytics(BaseModel):
    model_config = ConfigDict(frozen=True)

    member_id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    subgroup_tag: str
    working_days_tag: str
    balance: BalanceResult


class AnalyticsTotals(BaseModel):
    """Sums over member results; never recomputed independently."""

    model_config = ConfigDict(frozen=True)

    members_count: int = 0
    total_leave_balance: Decimal = Decimal("0")
    total_days_used: Decimal = Decimal("0")
    total_carryover_balance: Decimal = Decimal("0")
    total_carryover_days_used: Decimal = Decimal("0")
    total_parental_balance: Decimal = Decimal("0")
    total_parental_days_used: Decimal = Decimal("0")
    average_leave_balance: Decimal = Decimal("0")

    @classmethod
    def from_members(cls, members: Sequence[MemberAnalytics]) -> "AnalyticsTotals":
        if not members:
            return cls()
        balances = [m.balance for m in members]
        parental = [b.parental for b in balances if b.parental is not None]
        total_balance = sum((b.annual.leave_balance for b in balances), Decimal("0"))
        return cls(
            members_count=len(members),
            total_leave_balance=total_balance,
            total_days_used=sum((b.annual.days_used_this_year for b in balances), Decimal("0")),
            total_carryover_balance=sum(
                (b.carryover.carryover_balance for b in balances), Decimal("0"),
            ),
            total_carryover_days_used=sum(
                (b.carryover.carryover_days_used for b in balances), Decimal("0"),
            ),
            total_parental_balance=sum((p.leave_balance for p in parental), Decimal("0")),
            total_parental_days_used=sum(
                (p.days_used_this_year for p in parental), Decimal("0"),
            ),
            average_leave_balance=total_balance / len(members),
        )


class SubgroupAnalytics(BaseModel):
    model_config = ConfigDict(frozen=True)

    subgroup_tag: str
    aggregate: AnalyticsTotals
    members: list[MemberAnalytics]


class TeamAnalytics(BaseModel):
    """Per-member balances grouped by subgroup, with team totals."""

    model_config = ConfigDict(frozen=True)

    team_id: str
    year: int
    as_of: date
    aggregate: AnalyticsTotals
    groups: list[SubgroupAnalytics]

    @property
    def members(self) -> list[MemberAnalytics]:
        return [m for g in self.groups for m in g.members]

    def group(self, subgroup_tag: str) -> Optional[SubgroupAnalytics]:
        return next((g for g in self.groups if g.subgroup_tag == subgroup_tag), None)
