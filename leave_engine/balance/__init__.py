"""Leave balances — annual, carryover and parental figures."""

from leave_engine.balance.schemas import (
    AnnualLeaveFigures,
    BalanceResult,
    CarryoverFigures,
    ParentalLeaveFigures,
    YearEndCarryover,
)

__all__ = [
    "AnnualLeaveFigures",
    "BalanceResult",
    "CarryoverFigures",
    "ParentalLeaveFigures",
    "YearEndCarryover",
]
