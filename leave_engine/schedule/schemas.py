"""Shift schedule schemas — repeating work/off patterns.

A pattern is a list of booleans (``True`` = working day) that repeats with a
period equal to its length, aligned so that ``start_date`` is index 0.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from leave_engine.common.constants import ShiftType


class ShiftSchedule(BaseModel):
    """Live shift schedule of a member."""

    model_config = ConfigDict(frozen=True)

    pattern: list[bool] = Field(..., description="Cyclic working-day pattern")
    start_date: date = Field(..., description="Date aligned to pattern index 0")
    type: ShiftType = ShiftType.rotating

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, value: list[bool]) -> list[bool]:
        if len(value) == 0:
            raise ValueError("pattern must contain at least one day.")
        return value

    @property
    def period(self) -> int:
        return len(self.pattern)

    def works_on(self, on: date) -> bool:
        """Pattern lookup only; callers decide what to do before ``start_date``."""
        return self.pattern[(on - self.start_date).days % self.period]


class ShiftHistoryEntry(ShiftSchedule):
    """A schedule a member followed during the closed interval
    ``[start_date, end_date]``."""

    end_date: date

    @model_validator(mode="after")
    def validate_dates(self) -> "ShiftHistoryEntry":
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date.")
        return self

    def covers(self, on: date) -> bool:
        return self.start_date <= on <= self.end_date
