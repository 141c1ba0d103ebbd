"""Shift schedules — pattern evaluation and day counting."""

from leave_engine.schedule.schemas import ShiftHistoryEntry, ShiftSchedule

__all__ = ["ShiftHistoryEntry", "ShiftSchedule"]
