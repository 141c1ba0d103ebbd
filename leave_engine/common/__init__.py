"""Common module — shared enums, exceptions and date helpers."""

from leave_engine.common.constants import (
    NO_SCHEDULE_TAG,
    UNGROUPED,
    CarryoverStatus,
    CountingMethod,
    LeaveStatus,
    MemberRole,
    ParentalLeaveType,
    Provenance,
    ShiftType,
)
from leave_engine.common.dates import clip_to_year, iter_dates, resolve_as_of, today, year_bounds
from leave_engine.common.exceptions import (
    AppException,
    EmptyCollectionError,
    EngineError,
    InvalidDateRangeError,
    InvalidInputError,
    NotFoundException,
    ValidationException,
)

__all__ = [
    # Constants / Enums
    "CarryoverStatus",
    "CountingMethod",
    "LeaveStatus",
    "MemberRole",
    "ParentalLeaveType",
    "Provenance",
    "ShiftType",
    "NO_SCHEDULE_TAG",
    "UNGROUPED",
    # Dates
    "clip_to_year",
    "iter_dates",
    "resolve_as_of",
    "today",
    "year_bounds",
    # Exceptions
    "AppException",
    "EmptyCollectionError",
    "EngineError",
    "InvalidDateRangeError",
    "InvalidInputError",
    "NotFoundException",
    "ValidationException",
]
