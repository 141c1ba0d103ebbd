"""Free-text leave reason classification."""

from __future__ import annotations

from typing import Optional

from leave_engine.common.constants import ParentalLeaveType


def is_maternity_reason(reason: Optional[str]) -> bool:
    return bool(reason) and "maternity" in reason.lower()


def is_paternity_reason(reason: Optional[str]) -> bool:
    """Paternity unless the text also mentions maternity."""
    if not reason:
        return False
    lower = reason.lower()
    return "paternity" in lower and "maternity" not in lower


def is_parental_leave_reason(reason: Optional[str]) -> bool:
    """Maternity or paternity; such requests use their own pool."""
    return is_maternity_reason(reason) or is_paternity_reason(reason)


def matches_parental_type(reason: Optional[str], leave_type: ParentalLeaveType) -> bool:
    if leave_type == ParentalLeaveType.paternity:
        return is_paternity_reason(reason)
    return is_maternity_reason(reason)
