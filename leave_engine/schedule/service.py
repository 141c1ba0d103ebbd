"""Schedule service — shift pattern evaluation and day counting.

Business logic:
  - Resolve which schedule (history entry or live) applies on a date
  - Working-day test on cyclic patterns, conservative default for unknown dates
  - Inclusive calendar / working day counts
  - Working-days tag used to label members with identical rest days
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional, Union

from leave_engine.common.constants import (
    NO_SCHEDULE_TAG,
    WEEKDAY_LETTERS,
    CountingMethod,
    ShiftType,
)
from leave_engine.common.dates import iter_dates, resolve_as_of
from leave_engine.common.exceptions import InvalidDateRangeError
from leave_engine.config import settings
from leave_engine.schedule.schemas import ShiftSchedule
from leave_engine.team.schemas import Member

logger = logging.getLogger(__name__)

ScheduleContext = Union[Member, ShiftSchedule, None]


class ScheduleService:
    """Pure schedule arithmetic over calendar dates."""

    # ─────────────────────────────────────────────────────────────────
    # Resolution
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def resolve_schedule(context: ScheduleContext, on: date) -> Optional[ShiftSchedule]:
        """Return the schedule in force on ``on``, or ``None`` if unknown.

        For a member: the history entry whose interval contains the date
        wins; otherwise the live schedule, once it has started.
        """
        if context is None:
            return None

        if isinstance(context, ShiftSchedule):
            return context if on >= context.start_date else None

        for entry in context.shift_history:
            if entry.covers(on):
                return entry

        live = context.shift_schedule
        if live is not None and on >= live.start_date:
            return live
        return None

    @staticmethod
    def is_working_day(context: ScheduleContext, on: date) -> bool:
        """True when the member is scheduled to work on ``on``.

        Dates no schedule covers count as working days, so usage is never
        under-counted.
        """
        schedule = ScheduleService.resolve_schedule(context, on)
        if schedule is None:
            logger.debug("No schedule covers %s; treating as working day", on)
            return True
        return schedule.works_on(on)

    # ─────────────────────────────────────────────────────────────────
    # Counting
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def count_days(
        start: date,
        end: date,
        mode: CountingMethod = CountingMethod.calendar,
        context: ScheduleContext = None,
    ) -> int:
        """Inclusive day count. Raises ``InvalidDateRangeError`` when
        ``start > end``."""
        if start > end:
            raise InvalidDateRangeError(start, end)
        if mode == CountingMethod.calendar:
            return (end - start).days + 1
        return sum(
            1 for d in iter_dates(start, end)
            if ScheduleService.is_working_day(context, d)
        )

    @staticmethod
    def count_non_working_days(
        start: date,
        end: date,
        context: ScheduleContext = None,
    ) -> int:
        return sum(
            1 for d in iter_dates(start, end)
            if not ScheduleService.is_working_day(context, d)
        )

    @staticmethod
    def off_days(context: ScheduleContext, start: date, days: int) -> frozenset[date]:
        """Non-working dates in ``[start, start + days)``."""
        return frozenset(
            start + timedelta(days=i)
            for i in range(days)
            if not ScheduleService.is_working_day(context, start + timedelta(days=i))
        )

    # ─────────────────────────────────────────────────────────────────
    # Working-days tag
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def working_days_tag(
        context: ScheduleContext,
        as_of: Optional[date] = None,
    ) -> str:
        """Label shared by members who work exactly the same days.

        Fixed schedules → weekday mask such as ``"MTWTF__"`` (stable).
        Rotating schedules → ``1``/``0`` over the next N days (changes daily,
        never store it).
        """
        as_of = resolve_as_of(as_of)
        schedule = ScheduleService.resolve_schedule(context, as_of)
        if schedule is None and context is not None:
            # not started yet: tag the upcoming pattern
            schedule = context if isinstance(context, ShiftSchedule) else context.shift_schedule
        if schedule is None:
            return NO_SCHEDULE_TAG

        if schedule.type == ShiftType.fixed:
            week = [as_of + timedelta(days=i) for i in range(7)]
            by_weekday = {d.weekday(): schedule.works_on(d) for d in week}
            return "".join(
                WEEKDAY_LETTERS[wd] if by_weekday[wd] else "_" for wd in range(7)
            )

        horizon = settings.WORKING_DAYS_TAG_HORIZON
        return "".join(
            "1" if schedule.works_on(as_of + timedelta(days=i)) else "0"
            for i in range(horizon)
        )
