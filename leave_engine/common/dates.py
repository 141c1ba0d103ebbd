"""Calendar-date helpers. Everything here works on ``datetime.date``, never on
``datetime``, so daylight-saving shifts can't move a day across a boundary."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator, Optional
from zoneinfo import ZoneInfo

from leave_engine.common.exceptions import InvalidDateRangeError
from leave_engine.config import settings


def today() -> date:
    """Current date in the configured timezone."""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()


def resolve_as_of(as_of: Optional[date]) -> date:
    return as_of if as_of is not None else today()


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date in ``[start, end]``; raises when ``start > end``."""
    if start > end:
        raise InvalidDateRangeError(start, end)
    current = start
    one_day = timedelta(days=1)
    while current <= end:
        yield current
        current += one_day


def year_bounds(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def clip_to_year(start: date, end: date, year: int) -> Optional[tuple[date, date]]:
    """Return the part of ``[start, end]`` inside ``year``, or ``None``."""
    year_start, year_end = year_bounds(year)
    if start > year_end or end < year_start:
        return None
    return max(start, year_start), min(end, year_end)
