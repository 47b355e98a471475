from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Tuple

from ..core.constants import MONTH_NAMES
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    if not isinstance(value, str):
        raise ValidationError(f"Ngày không hợp lệ (YYYY-MM-DD): {value!r}")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Ngày không hợp lệ (YYYY-MM-DD): {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def inclusive_day_span(start: date, end: date) -> int:
    """Number of calendar days covered by [start, end], both ends included.

    A leave starting and ending on the same day spans 1 day.
    """
    return abs((end - start).days) + 1


def month_number(month_name: str) -> int:
    """'January' -> 1 ... 'December' -> 12."""
    if not isinstance(month_name, str):
        raise ValidationError(f"Tháng không hợp lệ: {month_name!r}")
    name = month_name.strip().capitalize()
    if name not in MONTH_NAMES:
        raise ValidationError(f"Tháng không hợp lệ: {month_name!r}")
    return MONTH_NAMES.index(name) + 1


def month_bounds(month_name: str, year: int) -> Tuple[date, date]:
    """First and last calendar day of the given month."""
    month = month_number(month_name)
    last_day = calendar.monthrange(int(year), month)[1]
    return date(int(year), month, 1), date(int(year), month, last_day)


def overlap_days(start: date, end: date, window_start: date, window_end: date) -> int:
    """Inclusive day count shared by [start, end] and [window_start, window_end], 0 if disjoint."""
    lo = max(start, window_start)
    hi = min(end, window_end)
    if hi < lo:
        return 0
    return (hi - lo).days + 1
