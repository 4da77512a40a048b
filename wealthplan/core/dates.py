"""Calendar helpers used by the savings schedule."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta


def add_months(anchor: date, months: int) -> date:
    """Return ``anchor`` shifted by ``months``, clamping the day to the month end.

    The shift is always taken from the anchor, so a day-31 anchor lands on
    Feb 29 (or 28) and then back on Mar 31 rather than drifting to the 29th.
    """
    return anchor + relativedelta(months=months)


_STEPPERS = {
    "day": lambda start, k: start + timedelta(days=k),
    "week": lambda start, k: start + timedelta(weeks=k),
    "month": add_months,
}


def step_dates(start: date, end: date, unit: str) -> List[date]:
    """Dates from start to end (inclusive) spaced by one ``unit``.

    ``unit`` is one of ``"day"``, ``"week"`` or ``"month"``.
    """
    step = _STEPPERS.get(unit)
    if step is None:
        raise ValueError(f"unknown step unit: {unit}")
    if end < start:
        return []

    dates: List[date] = []
    k = 0
    while True:
        try:
            current = step(start, k)
        except (OverflowError, ValueError):
            # past date.max
            break
        if current > end:
            break
        dates.append(current)
        k += 1
    return dates


def max_step_count(start: date, end: date, unit: str) -> int:
    """Upper bound on ``len(step_dates(start, end, unit))`` without building the dates."""
    if end < start:
        return 0
    if unit == "day":
        return (end - start).days + 1
    if unit == "week":
        return (end - start).days // 7 + 1
    if unit == "month":
        return (end.year - start.year) * 12 + (end.month - start.month) + 1
    raise ValueError(f"unknown step unit: {unit}")


def whole_days_between(start: date, end: date) -> int:
    """Midnight-to-midnight difference in days (negative when end < start)."""
    return (end - start).days


def today_in(timezone_name: Optional[str] = None) -> date:
    if not timezone_name:
        return date.today()
    return datetime.now(ZoneInfo(timezone_name)).date()
