"""Calendar helpers used for bucketing.

All helpers work at day granularity: any time-of-day component is
discarded and timezone-aware values keep their wall-clock date.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, List, Optional

import numpy as np
import pandas as pd

MONTH_ABBR = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
              'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')
WEEKDAY_ABBR = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')


def today() -> date:
    """Local calendar date of the device."""
    return date.today()


def parse_day(value: Any) -> Optional[date]:
    """Return the calendar date of ``value`` or ``None`` when it cannot be parsed."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, datetime):
        if pd.isna(value):
            return None
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (str, np.datetime64)):
        if isinstance(value, str) and not value.strip():
            return None
        try:
            parsed = pd.Timestamp(value.strip() if isinstance(value, str) else value)
        except (ValueError, TypeError, OverflowError):
            return None
        if pd.isna(parsed):
            return None
        return parsed.date()
    return None


def parse_timestamp(value: Any) -> Optional[pd.Timestamp]:
    """Naive wall-clock timestamp of ``value``; plain dates map to midnight.

    Returns ``None`` exactly when :func:`parse_day` does.
    """
    day = parse_day(value)
    if day is None:
        return None
    if isinstance(value, datetime):
        stamp = pd.Timestamp(value)
    elif isinstance(value, (str, np.datetime64)):
        stamp = pd.Timestamp(value.strip() if isinstance(value, str) else value)
    else:
        stamp = pd.Timestamp(day)
    if stamp.tzinfo is not None:
        stamp = stamp.tz_localize(None)
    return stamp


def week_start(day: date) -> date:
    """Monday of the ISO week containing ``day``."""
    return day - timedelta(days=day.weekday())


def day_range(start: date, end: date) -> List[date]:
    """Consecutive days from ``start`` to ``end`` inclusive."""
    if end < start:
        return []
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def day_key(day: date) -> str:
    return day.isoformat()


def day_label(day: date) -> str:
    return f"{WEEKDAY_ABBR[day.weekday()]} {day.day}"


def week_key(day: date) -> str:
    return week_start(day).isoformat()


def week_label(day: date) -> str:
    start = week_start(day)
    end = start + timedelta(days=6)
    return f"{start.day} {MONTH_ABBR[start.month - 1]} - {end.day} {MONTH_ABBR[end.month - 1]}"


def month_abbr(day: date) -> str:
    return MONTH_ABBR[day.month - 1]


def month_key(day: date) -> str:
    return f"{day.year}-{day.month:02d}"


def month_label(day: date, *, with_year: bool = False) -> str:
    label = month_abbr(day)
    return f"{label} {day.year}" if with_year else label


def month_end(day: date) -> date:
    first_of_next = (day.replace(day=1) + timedelta(days=32)).replace(day=1)
    return first_of_next - timedelta(days=1)
