"""
Civil-calendar date helpers.

Every date the engine handles is a calendar date in the user's own time
zone. Nothing here converts through UTC: "today" is computed from an IANA
zone name, and week math works on plain ``datetime.date`` values.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import settings

DATE_FORMAT = "%Y-%m-%d"


def parse_local_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string."""
    return datetime.strptime(value, DATE_FORMAT).date()


def format_local_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def resolve_zone(tz_name: Optional[str]) -> ZoneInfo:
    """Return the ZoneInfo for ``tz_name``, falling back to the configured default."""
    name = tz_name or settings.default_timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(settings.default_timezone)


def local_today(tz_name: Optional[str] = None, now: Optional[datetime] = None) -> date:
    """Current calendar date in the given time zone."""
    zone = resolve_zone(tz_name)
    if now is None:
        return datetime.now(zone).date()
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(zone).date()


def week_start(value: date) -> date:
    """Monday of the week containing ``value``. Sunday folds to the previous Monday."""
    return value - timedelta(days=value.weekday())


def week_bounds(value: date) -> Tuple[date, date]:
    monday = week_start(value)
    return monday, monday + timedelta(days=6)


def next_monday(value: date) -> date:
    return week_start(value) + timedelta(days=7)


def days_inclusive(start: date, end: date) -> int:
    """Number of calendar days in ``[start, end]``; 0 when the range is empty."""
    return max(0, (end - start).days + 1)


def iter_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def age_on(birth_date: date, on: date) -> int:
    """Age in whole years; decremented when the birthday has not yet occurred."""
    age = on.year - birth_date.year
    if (on.month, on.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age
