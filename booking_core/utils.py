"""Shared time helpers used across the admission stages."""

import re
from datetime import date, datetime, time, timedelta

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_hhmm(value: str) -> time:
    """Parse a 24-hour ``HH:MM`` string into a ``time``.

    Examples:
        >>> parse_hhmm("09:30")
        datetime.time(9, 30)
    """
    match = _HHMM.match(value.strip())
    if not match:
        raise ValueError(f"Time must be in HH:MM format, got {value!r}")
    return time(int(match.group(1)), int(match.group(2)))


def add_hours_hhmm(start_time: str, hours: int) -> str:
    """Add whole hours to the hour field of an ``HH:MM`` string.

    Minutes are kept and the hour is not wrapped, so a late start yields an
    hour of 24 or more.

    Examples:
        >>> add_hours_hhmm("10:30", 2)
        '12:30'
        >>> add_hours_hhmm("23:00", 2)
        '25:00'
    """
    start = parse_hhmm(start_time)
    return f"{start.hour + hours:02d}:{start.minute:02d}"


def interval_on(day: date, start_time: str, duration_hours: int) -> tuple[datetime, datetime]:
    """Return the absolute ``[start, end)`` interval of a slot on ``day``."""
    start = datetime.combine(day, parse_hhmm(start_time))
    return start, start + timedelta(hours=duration_hours)


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open interval overlap; abutting intervals do not overlap."""
    return a_start < b_end and a_end > b_start
