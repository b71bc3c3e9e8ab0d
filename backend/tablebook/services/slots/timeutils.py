# backend/tablebook/services/slots/timeutils.py
"""
Time helpers shared by the slot engine.

Times of day are plain ints: minutes since midnight (0..1439, 1440 is
only used as an end-of-day closing bound).
"""

import re
from datetime import date, datetime

from ...errors import InvalidFormat

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time(value: str, allow_end_of_day: bool = False) -> int:
    """
    Parse "HH:MM" into minutes since midnight.

    "24:00" is accepted only with allow_end_of_day (closing bounds).
    Raises InvalidFormat on anything else.
    """
    if not isinstance(value, str):
        raise InvalidFormat(f"Time must be a string in HH:MM format, got {value!r}")

    match = _TIME_RE.match(value.strip())
    if not match:
        raise InvalidFormat(f"Time must be in HH:MM format, got {value!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if allow_end_of_day and hours == 24 and minutes == 0:
        return MINUTES_PER_DAY
    if hours > 23 or minutes > 59:
        raise InvalidFormat(f"Time out of range: {value!r}")
    return hours * 60 + minutes


def format_time(minutes: int) -> str:
    """Minutes since midnight → "HH:MM" (1440 → "24:00")."""
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise ValueError(f"minutes must be within 0..1440, got {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_display_time(minutes: int) -> str:
    """Minutes since midnight → "h:MM AM/PM"."""
    minutes %= MINUTES_PER_DAY
    hours, mins = divmod(minutes, 60)
    suffix = "PM" if hours >= 12 else "AM"
    return f"{hours % 12 or 12}:{mins:02d} {suffix}"


def round_down_to_interval(minutes: int, interval_minutes: int) -> int:
    """Floor to the nearest lower multiple of the interval (relative to midnight)."""
    if interval_minutes <= 0:
        raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")
    return minutes - minutes % interval_minutes


def round_up_to_interval(minutes: int, interval_minutes: int, anchor: int = 0) -> int:
    """
    Ceil to the next boundary of the grid anchor + k * interval.

    A value already on the grid is returned unchanged.
    """
    if interval_minutes <= 0:
        raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")
    offset = minutes - anchor
    steps = -(-offset // interval_minutes)
    return anchor + steps * interval_minutes


def minutes_between(a: int, b: int) -> int:
    """Signed difference b - a; positive when b is later."""
    return b - a


def minute_of_day(dt: datetime, ceil: bool = False) -> int:
    """
    Minute of day for a datetime.

    With ceil, any seconds push the value to the next minute, so a slot
    starting at the returned minute is never before `dt`.
    """
    minutes = dt.hour * 60 + dt.minute
    if ceil and (dt.second or dt.microsecond):
        minutes += 1
    return minutes


def parse_date(value: str) -> date:
    """Parse an ISO date "YYYY-MM-DD"; raises InvalidFormat."""
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise InvalidFormat(f"Date must be in YYYY-MM-DD format, got {value!r}")


def normalize_close(open_minutes: int, close_minutes: int) -> int:
    """
    Closing bound for a window.

    A closing time not after the opening time (e.g. 18:00 → 02:00, or
    "00:00") means "past midnight"; slots never cross midnight, so the
    window is cut at end of day.
    """
    if close_minutes <= open_minutes:
        return MINUTES_PER_DAY
    return close_minutes
