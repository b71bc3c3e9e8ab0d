# backend/tablebook/clock.py
"""
Wall-clock source.

Slot logic never calls datetime.now() itself: routers resolve a Clock
and pass `now` down explicitly. Times are naive local wall-clock values
in the restaurant timezone.
"""

from datetime import datetime
from functools import lru_cache
from typing import Protocol
from zoneinfo import ZoneInfo

from .config import settings


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Current time in the configured timezone, without tzinfo."""

    def __init__(self, tz_name: str = "UTC"):
        self.tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(self.tz).replace(tzinfo=None)


class FixedClock:
    """Clock frozen at a given instant (tests, replays)."""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def set(self, current: datetime) -> None:
        self.current = current


@lru_cache
def get_clock() -> Clock:
    """FastAPI dependency; overridden in tests."""
    return SystemClock(settings.timezone)
