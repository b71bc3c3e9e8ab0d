# backend/tablebook/services/slots/overrides.py
"""
Day override resolution.

Turns base booking settings plus an optional per-date override into the
effective window for that date. Pure: the caller loads both records.
"""

from dataclasses import dataclass
from datetime import date

from .timeutils import normalize_close, parse_time

OVERRIDE_CLOSED = "closed"
OVERRIDE_MODIFIED = "modified"
OVERRIDE_TYPES = (OVERRIDE_CLOSED, OVERRIDE_MODIFIED)


@dataclass(frozen=True)
class EffectiveWindow:
    date: date
    open_time: int
    close_time: int
    interval_minutes: int
    max_seats: int
    max_tables: int
    closed: bool = False
    reason: str | None = None
    note: str | None = None


def base_window(target_date: date, settings) -> EffectiveWindow:
    """Window straight from BookingSettings, no override applied."""
    open_time = parse_time(settings.open_time)
    close_time = normalize_close(
        open_time, parse_time(settings.close_time, allow_end_of_day=True)
    )
    return EffectiveWindow(
        date=target_date,
        open_time=open_time,
        close_time=close_time,
        interval_minutes=settings.interval_minutes,
        max_seats=settings.max_seats_per_slot,
        max_tables=settings.max_tables_per_slot,
    )


def resolve(target_date: date, settings, override=None) -> EffectiveWindow:
    """
    Effective window for target_date.

    - no override  → base settings
    - closed       → closed window (no slots), reason "closed"
    - modified     → start/end and capacity from the override where set;
                     a capacity of 0 is kept, None inherits from base
    """
    base = base_window(target_date, settings)
    if override is None:
        return base

    if override.override_type == OVERRIDE_CLOSED:
        return EffectiveWindow(
            date=target_date,
            open_time=base.open_time,
            close_time=base.open_time,
            interval_minutes=base.interval_minutes,
            max_seats=0,
            max_tables=0,
            closed=True,
            reason="closed",
            note=override.note,
        )

    if override.override_type != OVERRIDE_MODIFIED:
        raise ValueError(f"Unknown override_type: {override.override_type!r}")

    open_time = parse_time(override.start_time) if override.start_time else base.open_time
    if override.end_time:
        # No midnight wrap: an end not after the opening leaves the day empty
        end_time = parse_time(override.end_time, allow_end_of_day=True)
        close_time = end_time if end_time > open_time else open_time
    else:
        close_time = base.close_time if base.close_time > open_time else open_time

    return EffectiveWindow(
        date=target_date,
        open_time=open_time,
        close_time=close_time,
        interval_minutes=base.interval_minutes,
        max_seats=override.new_max_seats if override.new_max_seats is not None else base.max_seats,
        max_tables=override.new_max_tables if override.new_max_tables is not None else base.max_tables,
        note=override.note,
    )
