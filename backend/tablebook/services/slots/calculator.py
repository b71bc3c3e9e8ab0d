# backend/tablebook/services/slots/calculator.py
"""
Day grid calculation.

Produces, for a branch and a date, the resolved list of slots with their
capacity limits:
  (time, max_seats, max_tables)

Contains:
✓ booking_settings of the branch (hours, interval, capacity)
✓ booking_overrides of the branch for the date

Does NOT contain:
✗ Bookings (capacity ledger, computed on-the-fly)
✗ "now" filtering (availability service)
"""

from dataclasses import dataclass, field
from datetime import date
from sqlalchemy.orm import Session

from ...errors import SettingsNotFound
from .generator import generate_slots
from .overrides import EffectiveWindow, resolve
from .timeutils import format_time


@dataclass(frozen=True)
class SlotSpec:
    time: int
    max_seats: int
    max_tables: int

    @property
    def time_str(self) -> str:
        return format_time(self.time)


@dataclass(frozen=True)
class DayGrid:
    window: EffectiveWindow
    slots: tuple[SlotSpec, ...] = field(default_factory=tuple)

    @property
    def closed(self) -> bool:
        return self.window.closed

    def find(self, minutes: int) -> SlotSpec | None:
        for slot in self.slots:
            if slot.time == minutes:
                return slot
        return None


def calculate_day_grid(target_date: date, settings, override=None) -> DayGrid:
    """
    Resolve the override and generate the canonical slots for the date.

    Returns an empty grid for closed days.
    """
    window = resolve(target_date, settings, override)
    if window.closed:
        return DayGrid(window=window)

    times = generate_slots(window.open_time, window.close_time, window.interval_minutes)
    return DayGrid(
        window=window,
        slots=tuple(SlotSpec(t, window.max_seats, window.max_tables) for t in times),
    )


def load_day_grid(db: Session, branch_id: int, target_date: date) -> DayGrid:
    """Load settings and override from the DB and calculate the grid."""
    settings = get_branch_settings(db, branch_id)
    if settings is None:
        raise SettingsNotFound(branch_id=branch_id)
    override = get_branch_override(db, branch_id, target_date)
    return calculate_day_grid(target_date, settings, override)


# ── Database helpers ─────────────────────────────────────────────────────


def get_branch_settings(db: Session, branch_id: int):
    """Get booking settings of a branch."""
    from ...models.generated import BookingSettings
    return db.query(BookingSettings).filter(BookingSettings.branch_id == branch_id).first()


def get_branch_override(db: Session, branch_id: int, target_date: date):
    """Get the override of a branch for a specific date."""
    from ...models.generated import BookingOverrides

    return (
        db.query(BookingOverrides)
        .filter(
            BookingOverrides.branch_id == branch_id,
            BookingOverrides.date == target_date.isoformat(),
        )
        .first()
    )
