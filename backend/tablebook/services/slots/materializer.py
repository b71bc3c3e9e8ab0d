# backend/tablebook/services/slots/materializer.py
"""
Materialized time slots.

time_slots rows mirror the day grid (settings + override) of a branch.
They are rewritten synchronously when settings or overrides change:

✓ settings changed  → every date of the forward horizon
✓ override changed  → the override's date(s)
✓ booking on a date outside the horizon → that date, on demand

Regeneration is a diff against the current rows (delete stale, update
changed capacity, insert missing), so running it twice with the same
inputs changes nothing.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from sqlalchemy.orm import Session

from ...models.generated import TimeSlots
from .calculator import DayGrid, calculate_day_grid, get_branch_override, get_branch_settings

logger = logging.getLogger(__name__)


@dataclass
class RegenerationStats:
    created: int = 0
    updated: int = 0
    deleted: int = 0

    def __iadd__(self, other: "RegenerationStats") -> "RegenerationStats":
        self.created += other.created
        self.updated += other.updated
        self.deleted += other.deleted
        return self

    @property
    def changed(self) -> bool:
        return bool(self.created or self.updated or self.deleted)


def load_slot_rows(db: Session, branch_id: int, target_date: date) -> list[TimeSlots]:
    """Materialized rows of a date, ordered by time."""
    return (
        db.query(TimeSlots)
        .filter(
            TimeSlots.branch_id == branch_id,
            TimeSlots.date == target_date.isoformat(),
        )
        .order_by(TimeSlots.time)
        .all()
    )


def sync_day(db: Session, branch_id: int, grid: DayGrid) -> RegenerationStats:
    """Bring the rows of grid.window.date in line with the grid. Flushes, no commit."""
    date_str = grid.window.date.isoformat()
    stats = RegenerationStats()

    existing = {row.time: row for row in load_slot_rows(db, branch_id, grid.window.date)}
    wanted = {slot.time_str: slot for slot in grid.slots}

    for time_str, row in existing.items():
        if time_str not in wanted:
            db.delete(row)
            stats.deleted += 1

    for time_str, slot in wanted.items():
        row = existing.get(time_str)
        if row is None:
            db.add(TimeSlots(
                branch_id=branch_id,
                date=date_str,
                time=time_str,
                max_seats=slot.max_seats,
                max_tables=slot.max_tables,
            ))
            stats.created += 1
        elif row.max_seats != slot.max_seats or row.max_tables != slot.max_tables:
            row.max_seats = slot.max_seats
            row.max_tables = slot.max_tables
            stats.updated += 1

    db.flush()
    return stats


def regenerate_date(db: Session, branch_id: int, target_date: date) -> RegenerationStats:
    """
    Regenerate one date from the current settings/override.

    Without settings every row of the date is purged.
    """
    settings = get_branch_settings(db, branch_id)
    if settings is None:
        stats = RegenerationStats()
        for row in load_slot_rows(db, branch_id, target_date):
            db.delete(row)
            stats.deleted += 1
        db.flush()
        return stats

    override = get_branch_override(db, branch_id, target_date)
    grid = calculate_day_grid(target_date, settings, override)
    return sync_day(db, branch_id, grid)


def regenerate_range(
    db: Session,
    branch_id: int,
    start_date: date,
    days: int,
) -> RegenerationStats:
    """Regenerate `days` consecutive dates starting at start_date."""
    total = RegenerationStats()
    for offset in range(days):
        total += regenerate_date(db, branch_id, start_date + timedelta(days=offset))

    logger.info(
        f"Slots regenerated: branch={branch_id} from={start_date.isoformat()} days={days} "
        f"created={total.created} updated={total.updated} deleted={total.deleted}"
    )
    return total


def ensure_materialized(db: Session, branch_id: int, grid: DayGrid) -> list[TimeSlots]:
    """
    Rows for the grid's date, in line with the grid.

    Covers dates that were never generated (beyond the horizon) and dates
    generated before the horizon moved; a no-op when rows are current.
    """
    stats = sync_day(db, branch_id, grid)
    if stats.changed:
        logger.info(
            f"Slots materialized on demand: branch={branch_id} date={grid.window.date.isoformat()} "
            f"created={stats.created} updated={stats.updated} deleted={stats.deleted}"
        )
    return load_slot_rows(db, branch_id, grid.window.date)
