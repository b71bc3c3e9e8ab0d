# backend/tablebook/services/slots/ledger.py
"""
Capacity ledger.

Capacity use is derived from bookings, never stored:
  seats_used  = sum(party_size) over active bookings of the slot
  tables_used = count(*)        over active bookings of the slot

Active = pending or confirmed. Every booking takes one table unit,
whatever the party size.
"""

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...errors import CapacityExceeded
from ...models.generated import Bookings, TimeSlots
from .config import ACTIVE_STATUSES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Usage:
    seats: int = 0
    tables: int = 0


@dataclass(frozen=True)
class Remaining:
    seats: int
    tables: int

    def fits(self, party_size: int) -> bool:
        return self.seats >= party_size and self.tables >= 1


def remaining_from_usage(max_seats: int, max_tables: int, usage: Usage) -> Remaining:
    # An override may drop capacity below what is already booked
    return Remaining(
        seats=max(0, max_seats - usage.seats),
        tables=max(0, max_tables - usage.tables),
    )


def slot_usage(db: Session, branch_id: int, target_date: date, time_str: str) -> Usage:
    """Seats and tables used by active bookings of one slot."""
    seats, tables = (
        db.query(
            func.coalesce(func.sum(Bookings.party_size), 0),
            func.count(Bookings.id),
        )
        .filter(
            Bookings.branch_id == branch_id,
            Bookings.date == target_date.isoformat(),
            Bookings.time == time_str,
            Bookings.status.in_(ACTIVE_STATUSES),
        )
        .one()
    )
    return Usage(seats=int(seats), tables=int(tables))


def day_usage(db: Session, branch_id: int, target_date: date) -> dict[str, Usage]:
    """Usage of every slot of a day in one grouped query, keyed by "HH:MM"."""
    rows = (
        db.query(
            Bookings.time,
            func.coalesce(func.sum(Bookings.party_size), 0),
            func.count(Bookings.id),
        )
        .filter(
            Bookings.branch_id == branch_id,
            Bookings.date == target_date.isoformat(),
            Bookings.status.in_(ACTIVE_STATUSES),
        )
        .group_by(Bookings.time)
        .all()
    )
    return {time_str: Usage(int(seats), int(tables)) for time_str, seats, tables in rows}


def remaining(
    db: Session,
    branch_id: int,
    target_date: date,
    time_str: str,
    max_seats: int,
    max_tables: int,
) -> Remaining:
    """Remaining seats/tables of one slot."""
    usage = slot_usage(db, branch_id, target_date, time_str)
    return remaining_from_usage(max_seats, max_tables, usage)


def lock_slot(db: Session, branch_id: int, target_date: date, time_str: str) -> TimeSlots | None:
    """
    Load the materialized slot row with a row lock.

    FOR UPDATE is a no-op on SQLite, where the engine opens transactions
    with BEGIN IMMEDIATE instead.
    """
    return (
        db.query(TimeSlots)
        .filter(
            TimeSlots.branch_id == branch_id,
            TimeSlots.date == target_date.isoformat(),
            TimeSlots.time == time_str,
        )
        .with_for_update()
        .first()
    )


def reserve(db: Session, slot: TimeSlots, party_size: int, status: str, **fields) -> Bookings:
    """
    Re-check capacity of a locked slot and insert the booking.

    Must run inside the transaction that locked `slot`; the caller
    commits. Raises CapacityExceeded when the party no longer fits.
    """
    target_date = date.fromisoformat(slot.date)
    left = remaining(db, slot.branch_id, target_date, slot.time, slot.max_seats, slot.max_tables)

    if not left.fits(party_size):
        logger.warning(
            f"Capacity exceeded: branch={slot.branch_id} {slot.date} {slot.time} "
            f"party={party_size} seats_left={left.seats} tables_left={left.tables}"
        )
        raise CapacityExceeded(
            remaining_seats=left.seats,
            remaining_tables=left.tables,
        )

    booking = Bookings(
        branch_id=slot.branch_id,
        date=slot.date,
        time=slot.time,
        party_size=party_size,
        status=status,
        **fields,
    )
    db.add(booking)
    db.flush()
    return booking
