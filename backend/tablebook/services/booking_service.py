# backend/tablebook/services/booking_service.py
"""
Booking lifecycle.

Creation is a check-then-write that is re-verified at write time:
every attempt runs in one transaction that
1. resolves the day grid and validates the requested slot
2. locks the slot's time_slots row
3. re-reads current usage and checks the party fits
4. inserts the booking
Transient store conflicts re-run the whole attempt (never a stale
check). Whatever the read path showed the diner earlier is only a hint.

Cancellation and other status changes commit immediately; freed
capacity is visible to the next availability query.
"""

import logging
from datetime import date, datetime, time as dt_time, timedelta

from redis import Redis
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from ..errors import AlreadyTerminal, BookingError, BookingNotFound, SlotContention, SlotUnavailable
from ..models.generated import Bookings
from ..schemas.bookings import BookingCreate
from .events import booking_payload, emit_event
from .slots.availability import get_availability
from .slots.calculator import load_day_grid
from .slots.config import TERMINAL_STATUSES, BookingConfig, get_booking_config
from .slots.ledger import lock_slot, reserve
from .slots.materializer import ensure_materialized
from .slots.timeutils import format_time, parse_time

logger = logging.getLogger(__name__)


def create_booking(
    db: Session,
    data: BookingCreate,
    now: datetime,
    redis: Redis | None = None,
    config: BookingConfig | None = None,
) -> Bookings:
    """
    Create a booking for an exact slot.

    Raises:
        SettingsNotFound: branch never configured
        SlotUnavailable: closed day, not a slot of the day, or already started
        CapacityExceeded: party does not fit at write time
        SlotContention: store conflicts on every attempt
    """
    config = config or get_booking_config()
    attempts = config.booking_retry_attempts

    for attempt in range(1, attempts + 1):
        try:
            booking = _attempt_create(db, data, now, config)
            db.commit()
        except BookingError:
            db.rollback()
            raise
        except (OperationalError, IntegrityError) as e:
            # Lock timeouts, or a concurrent first booking materializing the same slot row
            db.rollback()
            if e.connection_invalidated:
                raise
            logger.warning(
                f"Booking attempt {attempt}/{attempts} failed on store conflict: "
                f"branch={data.branch_id} {data.date.isoformat()} {data.time}: {e.orig}"
            )
            continue

        logger.info(
            f"Booking created: id={booking.id} branch={booking.branch_id} "
            f"{booking.date} {booking.time} party={booking.party_size} status={booking.status}"
        )
        emit_event(redis, "booking_created", booking_payload(booking))
        return booking

    raise SlotContention(attempts=attempts)


def _attempt_create(
    db: Session,
    data: BookingCreate,
    now: datetime,
    config: BookingConfig,
) -> Bookings:
    """One lock-read-check-insert pass. Caller commits or rolls back."""
    grid = load_day_grid(db, data.branch_id, data.date)
    if grid.closed:
        raise SlotUnavailable("Branch is closed on this date", reason="closed", alternatives=[])

    minutes = parse_time(data.time)
    slot_start = datetime.combine(data.date, dt_time.min) + timedelta(minutes=minutes)
    if grid.find(minutes) is None or slot_start < now:
        raise SlotUnavailable(
            alternatives=_alternatives(db, data.branch_id, data.date, data.party_size, minutes, now, config),
        )

    ensure_materialized(db, data.branch_id, grid)
    slot = lock_slot(db, data.branch_id, data.date, data.time)
    if slot is None:
        raise SlotUnavailable(alternatives=[])

    return reserve(
        db,
        slot,
        data.party_size,
        status=config.initial_status,
        user_id=data.user_id,
        guest_name=data.guest_name,
        guest_phone=data.guest_phone,
        notes=data.notes,
    )


def _alternatives(
    db: Session,
    branch_id: int,
    target_date: date,
    party_size: int,
    requested_time: int,
    now: datetime,
    config: BookingConfig,
) -> list[str]:
    """Nearby bookable slots to suggest instead of an invalid time."""
    result = get_availability(
        db, branch_id, target_date, party_size, now,
        requested_time=requested_time, config=config, rollover=False,
    )
    return [format_time(slot.time) for slot in result.closest]


# ── Status transitions ───────────────────────────────────────────────────


def get_booking(db: Session, booking_id: int) -> Bookings:
    booking = db.get(Bookings, booking_id)
    if booking is None:
        raise BookingNotFound(booking_id=booking_id)
    return booking


def cancel_booking(
    db: Session,
    booking_id: int,
    reason: str | None = None,
    redis: Redis | None = None,
) -> Bookings:
    """Cancel an active booking; its seats and table are freed on commit."""
    return _transition(db, booking_id, "cancelled", redis, cancel_reason=reason)


def confirm_booking(db: Session, booking_id: int, redis: Redis | None = None) -> Bookings:
    """pending → confirmed (confirming a confirmed booking is a no-op)."""
    return _transition(db, booking_id, "confirmed", redis)


def complete_booking(db: Session, booking_id: int, redis: Redis | None = None) -> Bookings:
    """Mark an active booking completed after the visit."""
    return _transition(db, booking_id, "completed", redis)


def _transition(
    db: Session,
    booking_id: int,
    new_status: str,
    redis: Redis | None,
    **fields,
) -> Bookings:
    """
    Move an active booking to new_status.

    Every non-terminal status is active, so any active booking may be
    cancelled, confirmed or completed; repeating the current status is a no-op.
    """
    booking = (
        db.query(Bookings)
        .filter(Bookings.id == booking_id)
        .with_for_update()
        .first()
    )
    if booking is None:
        db.rollback()
        raise BookingNotFound(booking_id=booking_id)

    if booking.status in TERMINAL_STATUSES:
        status = booking.status
        db.rollback()
        raise AlreadyTerminal(booking_id=booking_id, status=status)

    if booking.status == new_status:
        db.rollback()
        return booking

    old_status = booking.status
    booking.status = new_status
    for name, value in fields.items():
        setattr(booking, name, value)
    db.commit()

    logger.info(f"Booking {booking_id}: {old_status} → {new_status}")
    emit_event(redis, f"booking_{new_status}", booking_payload(booking))
    return booking


# ── Queries ──────────────────────────────────────────────────────────────


def list_branch_bookings(
    db: Session,
    branch_id: int | None = None,
    target_date: date | None = None,
    status: str | None = None,
) -> list[Bookings]:
    query = db.query(Bookings)
    if branch_id is not None:
        query = query.filter(Bookings.branch_id == branch_id)
    if target_date is not None:
        query = query.filter(Bookings.date == target_date.isoformat())
    if status is not None:
        query = query.filter(Bookings.status == status)
    return query.order_by(Bookings.date, Bookings.time, Bookings.id).all()
