from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from tablebook.errors import CapacityExceeded, SlotContention
from tablebook.models import Bookings, TimeSlots
from tablebook.schemas.bookings import BookingCreate
from tablebook.services import booking_service
from tablebook.services.slots.availability import get_availability

TOMORROW = date(2026, 10, 18)

LOCKED = OperationalError("SELECT", {}, Exception("database is locked"))
DUPLICATE_SLOT = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: time_slots"))


class Flaky:
    """Raises `error` on the first `failures` calls, then delegates to `func`."""

    def __init__(self, func, error=None, failures=0):
        self.func = func
        self.error = error
        self.failures = failures
        self.calls = 0

    def __call__(self, *args, **kwargs):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.func(*args, **kwargs)


def book(db, clock, config, party_size=2):
    data = BookingCreate(branch_id=1, date=TOMORROW, time="19:00", party_size=party_size)
    return booking_service.create_booking(db, data, clock.now(), config=config)


def test_lock_timeout_is_retried(db, clock, config, configure, monkeypatch):
    configure()
    lock = Flaky(booking_service.lock_slot, LOCKED, failures=1)
    monkeypatch.setattr(booking_service, "lock_slot", lock)

    booking = book(db, clock, config)

    assert lock.calls == 2
    assert booking.status == "confirmed"
    assert db.query(Bookings).count() == 1


def test_concurrent_first_materialization_is_retried(db, clock, config, configure, monkeypatch):
    configure()
    materialize = Flaky(booking_service.ensure_materialized, DUPLICATE_SLOT, failures=1)
    monkeypatch.setattr(booking_service, "ensure_materialized", materialize)

    booking = book(db, clock, config)

    assert materialize.calls == 2
    assert booking.time == "19:00"


def test_contention_after_all_attempts(db, clock, config, configure, monkeypatch):
    configure()
    lock = Flaky(booking_service.lock_slot, LOCKED, failures=100)
    monkeypatch.setattr(booking_service, "lock_slot", lock)

    with pytest.raises(SlotContention) as exc:
        book(db, clock, config)

    assert lock.calls == config.booking_retry_attempts == 3
    assert exc.value.extra == {"attempts": 3}
    assert db.query(Bookings).count() == 0


def test_capacity_exceeded_is_not_retried(db, clock, config, configure, monkeypatch):
    configure(max_seats_per_slot=4)
    book(db, clock, config, party_size=4)

    reserve = Flaky(booking_service.reserve)
    monkeypatch.setattr(booking_service, "reserve", reserve)
    with pytest.raises(CapacityExceeded):
        book(db, clock, config, party_size=1)

    assert reserve.calls == 1


def test_missing_slot_rows_are_rebuilt_by_booking(db, clock, config, configure):
    configure()
    db.query(TimeSlots).filter(TimeSlots.date == TOMORROW.isoformat()).delete()
    db.commit()

    # Availability is computed from settings, not from the rows
    result = get_availability(db, 1, TOMORROW, 2, clock.now(), config=config)
    assert len(result.slots) == 26

    book(db, clock, config)
    rows = db.query(TimeSlots).filter(TimeSlots.date == TOMORROW.isoformat()).count()
    assert rows == 26
