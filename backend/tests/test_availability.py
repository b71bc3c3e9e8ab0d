from datetime import date, datetime

import pytest

from tablebook.errors import InvalidFormat, SettingsNotFound
from tablebook.schemas.booking_overrides import BookingOverrideCreate
from tablebook.services import override_service
from tablebook.services.slots.availability import get_availability, get_calendar
from tablebook.services.slots.timeutils import parse_time

TODAY = date(2026, 10, 17)
TOMORROW = date(2026, 10, 18)


def times(result):
    return [slot.time_str for slot in result.slots]


def close_day(db, day, **kwargs):
    override_service.create_override(
        db, 1, BookingOverrideCreate(date=day, override_type="closed", **kwargs)
    )


def test_full_day(db, clock, config, configure):
    configure()
    result = get_availability(db, 1, TOMORROW, 2, clock.now(), config=config)

    assert result.date == TOMORROW
    assert not result.closed
    assert not result.rolled_over
    assert len(result.slots) == 26
    assert times(result)[0] == "09:00"
    assert times(result)[-1] == "21:30"
    assert result.has_availability
    assert result.slots[0].display_time == "9:00 AM"


def test_today_skips_started_slots(db, clock, config, configure):
    configure()
    clock.set(datetime(2026, 10, 17, 12, 10))
    result = get_availability(db, 1, TODAY, 2, clock.now(), config=config)
    assert times(result)[0] == "12:30"


def test_slot_starting_now_is_offered(db, clock, config, configure):
    configure()
    clock.set(datetime(2026, 10, 17, 12, 0))
    assert times(get_availability(db, 1, TODAY, 2, clock.now(), config=config))[0] == "12:00"

    clock.set(datetime(2026, 10, 17, 12, 0, 30))
    assert times(get_availability(db, 1, TODAY, 2, clock.now(), config=config))[0] == "12:30"


def test_today_bound_follows_opening_grid(db, clock, config, configure):
    configure(open_time="09:15", close_time="22:00", interval_minutes=60)
    clock.set(datetime(2026, 10, 17, 12, 5))
    result = get_availability(db, 1, TODAY, 2, clock.now(), config=config)
    assert times(result)[0] == "12:15"


def test_after_closing_today_is_empty_not_closed(db, clock, config, configure):
    configure(close_time="21:00")
    clock.set(datetime(2026, 10, 17, 21, 30))
    result = get_availability(db, 1, TODAY, 2, clock.now(), config=config)
    assert result.slots == []
    assert not result.closed
    assert not result.has_availability


def test_past_date_has_no_slots(db, clock, config, configure):
    configure()
    result = get_availability(db, 1, date(2026, 10, 10), 2, clock.now(), config=config)
    assert result.slots == []
    assert not result.closed


def test_closed_override(db, clock, config, configure):
    configure()
    close_day(db, TOMORROW, note="Private event")

    for party_size in (1, 8):
        result = get_availability(
            db, 1, TOMORROW, party_size, clock.now(),
            requested_time=parse_time("19:00"), config=config,
        )
        assert result.closed
        assert result.reason == "closed"
        assert result.note == "Private event"
        assert result.slots == []
        assert result.requested_time_available is False
        assert result.closest == []


def test_zero_capacity_day_is_open_but_unavailable(db, clock, config, configure):
    configure()
    override_service.create_override(
        db, 1, BookingOverrideCreate(date=TOMORROW, override_type="modified", new_max_seats=0)
    )
    result = get_availability(db, 1, TOMORROW, 1, clock.now(), config=config)
    assert not result.closed
    assert len(result.slots) == 26
    assert not result.has_availability


def test_late_night_rolls_over_to_tomorrow(db, clock, config, configure):
    configure()
    clock.set(datetime(2026, 10, 17, 23, 0))
    result = get_availability(db, 1, TODAY, 2, clock.now(), config=config)

    assert result.rolled_over
    assert result.requested_date == TODAY
    assert result.date == TOMORROW
    assert times(result)[0] == "09:00"
    assert len(result.slots) == 26


def test_rollover_respects_closed_tomorrow(db, clock, config, configure):
    configure()
    close_day(db, TOMORROW)
    clock.set(datetime(2026, 10, 17, 23, 0))
    result = get_availability(db, 1, TODAY, 2, clock.now(), config=config)

    assert result.rolled_over
    assert result.closed
    assert result.slots == []


def test_early_morning_rolls_over(db, clock, config, configure):
    configure()
    clock.set(datetime(2026, 10, 17, 1, 30))
    result = get_availability(db, 1, TODAY, 2, clock.now(), config=config)
    assert result.rolled_over
    assert result.date == TOMORROW


def test_no_rollover_for_future_dates(db, clock, config, configure):
    configure()
    clock.set(datetime(2026, 10, 17, 23, 0))
    result = get_availability(db, 1, TOMORROW, 2, clock.now(), config=config)
    assert not result.rolled_over
    assert result.date == TOMORROW


def test_requested_time_and_closest(db, clock, config, configure):
    configure()
    result = get_availability(
        db, 1, TOMORROW, 2, clock.now(), requested_time=parse_time("18:10"), config=config
    )
    assert result.requested_time_available is False
    assert [slot.time_str for slot in result.closest] == ["18:00", "18:30", "19:00"]

    exact = get_availability(
        db, 1, TOMORROW, 2, clock.now(), requested_time=parse_time("18:00"), config=config
    )
    assert exact.requested_time_available is True
    assert [slot.time_str for slot in exact.closest] == ["17:30", "18:00", "18:30"]


def test_unconfigured_branch(db, clock, config):
    with pytest.raises(SettingsNotFound):
        get_availability(db, 7, TOMORROW, 2, clock.now(), config=config)


def test_party_size_must_be_positive(db, clock, config, configure):
    configure()
    with pytest.raises(InvalidFormat):
        get_availability(db, 1, TOMORROW, 0, clock.now(), config=config)


def test_calendar(db, clock, config, configure):
    configure()
    close_day(db, TOMORROW)

    days = get_calendar(
        db, 1, date(2026, 10, 1), date(2026, 10, 20), 2, clock.now(), config=config
    )
    assert [day.date for day in days] == [
        TODAY, TOMORROW, date(2026, 10, 19), date(2026, 10, 20),
    ]
    today, tomorrow = days[0], days[1]
    # 12:00 .. 21:30
    assert today.open_slots_count == 20
    assert tomorrow.closed
    assert not tomorrow.has_availability
    assert days[2].open_slots_count == 26


def test_calendar_clamped_to_horizon(db, clock, config, configure):
    configure()
    days = get_calendar(db, 1, None, date(2027, 6, 1), 2, clock.now(), config=config)
    assert days[0].date == TODAY
    assert days[-1].date == date(2026, 11, 16)
