from datetime import date
from types import SimpleNamespace

from tablebook.services.slots.calculator import calculate_day_grid
from tablebook.services.slots.overrides import resolve

DAY = date(2026, 10, 20)


def make_settings(**kwargs):
    values = dict(
        open_time="09:00",
        close_time="22:00",
        interval_minutes=30,
        max_seats_per_slot=40,
        max_tables_per_slot=12,
    )
    values.update(kwargs)
    return SimpleNamespace(**values)


def make_override(override_type="modified", **kwargs):
    values = dict(
        override_type=override_type,
        start_time=None,
        end_time=None,
        new_max_seats=None,
        new_max_tables=None,
        note=None,
    )
    values.update(kwargs)
    return SimpleNamespace(**values)


def test_without_override_uses_settings():
    window = resolve(DAY, make_settings())
    assert (window.open_time, window.close_time) == (540, 1320)
    assert (window.max_seats, window.max_tables) == (40, 12)
    assert not window.closed


def test_closing_past_midnight_is_cut_at_end_of_day():
    window = resolve(DAY, make_settings(open_time="18:00", close_time="02:00"))
    assert window.close_time == 1440

    grid = calculate_day_grid(DAY, make_settings(open_time="18:00", close_time="02:00"))
    assert grid.slots[-1].time_str == "23:30"


def test_closed_override():
    grid = calculate_day_grid(DAY, make_settings(), make_override("closed", note="Private event"))
    assert grid.closed
    assert grid.slots == ()
    assert grid.window.reason == "closed"
    assert grid.window.note == "Private event"


def test_modified_window_and_capacity():
    override = make_override(start_time="12:00", end_time="15:00", new_max_seats=10)
    grid = calculate_day_grid(DAY, make_settings(), override)

    assert [s.time_str for s in grid.slots] == [
        "12:00", "12:30", "13:00", "13:30", "14:00", "14:30",
    ]
    assert {(s.max_seats, s.max_tables) for s in grid.slots} == {(10, 12)}


def test_zero_capacity_is_not_inherited():
    override = make_override(new_max_seats=0, new_max_tables=0)
    window = resolve(DAY, make_settings(), override)
    assert (window.max_seats, window.max_tables) == (0, 0)
    assert not window.closed


def test_start_past_base_close_gives_empty_day():
    override = make_override(start_time="22:30")
    grid = calculate_day_grid(DAY, make_settings(), override)
    assert not grid.closed
    assert grid.slots == ()


def test_modified_only_end():
    override = make_override(end_time="12:00")
    grid = calculate_day_grid(DAY, make_settings(), override)
    assert grid.slots[0].time_str == "09:00"
    assert grid.slots[-1].time_str == "11:30"


def test_modified_end_before_base_opening_gives_empty_day():
    override = make_override(end_time="08:00")
    grid = calculate_day_grid(DAY, make_settings(), override)
    assert not grid.closed
    assert grid.slots == ()

    window = resolve(DAY, make_settings(), override)
    assert window.close_time == window.open_time == 540
