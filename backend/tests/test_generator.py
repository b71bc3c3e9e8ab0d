import pytest

from tablebook.services.slots.generator import generate_slots


def test_ninety_minute_grid():
    slots = generate_slots(540, 1380, 90)
    assert len(slots) == 9
    assert slots[0] == 540
    # 21:00 + 90m ends at 22:30; 22:30 would overrun the 23:00 close
    assert slots[-1] == 1260


@pytest.mark.parametrize("open_time, close_time, interval", [
    (540, 1380, 90),
    (540, 1320, 30),
    (660, 900, 45),
    (0, 1440, 15),
    (1080, 1440, 120),
    (600, 601, 1),
])
def test_slot_count_and_fit(open_time, close_time, interval):
    slots = generate_slots(open_time, close_time, interval)
    assert len(slots) == (close_time - open_time) // interval
    assert all(t + interval <= close_time for t in slots)
    assert all(b - a == interval for a, b in zip(slots, slots[1:]))


def test_exact_fit_keeps_last_slot():
    assert generate_slots(540, 600, 60) == [540]


def test_window_shorter_than_interval():
    assert generate_slots(540, 580, 60) == []
    assert generate_slots(540, 540, 30) == []


def test_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        generate_slots(540, 1380, 0)
