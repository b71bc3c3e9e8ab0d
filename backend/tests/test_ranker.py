from tablebook.services.slots.ranker import penalized_distance, rank_closest
from tablebook.services.slots.timeutils import format_time, parse_time


def times(*values):
    return [parse_time(v) for v in values]


def test_later_slots_preferred():
    slots = times("16:30", "17:30", "18:00", "18:30", "20:00")
    closest = rank_closest(slots, parse_time("18:00"), 3)
    assert [format_time(t) for t in closest] == ["17:30", "18:00", "18:30"]


def test_before_penalty():
    assert penalized_distance(1080, 1050) == 60
    assert penalized_distance(1080, 1110) == 30
    assert penalized_distance(1080, 1080) == 0


def test_tie_goes_to_earlier_slot():
    # 09:30 is 30m early (60 penalized), 11:00 is 60m late
    closest = rank_closest(times("09:30", "11:00"), parse_time("10:00"), 1)
    assert closest == [parse_time("09:30")]


def test_result_is_chronological():
    slots = times("12:00", "19:00", "19:30", "20:00", "22:00")
    closest = rank_closest(slots, parse_time("20:00"), 3)
    # 19:00 and 22:00 tie at 120; the earlier one wins
    assert closest == times("19:00", "19:30", "20:00")


def test_fewer_slots_than_count():
    assert rank_closest(times("12:00"), parse_time("18:00"), 3) == times("12:00")
    assert rank_closest([], parse_time("18:00"), 3) == []
    assert rank_closest(times("12:00"), parse_time("18:00"), 0) == []


def test_key_function():
    slots = [{"t": 600}, {"t": 660}, {"t": 720}]
    closest = rank_closest(slots, 700, 2, key=lambda s: s["t"])
    assert closest == [{"t": 660}, {"t": 720}]
