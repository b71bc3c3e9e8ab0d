# backend/tablebook/services/slots/ranker.py
"""
Closest-slot ranking.

Picks the few slots nearest to a desired time for compact display.
Slots before the target count double, so a diner asking for 18:00
sees 18:30 ahead of 17:30.
"""

from typing import Callable, Iterable, TypeVar

from .timeutils import minutes_between

T = TypeVar("T")

BEFORE_PENALTY = 2


def penalized_distance(target_time: int, slot_time: int) -> int:
    offset = minutes_between(target_time, slot_time)
    if offset < 0:
        return -offset * BEFORE_PENALTY
    return offset


def rank_closest(
    slots: Iterable[T],
    target_time: int,
    count: int,
    key: Callable[[T], int] | None = None,
) -> list[T]:
    """
    Up to `count` slots closest to target_time, in chronological order.

    Args:
        slots: Slot start-times, or objects with `key` giving minutes
        target_time: Desired time, minutes since midnight
        count: Maximum number of slots to return

    Ties on penalized distance go to the earlier slot. No slots (or a
    non-positive count) gives an empty list.
    """
    if count <= 0:
        return []

    key = key or (lambda s: s)
    candidates = list(slots)

    by_distance = sorted(
        candidates,
        key=lambda s: (penalized_distance(target_time, key(s)), key(s)),
    )
    return sorted(by_distance[:count], key=key)
