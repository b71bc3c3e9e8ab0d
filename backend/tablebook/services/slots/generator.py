# backend/tablebook/services/slots/generator.py
"""
Canonical slot sequence for one day.
"""


def generate_slots(open_time: int, close_time: int, interval_minutes: int) -> list[int]:
    """
    Slot start-times (minutes since midnight) from open_time to close_time.

    A slot must fully fit before closing: the last start is the last grid
    point <= close_time - interval_minutes. Yields
    floor((close_time - open_time) / interval_minutes) slots, or none when
    the window is shorter than one interval.
    """
    if interval_minutes <= 0:
        raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")

    slots: list[int] = []
    last_start = close_time - interval_minutes
    t = open_time
    while t <= last_start:
        slots.append(t)
        t += interval_minutes
    return slots
