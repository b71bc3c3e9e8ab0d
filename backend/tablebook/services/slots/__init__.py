# backend/tablebook/services/slots/__init__.py
"""
Slots calculation module.

Level 1: Day grid of a branch (settings + override; cached in Redis,
         materialized in time_slots)
Level 2: Availability (grid joined with live capacity usage)
"""

from .config import BookingConfig, get_booking_config
from .generator import generate_slots
from .overrides import EffectiveWindow, resolve
from .calculator import DayGrid, SlotSpec, calculate_day_grid, load_day_grid
from .ledger import Remaining, Usage, remaining, reserve
from .materializer import regenerate_date, regenerate_range
from .redis_store import SlotsRedisStore
from .invalidator import invalidate_branch_cache
from .ranker import rank_closest
from .availability import AvailabilityResult, get_availability, get_calendar

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "generate_slots",
    "EffectiveWindow",
    "resolve",
    "DayGrid",
    "SlotSpec",
    "calculate_day_grid",
    "load_day_grid",
    "Remaining",
    "Usage",
    "remaining",
    "reserve",
    "regenerate_date",
    "regenerate_range",
    "SlotsRedisStore",
    "invalidate_branch_cache",
    "rank_closest",
    "AvailabilityResult",
    "get_availability",
    "get_calendar",
]
