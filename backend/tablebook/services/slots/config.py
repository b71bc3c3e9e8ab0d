# backend/tablebook/services/slots/config.py
"""
Booking engine configuration.
"""

from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache

from ...config import settings


ACTIVE_STATUSES = ("pending", "confirmed")
TERMINAL_STATUSES = ("cancelled", "completed")


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the slots/booking engine.

    Attributes:
        horizon_days: How many days ahead slots are materialized
        late_night_start_hour: From this hour "today" rolls over to tomorrow
        late_night_end_hour: Until this hour "today" rolls over to tomorrow
        closest_slots_count: How many nearby slots the ranker returns
        booking_retry_attempts: Attempts of the lock-check-insert transaction
        auto_confirm_bookings: New bookings start confirmed instead of pending
        cache_ttl_seconds: Redis TTL for cached day grids
    """
    horizon_days: int = 30
    late_night_start_hour: int = 22
    late_night_end_hour: int = 6
    closest_slots_count: int = 3
    booking_retry_attempts: int = 3
    auto_confirm_bookings: bool = True
    cache_ttl_seconds: int = 86400

    def __post_init__(self):
        """Validate configuration."""
        if self.horizon_days < 1:
            raise ValueError(f"horizon_days must be positive, got {self.horizon_days}")
        if self.booking_retry_attempts < 1:
            raise ValueError(
                f"booking_retry_attempts must be at least 1, got {self.booking_retry_attempts}"
            )
        for hour in (self.late_night_start_hour, self.late_night_end_hour):
            if not 0 <= hour <= 23:
                raise ValueError(f"late night hours must be within 0..23, got {hour}")

    def is_late_night(self, now: datetime) -> bool:
        """
        Whether `now` falls in the late-night band.

        The band wraps midnight: 22 → 6 means 22:00..23:59 and 00:00..05:59.
        """
        start, end = self.late_night_start_hour, self.late_night_end_hour
        if start == end:
            return False
        if start < end:
            return start <= now.hour < end
        return now.hour >= start or now.hour < end

    @property
    def initial_status(self) -> str:
        return "confirmed" if self.auto_confirm_bookings else "pending"


@lru_cache
def get_booking_config() -> BookingConfig:
    """Get booking configuration (singleton) built from application settings."""
    return BookingConfig(
        horizon_days=settings.slot_horizon_days,
        late_night_start_hour=settings.late_night_start_hour,
        late_night_end_hour=settings.late_night_end_hour,
        closest_slots_count=settings.closest_slots_count,
        booking_retry_attempts=settings.booking_retry_attempts,
        auto_confirm_bookings=settings.auto_confirm_bookings,
        cache_ttl_seconds=settings.cache_ttl_seconds,
    )
