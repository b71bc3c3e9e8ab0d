# backend/tablebook/services/slots/redis_store.py
"""
Redis cache of resolved day grids.

Key format: slots:day:{branch_id}:{date}
Value: Hash where field = "HH:MM", value = "{max_seats}:{max_tables}",
       plus META_FIELD holding the effective window as JSON.

A closed day is stored as META_FIELD only ("calculated, zero slots").
Capacity usage is never cached: it is joined from bookings on every read.
"""

import json
from datetime import date
from redis import Redis

from .calculator import DayGrid, SlotSpec
from .config import BookingConfig, get_booking_config
from .overrides import EffectiveWindow
from .timeutils import parse_time


META_FIELD = "__window__"


class SlotsRedisStore:
    """Redis storage wrapper for day grids."""

    KEY_PREFIX = "slots:day"

    def __init__(self, redis: Redis, config: BookingConfig | None = None):
        self.redis = redis
        self.config = config or get_booking_config()

    def _key(self, branch_id: int, dt: date) -> str:
        return f"{self.KEY_PREFIX}:{branch_id}:{dt.isoformat()}"

    # ── Write ────────────────────────────────────────────────────────────

    def store_day_grid(self, branch_id: int, grid: DayGrid) -> None:
        """Store a calculated grid (replaces any previous one)."""
        self.store_multiple_days(branch_id, [grid])

    def store_multiple_days(self, branch_id: int, grids: list[DayGrid]) -> None:
        """Batch store grids via pipeline."""
        if not grids:
            return

        pipe = self.redis.pipeline()
        for grid in grids:
            key = self._key(branch_id, grid.window.date)
            pipe.delete(key)
            pipe.hset(key, mapping=_encode(grid))
            pipe.expire(key, self.config.cache_ttl_seconds)
        pipe.execute()

    # ── Read ─────────────────────────────────────────────────────────────

    def get_day_grid(self, branch_id: int, dt: date) -> DayGrid | None:
        """
        Get a cached grid.

        Returns:
            DayGrid, or None on cache miss.
        """
        raw = self.redis.hgetall(self._key(branch_id, dt))
        if not raw:
            return None
        return _decode(dt, raw)

    # ── Delete ───────────────────────────────────────────────────────────

    def delete_day_grids(
        self,
        branch_id: int,
        dates: list[date] | None = None,
    ) -> int:
        """
        Delete cached grids.

        Args:
            branch_id: Branch ID
            dates: Specific dates, or None to delete all for branch.

        Returns:
            Number of deleted keys.
        """
        if dates:
            keys = [self._key(branch_id, dt) for dt in dates]
        else:
            pattern = f"{self.KEY_PREFIX}:{branch_id}:*"
            keys = self.redis.keys(pattern)

        if not keys:
            return 0

        return self.redis.delete(*keys)


# ── Encoding ─────────────────────────────────────────────────────────────


def _encode(grid: DayGrid) -> dict[str, str]:
    window = grid.window
    mapping = {
        META_FIELD: json.dumps({
            "open_time": window.open_time,
            "close_time": window.close_time,
            "interval_minutes": window.interval_minutes,
            "max_seats": window.max_seats,
            "max_tables": window.max_tables,
            "closed": window.closed,
            "reason": window.reason,
            "note": window.note,
        }),
    }
    for slot in grid.slots:
        mapping[slot.time_str] = f"{slot.max_seats}:{slot.max_tables}"
    return mapping


def _decode(dt: date, raw: dict) -> DayGrid:
    raw = {
        (k.decode() if isinstance(k, bytes) else k): (v.decode() if isinstance(v, bytes) else v)
        for k, v in raw.items()
    }
    meta = json.loads(raw.pop(META_FIELD))
    window = EffectiveWindow(date=dt, **meta)

    slots = []
    for time_str, value in raw.items():
        seats, tables = value.split(":")
        slots.append(SlotSpec(parse_time(time_str), int(seats), int(tables)))
    slots.sort(key=lambda s: s.time)

    return DayGrid(window=window, slots=tuple(slots))
