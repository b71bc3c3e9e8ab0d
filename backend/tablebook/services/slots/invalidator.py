# backend/tablebook/services/slots/invalidator.py
"""
Cache invalidation for branch day grids.

Triggers:
✓ Branch booking settings changed → invalidate all dates
✓ Branch override created/updated/deleted → invalidate affected dates

Does NOT trigger:
✗ Booking created/cancelled (capacity is joined on-the-fly)
"""

import logging
from datetime import date, timedelta
from redis import Redis
from redis.exceptions import RedisError

from .redis_store import SlotsRedisStore

logger = logging.getLogger(__name__)


def invalidate_branch_cache(
    redis: Redis | None,
    branch_id: int,
    dates: list[date] | None = None,
) -> int:
    """
    Invalidate cached grids for branch.

    Args:
        redis: Redis client (None = caching disabled)
        branch_id: Branch ID
        dates: List of specific dates to invalidate,
               or None to invalidate all cached dates

    Returns:
        Number of deleted cache keys
    """
    if redis is None:
        return 0
    store = SlotsRedisStore(redis)
    try:
        return store.delete_day_grids(branch_id, dates)
    except RedisError:
        logger.exception(f"Failed to invalidate slots cache for branch={branch_id}")
        return 0


def get_affected_dates(date_start: date, date_end: date) -> list[date]:
    """Every date of the closed range between the two bounds, in either order."""
    first, last = sorted((date_start, date_end))
    return [first + timedelta(days=n) for n in range((last - first).days + 1)]
