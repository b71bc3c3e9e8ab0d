# backend/tablebook/redis_client.py
"""
Shared Redis client.

Redis is optional: without REDIS_URL the day-grid cache and the event
queue are disabled and everything is read from the database.
"""

from redis import Redis

from .config import settings


def build_redis(url: str | None) -> Redis | None:
    if not url:
        return None
    return Redis.from_url(url, decode_responses=True, socket_timeout=2.0)


redis_client: Redis | None = build_redis(settings.redis_url)


def get_redis() -> Redis | None:
    """FastAPI dependency."""
    return redis_client
