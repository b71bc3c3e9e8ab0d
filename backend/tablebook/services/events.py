"""
backend/tablebook/services/events.py

Event emitter: pushes booking lifecycle events to a Redis queue for
external consumers (notifications, dashboards).

Queue:
- events:bookings: booking_created / booking_confirmed /
  booking_cancelled / booking_completed
"""

import json
import time
import logging

from redis import Redis

logger = logging.getLogger(__name__)

BOOKING_EVENTS_QUEUE = "events:bookings"


def emit_event(redis: Redis | None, event_type: str, payload: dict) -> None:
    """
    Emit a booking event.

    Pushed to Redis list `events:bookings`. Without Redis the event is
    only logged; a failed push never fails the booking operation.
    """
    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    if redis is None:
        logger.debug(f"Event not queued (no redis): {event_type}")
        return
    try:
        redis.rpush(BOOKING_EVENTS_QUEUE, json.dumps(event))
        logger.info(f"Event emitted: {event_type} → {BOOKING_EVENTS_QUEUE}")
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")


def booking_payload(booking) -> dict:
    return {
        "booking_id": booking.id,
        "branch_id": booking.branch_id,
        "date": booking.date,
        "time": booking.time,
        "party_size": booking.party_size,
        "status": booking.status,
    }
