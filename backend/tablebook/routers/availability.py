# backend/tablebook/routers/availability.py
"""
Availability API endpoints.

GET /availability/{branch_id}          - Slots of one day for a party size
GET /availability/{branch_id}/calendar - Bookable days over the horizon
"""

from datetime import date
from fastapi import APIRouter, Depends, Query
from redis import Redis
from sqlalchemy.orm import Session

from ..clock import Clock, get_clock
from ..database import get_db
from ..redis_client import get_redis
from ..schemas.slots import (
    AvailabilityCalendarResponse,
    AvailabilityResponse,
    CalendarDayStatus,
    SlotInfo,
)
from ..services.slots import get_availability, get_booking_config, get_calendar
from ..services.slots.availability import SlotAvailability
from ..services.slots.timeutils import format_time, parse_time


router = APIRouter(prefix="/availability", tags=["availability"])


def _slot_info(slot: SlotAvailability) -> SlotInfo:
    return SlotInfo(
        time=slot.time_str,
        display_time=slot.display_time,
        remaining_seats=slot.remaining_seats,
        remaining_tables=slot.remaining_tables,
        is_available=slot.is_available,
    )


@router.get("/{branch_id}", response_model=AvailabilityResponse)
def get_branch_availability(
    branch_id: int,
    target_date: date = Query(..., alias="date"),
    party_size: int = Query(..., gt=0),
    requested_time: str | None = Query(None, alias="time", description="Desired time HH:MM"),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    redis: Redis | None = Depends(get_redis),
):
    """Slots with remaining capacity; `closed` distinguishes a closed day from no capacity."""
    requested_minutes = parse_time(requested_time) if requested_time else None

    result = get_availability(
        db,
        branch_id,
        target_date,
        party_size,
        clock.now(),
        requested_time=requested_minutes,
        redis=redis,
    )

    return AvailabilityResponse(
        branch_id=result.branch_id,
        requested_date=result.requested_date,
        date=result.date,
        party_size=result.party_size,
        closed=result.closed,
        reason=result.reason,
        note=result.note,
        rolled_over=result.rolled_over,
        has_availability=result.has_availability,
        slots=[_slot_info(slot) for slot in result.slots],
        requested_time=format_time(requested_minutes) if requested_minutes is not None else None,
        requested_time_available=result.requested_time_available,
        closest=[_slot_info(slot) for slot in result.closest],
    )


@router.get("/{branch_id}/calendar", response_model=AvailabilityCalendarResponse)
def get_branch_calendar(
    branch_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    party_size: int = Query(1, gt=0),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    redis: Redis | None = Depends(get_redis),
):
    """Calendar of days with bookable slots (clamped to today..today + horizon)."""
    config = get_booking_config()
    days = get_calendar(
        db, branch_id, start_date, end_date, party_size, clock.now(),
        redis=redis, config=config,
    )

    return AvailabilityCalendarResponse(
        branch_id=branch_id,
        party_size=party_size,
        start_date=days[0].date,
        end_date=days[-1].date,
        days=[
            CalendarDayStatus(
                date=day.date,
                closed=day.closed,
                has_availability=day.has_availability,
                open_slots_count=day.open_slots_count,
            )
            for day in days
        ],
        horizon_days=config.horizon_days,
    )
