# backend/tablebook/routers/slots.py
"""
Slots admin endpoints.

POST /slots/regenerate - Rebuild materialized slots of a branch
POST /slots/invalidate - Drop cached day grids of a branch
"""

from datetime import date
from fastapi import APIRouter, Depends, Query
from redis import Redis
from sqlalchemy.orm import Session

from ..clock import Clock, get_clock
from ..database import get_db
from ..redis_client import get_redis
from ..schemas.slots import RegenerateResponse
from ..services.slots import get_booking_config, invalidate_branch_cache, regenerate_range


router = APIRouter(prefix="/slots", tags=["slots"])


@router.post("/regenerate", response_model=RegenerateResponse)
def regenerate_slots(
    branch_id: int,
    start_date: date | None = None,
    days: int | None = Query(None, gt=0, le=366),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    redis: Redis | None = Depends(get_redis),
):
    """Regenerate materialized slots (defaults: today, horizon_days)."""
    config = get_booking_config()
    start_date = start_date or clock.now().date()
    days = days or config.horizon_days

    stats = regenerate_range(db, branch_id, start_date, days)
    db.commit()
    deleted_keys = invalidate_branch_cache(redis, branch_id)

    return RegenerateResponse(
        branch_id=branch_id,
        start_date=start_date,
        days=days,
        created=stats.created,
        updated=stats.updated,
        deleted=stats.deleted,
        invalidated_keys=deleted_keys,
    )


@router.post("/invalidate")
def invalidate_slots_cache(
    branch_id: int,
    dates: list[date] | None = Query(None),
    redis: Redis | None = Depends(get_redis),
):
    """Manually invalidate slots cache for branch (admin endpoint)."""
    deleted = invalidate_branch_cache(redis, branch_id, dates)

    return {
        "branch_id": branch_id,
        "deleted_keys": deleted,
        "dates": [d.isoformat() for d in dates] if dates else "all",
    }
