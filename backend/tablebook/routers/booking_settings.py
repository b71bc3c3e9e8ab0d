# backend/tablebook/routers/booking_settings.py
# One settings record per branch: PUT replaces it

from fastapi import APIRouter, Depends
from redis import Redis
from sqlalchemy.orm import Session

from ..clock import Clock, get_clock
from ..database import get_db
from ..redis_client import get_redis
from ..schemas.booking_settings import (
    BookingSettingsRead,
    BookingSettingsWrite,
)
from ..services import settings_service

router = APIRouter(prefix="/branches", tags=["booking_settings"])


@router.get("/{branch_id}/settings", response_model=BookingSettingsRead)
def get_booking_settings(branch_id: int, db: Session = Depends(get_db)):
    return settings_service.get_settings(db, branch_id)


@router.put("/{branch_id}/settings", response_model=BookingSettingsRead)
def put_booking_settings(
    branch_id: int,
    data: BookingSettingsWrite,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    redis: Redis | None = Depends(get_redis),
):
    return settings_service.configure_settings(db, branch_id, data, clock.now(), redis=redis)
