# backend/tablebook/routers/booking_overrides.py

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..redis_client import get_redis
from ..schemas.booking_overrides import (
    BookingOverrideCreate,
    BookingOverrideRead,
    BookingOverrideUpdate,
)
from ..services import override_service

router = APIRouter(tags=["booking_overrides"])


@router.get("/branches/{branch_id}/overrides", response_model=list[BookingOverrideRead])
def list_booking_overrides(
    branch_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
):
    return override_service.list_overrides(db, branch_id, start_date, end_date)


@router.post(
    "/branches/{branch_id}/overrides",
    response_model=BookingOverrideRead,
    status_code=status.HTTP_201_CREATED,
)
def create_booking_override(
    branch_id: int,
    data: BookingOverrideCreate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    return override_service.create_override(db, branch_id, data, redis=redis)


@router.get("/overrides/{id}", response_model=BookingOverrideRead)
def get_booking_override(id: int, db: Session = Depends(get_db)):
    return override_service.get_override(db, id)


@router.patch("/overrides/{id}", response_model=BookingOverrideRead)
def patch_booking_override(
    id: int,
    data: BookingOverrideUpdate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    return override_service.update_override(db, id, data, redis=redis)


@router.delete("/overrides/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_booking_override(
    id: int,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    override_service.delete_override(db, id, redis=redis)
