# backend/tablebook/routers/bookings.py
# DELETE = 405: bookings are cancelled, never removed

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from redis import Redis
from sqlalchemy.orm import Session

from ..clock import Clock, get_clock
from ..database import get_db
from ..redis_client import get_redis
from ..schemas.bookings import (
    BookingCancel,
    BookingCreate,
    BookingRead,
    BookingStatus,
)
from ..services import booking_service

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("/", response_model=list[BookingRead])
def list_bookings(
    branch_id: Optional[int] = None,
    target_date: Optional[date] = Query(None, alias="date"),
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    return booking_service.list_branch_bookings(db, branch_id, target_date, booking_status)


@router.get("/{id}", response_model=BookingRead)
def get_booking(id: int, db: Session = Depends(get_db)):
    return booking_service.get_booking(db, id)


@router.post("/", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    redis: Redis | None = Depends(get_redis),
):
    return booking_service.create_booking(db, data, clock.now(), redis=redis)


@router.post("/{id}/cancel", response_model=BookingRead)
def cancel_booking(
    id: int,
    data: BookingCancel | None = None,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    reason = data.reason if data else None
    return booking_service.cancel_booking(db, id, reason=reason, redis=redis)


@router.post("/{id}/confirm", response_model=BookingRead)
def confirm_booking(
    id: int,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    return booking_service.confirm_booking(db, id, redis=redis)


@router.post("/{id}/complete", response_model=BookingRead)
def complete_booking(
    id: int,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    return booking_service.complete_booking(db, id, redis=redis)


@router.delete("/{id}")
def delete_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )
