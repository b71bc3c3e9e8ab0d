# backend/tablebook/schemas/bookings.py

from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

from ..services.slots.timeutils import format_time, parse_time

BookingStatus = Literal["pending", "confirmed", "cancelled", "completed"]


class BookingCreate(BaseModel):
    branch_id: int
    date: date
    time: str = Field(description="Slot start time in HH:MM format")
    party_size: int = Field(gt=0)

    user_id: Optional[int] = None
    guest_name: Optional[str] = None
    guest_phone: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Normalize to zero-padded HH:MM."""
        return format_time(parse_time(v))

    model_config = {"from_attributes": True}


class BookingCancel(BaseModel):
    reason: Optional[str] = None


class BookingRead(BaseModel):
    id: int

    branch_id: int
    date: date
    time: str
    party_size: int
    status: BookingStatus

    user_id: Optional[int] = None
    guest_name: Optional[str] = None
    guest_phone: Optional[str] = None
    notes: Optional[str] = None
    cancel_reason: Optional[str] = None

    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = {"from_attributes": True}
