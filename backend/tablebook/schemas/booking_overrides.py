# backend/tablebook/schemas/booking_overrides.py

import datetime
from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from ..services.slots.timeutils import format_time, parse_time

OverrideType = Literal["closed", "modified"]


def _normalize_time(v: Optional[str], allow_end_of_day: bool = False) -> Optional[str]:
    if v is None:
        return None
    return format_time(parse_time(v, allow_end_of_day=allow_end_of_day))


class BookingOverrideCreate(BaseModel):
    date: date
    override_type: OverrideType

    start_time: Optional[str] = None
    end_time: Optional[str] = None

    # None = inherit from settings, 0 = no capacity
    new_max_seats: Optional[int] = Field(None, ge=0)
    new_max_tables: Optional[int] = Field(None, ge=0)

    note: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_time(v)

    @field_validator("end_time")
    @classmethod
    def validate_end_time(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_time(v, allow_end_of_day=True)

    @model_validator(mode="after")
    def validate_window(self):
        if self.start_time and self.end_time:
            if parse_time(self.end_time, allow_end_of_day=True) <= parse_time(self.start_time):
                raise ValueError("end_time must be after start_time")
        return self

    model_config = {"from_attributes": True}


class BookingOverrideUpdate(BaseModel):
    """Partial update; only fields present in the body are applied."""
    date: Optional[datetime.date] = None
    override_type: Optional[OverrideType] = None

    start_time: Optional[str] = None
    end_time: Optional[str] = None

    new_max_seats: Optional[int] = Field(None, ge=0)
    new_max_tables: Optional[int] = Field(None, ge=0)

    note: Optional[str] = None

    @field_validator("date", "override_type")
    @classmethod
    def not_null(cls, v):
        # May be omitted, but never cleared
        if v is None:
            raise ValueError("may not be null")
        return v

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_time(v)

    @field_validator("end_time")
    @classmethod
    def validate_end_time(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_time(v, allow_end_of_day=True)


class BookingOverrideRead(BaseModel):
    id: int
    branch_id: int

    date: date
    override_type: OverrideType

    start_time: Optional[str] = None
    end_time: Optional[str] = None
    new_max_seats: Optional[int] = None
    new_max_tables: Optional[int] = None
    note: Optional[str] = None

    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = {"from_attributes": True}
