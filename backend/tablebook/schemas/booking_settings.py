# backend/tablebook/schemas/booking_settings.py

from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from ..services.slots.timeutils import format_time, normalize_close, parse_time


class BookingSettingsWrite(BaseModel):
    """
    Full replacement of a branch's booking settings.

    close_time not after open_time (e.g. "02:00" for an "18:00" opening,
    or "00:00") is stored as "24:00": slots never cross midnight.
    """
    open_time: str = Field(description="HH:MM")
    close_time: str = Field(description="HH:MM, 24:00 = end of day")
    interval_minutes: int = Field(90, gt=0, le=24 * 60)
    max_seats_per_slot: int = Field(25, gt=0)
    max_tables_per_slot: int = Field(10, gt=0)

    @field_validator("open_time")
    @classmethod
    def validate_open_time(cls, v: str) -> str:
        return format_time(parse_time(v))

    @field_validator("close_time")
    @classmethod
    def validate_close_time(cls, v: str) -> str:
        return format_time(parse_time(v, allow_end_of_day=True))

    @model_validator(mode="after")
    def normalize_window(self):
        open_min = parse_time(self.open_time)
        close_min = normalize_close(open_min, parse_time(self.close_time, allow_end_of_day=True))
        self.close_time = format_time(close_min)
        return self


class BookingSettingsRead(BaseModel):
    id: int
    branch_id: int

    open_time: str
    close_time: str
    interval_minutes: int
    max_seats_per_slot: int
    max_tables_per_slot: int

    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = {"from_attributes": True}
