# backend/tablebook/schemas/slots.py
"""
Pydantic schemas for availability API.
"""

from datetime import date
from pydantic import BaseModel


class SlotInfo(BaseModel):
    """A single slot with remaining capacity."""
    time: str  # "HH:MM"
    display_time: str  # "h:MM AM/PM"
    remaining_seats: int
    remaining_tables: int
    is_available: bool

    model_config = {"from_attributes": True}


class AvailabilityResponse(BaseModel):
    """Slots of a branch for one day and party size."""
    branch_id: int
    requested_date: date
    date: date  # date the slots belong to; differs after late-night rollover
    party_size: int

    closed: bool
    reason: str | None = None
    note: str | None = None
    rolled_over: bool = False
    has_availability: bool

    slots: list[SlotInfo]

    requested_time: str | None = None
    requested_time_available: bool | None = None
    closest: list[SlotInfo] = []

    model_config = {"from_attributes": True}


class CalendarDayStatus(BaseModel):
    """Status of a single day in calendar."""
    date: date
    closed: bool
    has_availability: bool
    open_slots_count: int = 0

    model_config = {"from_attributes": True}


class AvailabilityCalendarResponse(BaseModel):
    """Response with calendar of bookable days."""
    branch_id: int
    party_size: int
    start_date: date
    end_date: date
    days: list[CalendarDayStatus]

    horizon_days: int

    model_config = {"from_attributes": True}


class RegenerateResponse(BaseModel):
    branch_id: int
    start_date: date
    days: int
    created: int
    updated: int
    deleted: int
    invalidated_keys: int
