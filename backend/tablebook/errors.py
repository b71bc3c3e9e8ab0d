# backend/tablebook/errors.py
"""
Domain errors of the booking core.

All of them are expected outcomes reported to the caller as structured
results: the exception handler in main.py renders
{"code": ..., "detail": ..., **extra} with the error's status code.
"""


class BookingError(Exception):
    code = "booking_error"
    status_code = 400
    message = "Booking error"

    def __init__(self, message: str | None = None, **extra):
        self.detail = message or self.message
        self.extra = extra
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {"code": self.code, "detail": self.detail, **self.extra}


class InvalidFormat(BookingError, ValueError):
    code = "invalid_format"
    status_code = 422
    message = "Malformed time or date"


class SettingsNotFound(BookingError):
    code = "settings_not_found"
    status_code = 404
    message = "No availability configured for this branch"


class OverrideConflict(BookingError):
    code = "override_conflict"
    status_code = 409
    message = "An override already exists for this branch and date"


class OverrideNotFound(BookingError):
    code = "override_not_found"
    status_code = 404
    message = "Override not found"


class CapacityExceeded(BookingError):
    code = "capacity_exceeded"
    status_code = 409
    message = "Not enough seats or tables left for this slot"


class SlotUnavailable(BookingError):
    code = "slot_unavailable"
    status_code = 409
    message = "Requested time is not a bookable slot"


class SlotContention(BookingError):
    code = "slot_contention"
    status_code = 503
    message = "Slot is busy, please retry"


class BookingNotFound(BookingError):
    code = "not_found"
    status_code = 404
    message = "Booking not found"


class AlreadyTerminal(BookingError):
    code = "already_terminal"
    status_code = 409
    message = "Booking is already cancelled or completed"
