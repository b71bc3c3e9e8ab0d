from .generated import Base, BookingOverrides, BookingSettings, Bookings, TimeSlots, metadata

__all__ = [
    "Base",
    "metadata",
    "BookingSettings",
    "BookingOverrides",
    "TimeSlots",
    "Bookings",
]
