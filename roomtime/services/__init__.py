"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .attendance import AttendanceRow, AttendanceService, AttendanceSourceProtocol
from .booking import BookingService, BookingSubmitterProtocol, ReservationSourceProtocol
from .events import BOOKINGS_CHANGED, RefreshChannel

__all__ = [
    "BOOKINGS_CHANGED",
    "AttendanceRow",
    "AttendanceService",
    "AttendanceSourceProtocol",
    "BookingService",
    "BookingSubmitterProtocol",
    "RefreshChannel",
    "ReservationSourceProtocol",
]
