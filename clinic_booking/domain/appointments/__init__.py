"""Appointments domain - booking, slot conflicts, status changes and reminders"""

from .router import router
from .service import BookingService
from .status import AppointmentStatus, derive_display_status

__all__ = ["router", "BookingService", "AppointmentStatus", "derive_display_status"]
