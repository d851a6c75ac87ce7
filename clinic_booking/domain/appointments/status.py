"""
Appointment status state machine

    Pending -> Approved -> Done
    Pending -> Cancelled

Cancelled and Done are terminal. Nothing moves an appointment automatically;
"Expired" is only a display label worked out at read time.
"""

from datetime import datetime
from enum import Enum

from ...exceptions import InvalidTransition
from ...utils.formatters import combine_date_and_time


class AppointmentStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    CANCELLED = "Cancelled"
    DONE = "Done"


EXPIRED = "Expired"

ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({AppointmentStatus.APPROVED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.APPROVED: frozenset({AppointmentStatus.DONE}),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.DONE: frozenset(),
}

# Appointments in these states hold their slot's reminders
REMINDER_STATUSES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.APPROVED})


def can_transition(current: AppointmentStatus, requested: AppointmentStatus) -> bool:
    return requested in ALLOWED_TRANSITIONS.get(current, frozenset())


def transition(appointment, new_status: AppointmentStatus):
    """Move an appointment to ``new_status``; the caller persists it"""
    current = AppointmentStatus(appointment.status)
    if not can_transition(current, new_status):
        raise InvalidTransition(current.value, new_status.value)
    appointment.status = new_status.value
    return appointment


def is_terminal(status: AppointmentStatus) -> bool:
    return not ALLOWED_TRANSITIONS[status]


def derive_display_status(appointment, now: datetime) -> str:
    """
    Status to show for an appointment.

    A Pending appointment whose slot is not after ``now`` shows as Expired.
    The stored status is left untouched.
    """
    if appointment.status == AppointmentStatus.PENDING.value:
        starts_at = combine_date_and_time(appointment.date, appointment.time)
        if starts_at <= now:
            return EXPIRED
    return appointment.status
