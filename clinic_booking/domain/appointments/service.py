"""Booking service - create, edit and status changes for appointments

Each operation runs validation and the slot check before touching the store,
commits, and only then brings the reminders in line with the new state.
"""

import logging
from datetime import date
from typing import Optional

from ...clock import Clock
from ...config import REMINDER_TITLE
from ...exceptions import InvalidTransition, NotFound, SlotTaken, ValidationError
from ...models import Appointment
from ...services.reminder_scheduler import ReminderScheduler
from ...shared.validators import (
    normalize_reason,
    validate_appointment_date,
    validate_contact,
    validate_patient_name,
    validate_time_slot,
)
from ...utils.formatters import combine_date_and_time
from ...utils.sanitization import sanitize_string
from .repository import AppointmentRepository
from .schemas import AppointmentForm, Initiator
from .slot_checker import SlotConflictChecker
from .status import (
    EXPIRED,
    REMINDER_STATUSES,
    AppointmentStatus,
    derive_display_status,
    transition,
)

logger = logging.getLogger(__name__)


class BookingService:
    """Service layer for appointment booking"""

    def __init__(
        self,
        repo: AppointmentRepository,
        reminders: ReminderScheduler,
        clock: Optional[Clock] = None,
        reminder_title: str = REMINDER_TITLE,
    ):
        self.repo = repo
        self.reminders = reminders
        self.clock = clock or reminders.clock
        self.reminder_title = reminder_title
        self.slots = SlotConflictChecker(repo)

    # ------------------------------------------------------------------ reads

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.repo.get(appointment_id)
        if not appointment:
            raise NotFound("Appointment", appointment_id)
        return appointment

    def list_appointments(self, status: Optional[str] = None) -> list[Appointment]:
        """List appointments; ``status`` is a stored status or "All"/None for everything"""
        if status is None or status == "All":
            return self.repo.list_all()
        return self.repo.list_all(self._parse_status(status))

    def display_status(self, appointment: Appointment) -> str:
        return derive_display_status(appointment, self.clock.now())

    def available_slots(self, slot_date: date) -> list[str]:
        return self.slots.available_slots(slot_date)

    # ----------------------------------------------------------------- writes

    async def create(self, form: AppointmentForm) -> Appointment:
        """Book a new Pending appointment and schedule its reminders"""
        data = self._validate(form)

        if self.slots.is_slot_taken(data["date"], data["time"]):
            logger.warning(f"⚠️ Slot {data['date']} {data['time']} already booked")
            raise SlotTaken(data["date"], data["time"])

        appointment = self.repo.create(**data)
        logger.info(
            f"✅ Appointment {appointment.id} booked for {appointment.date} {appointment.time}"
        )

        await self.reminders.schedule_reminders(
            appointment.id, self._starts_at(appointment), self.reminder_title
        )
        return appointment

    async def update(self, appointment_id: int, form: AppointmentForm) -> Appointment:
        """
        Edit an appointment.

        Only Pending and Approved appointments can be edited. The appointment's
        own slot never counts as a conflict. Reminders are always rebuilt from
        the saved date/time, even when it did not change.
        """
        appointment = self.get_appointment(appointment_id)
        if AppointmentStatus(appointment.status) not in REMINDER_STATUSES:
            raise ValidationError(
                {"status": f"{appointment.status} appointments can no longer be edited"}
            )
        data = self._validate(form)

        if self.slots.is_slot_taken(data["date"], data["time"], exclude_id=appointment.id):
            logger.warning(f"⚠️ Slot {data['date']} {data['time']} already booked")
            raise SlotTaken(data["date"], data["time"])

        appointment = self.repo.update(appointment, **data)
        logger.info(f"✅ Appointment {appointment.id} updated")

        await self.reminders.cancel_reminders(appointment.id)
        await self.reminders.schedule_reminders(
            appointment.id, self._starts_at(appointment), self.reminder_title
        )
        return appointment

    async def change_status(
        self,
        appointment_id: int,
        new_status: str,
        initiated_by: Initiator = Initiator.USER,
    ) -> Appointment:
        """
        Apply a status transition.

        A Pending appointment whose slot has passed shows as Expired and takes
        no further status changes. Leaving the reminder-holding states cancels
        the reminders; an admin cancelling also sends the patient a
        cancellation notice.
        """
        appointment = self.get_appointment(appointment_id)
        requested = self._parse_status(new_status)
        previous = appointment.status

        if self.display_status(appointment) == EXPIRED:
            raise InvalidTransition(EXPIRED, requested.value)

        transition(appointment, requested)
        appointment = self.repo.save(appointment, "update appointment status")
        logger.info(f"✅ Appointment {appointment.id} status: {previous} → {appointment.status}")

        if requested not in REMINDER_STATUSES:
            if requested == AppointmentStatus.CANCELLED and initiated_by == Initiator.ADMIN:
                await self.reminders.cancel_and_notify(appointment.id, appointment.time)
            else:
                await self.reminders.cancel_reminders(appointment.id)
        return appointment

    async def delete(self, appointment_id: int) -> None:
        """Remove an appointment for good; its feedback stays, unlinked"""
        appointment = self.get_appointment(appointment_id)
        self.repo.delete(appointment)
        logger.info(f"🗑️ Appointment {appointment_id} deleted")
        await self.reminders.cancel_reminders(appointment_id)

    # ---------------------------------------------------------------- helpers

    def _validate(self, form: AppointmentForm) -> dict:
        errors: dict[str, str] = {}
        data: dict = {}

        checks = (
            ("name", lambda: validate_patient_name(form.name)),
            ("contact", lambda: validate_contact(form.contact)),
            ("date", lambda: validate_appointment_date(form.date, self.clock.today())),
            ("time", lambda: validate_time_slot(form.time)),
        )
        for field, check in checks:
            try:
                data[field] = check()
            except ValueError as e:
                errors[field] = str(e)

        if errors:
            logger.warning(f"⚠️ Invalid appointment form: {errors}")
            raise ValidationError(errors)

        data["reason"] = sanitize_string(normalize_reason(form.reason))
        return data

    @staticmethod
    def _parse_status(value: str) -> AppointmentStatus:
        try:
            return AppointmentStatus(value)
        except ValueError:
            raise ValidationError({"status": f"Unknown status '{value}'"}) from None

    @staticmethod
    def _starts_at(appointment: Appointment):
        return combine_date_and_time(appointment.date, appointment.time)
