"""Slot conflict detection against the appointment store"""

from datetime import date
from typing import Optional

from ...shared.validators import TIME_SLOTS
from .repository import AppointmentRepository


class SlotConflictChecker:
    """
    Read-only view of which (date, time) slots are held.

    Cancelled appointments free their slot; Pending, Approved and Done ones
    keep it.
    """

    def __init__(self, repo: AppointmentRepository):
        self.repo = repo

    def is_slot_taken(
        self, slot_date: date, slot_time: str, exclude_id: Optional[int] = None
    ) -> bool:
        """
        Args:
            slot_date: Day of the slot
            slot_time: Slot label, e.g. "09:00"
            exclude_id: Appointment being edited; it never conflicts with itself
        """
        return bool(self.repo.find_in_slot(slot_date, slot_time, exclude_id))

    def available_slots(self, slot_date: date) -> list[str]:
        booked = self.repo.booked_times(slot_date)
        return [label for label in TIME_SLOTS if label not in booked]
