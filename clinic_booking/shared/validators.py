"""Shared validation utilities"""

import re
from datetime import date
from typing import Optional

CONTACT_PATTERN = re.compile(r"^\d{10}$")

TIME_SLOTS = (
    "09:00",
    "10:00",
    "11:00",
    "12:00",
    "13:00",
    "14:00",
    "15:00",
    "16:00",
    "17:00",
    "18:00",
)

REASON_OPTIONS = (
    "Checkup",
    "Consultation",
    "Follow-up",
    "Treatment",
    "Surgery",
    "Other",
)


def validate_patient_name(name: Optional[str]) -> str:
    """
    Validate the patient name.

    Raises:
        ValueError: If the name is missing or blank
    """
    if not name or not name.strip():
        raise ValueError("Patient name is required")
    return name.strip()


def validate_contact(contact: Optional[str]) -> str:
    """
    Validate a contact number. Exactly ten digits, no separators or country code.

    Raises:
        ValueError: If the contact is missing or not ten digits
    """
    if not contact or not contact.strip():
        raise ValueError("Contact number is required")
    if not CONTACT_PATTERN.match(contact):
        raise ValueError("Please enter a valid 10-digit number")
    return contact


def validate_time_slot(value: Optional[str]) -> str:
    """Validate that a time label is one of the bookable hourly slots"""
    if value not in TIME_SLOTS:
        raise ValueError(f"Time must be one of {', '.join(TIME_SLOTS)}")
    return value


def validate_appointment_date(value: Optional[date], today: date) -> date:
    """Appointments can be booked for today or any later day"""
    if value is None:
        raise ValueError("Appointment date is required")
    if value < today:
        raise ValueError("Appointment date cannot be in the past")
    return value


def normalize_reason(reason: Optional[str]) -> str:
    """
    Return the visit reason as stored.

    Known options are kept as-is; anything else is the free text entered
    for "Other". A blank reason defaults to the first option.
    """
    if reason is None or not reason.strip():
        return REASON_OPTIONS[0]
    return reason.strip()


def validate_rating(rating: Optional[int]) -> int:
    if rating is None or isinstance(rating, bool) or not isinstance(rating, int):
        raise ValueError("Rating is required")
    if not 1 <= rating <= 5:
        raise ValueError("Rating must be between 1 and 5")
    return rating
