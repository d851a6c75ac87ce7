"""Appointment domain schemas - Pydantic models for requests and responses"""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Initiator(str, Enum):
    USER = "user"
    ADMIN = "admin"


class AppointmentForm(BaseModel):
    """
    Booking form as submitted.

    Field rules (name, 10-digit contact, slot label, date) are checked by the
    booking service so every offending field is reported together.
    """

    name: str = ""
    contact: str = ""
    date: Optional[dt.date] = None
    time: str = "09:00"
    reason: Optional[str] = None


class StatusChangeRequest(BaseModel):
    status: str
    initiatedBy: Initiator = Initiator.USER


class AppointmentResponse(BaseModel):
    id: int
    name: str
    contact: str
    date: dt.date
    time: str
    reason: Optional[str]
    status: str
    displayStatus: str
    scheduledFor: str
    dayLabel: str
    createdAt: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


class AvailabilityResponse(BaseModel):
    date: dt.date
    slots: list[str]
