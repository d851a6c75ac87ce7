"""Appointment router - FastAPI endpoints for booking operations"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ...database import get_db
from ...models import Appointment
from ...services.reminder_scheduler import ReminderScheduler
from ...utils.formatters import format_appointment_datetime, relative_day_description
from .repository import AppointmentRepository
from .schemas import AppointmentForm, AppointmentResponse, AvailabilityResponse, StatusChangeRequest
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_booking_service(request: Request, db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    clock = request.app.state.clock
    reminders = ReminderScheduler(request.app.state.notification_channel, clock)
    return BookingService(AppointmentRepository(db), reminders, clock)


def to_response(appointment: Appointment, service: BookingService) -> AppointmentResponse:
    return AppointmentResponse(
        id=appointment.id,
        name=appointment.name,
        contact=appointment.contact,
        date=appointment.date,
        time=appointment.time,
        reason=appointment.reason,
        status=appointment.status,
        displayStatus=service.display_status(appointment),
        scheduledFor=format_appointment_datetime(appointment.date, appointment.time),
        dayLabel=relative_day_description(appointment.date, service.clock.today()),
        createdAt=appointment.created_at,
    )


@router.get("", response_model=list[AppointmentResponse])
async def list_appointments(
    status: Optional[str] = Query(None, description="All, Pending, Approved, Cancelled or Done"),
    service: BookingService = Depends(get_booking_service),
):
    """Get all appointments ordered by date and time"""
    return [to_response(a, service) for a in service.list_appointments(status)]


@router.get("/availability", response_model=AvailabilityResponse)
async def get_availability(
    day: date = Query(..., alias="date"),
    service: BookingService = Depends(get_booking_service),
):
    """Free slot labels for a day"""
    return AvailabilityResponse(date=day, slots=service.available_slots(day))


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    form: AppointmentForm, service: BookingService = Depends(get_booking_service)
):
    """Book an appointment"""
    appointment = await service.create(form)
    return to_response(appointment, service)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int, service: BookingService = Depends(get_booking_service)
):
    return to_response(service.get_appointment(appointment_id), service)


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    form: AppointmentForm,
    service: BookingService = Depends(get_booking_service),
):
    """Edit an appointment; reminders follow the new date and time"""
    appointment = await service.update(appointment_id, form)
    return to_response(appointment, service)


@router.post("/{appointment_id}/status", response_model=AppointmentResponse)
async def change_appointment_status(
    appointment_id: int,
    data: StatusChangeRequest,
    service: BookingService = Depends(get_booking_service),
):
    """Approve, cancel or complete an appointment"""
    appointment = await service.change_status(appointment_id, data.status, data.initiatedBy)
    return to_response(appointment, service)


@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: int, service: BookingService = Depends(get_booking_service)
):
    await service.delete(appointment_id)
    return {"message": "Appointment deleted"}
