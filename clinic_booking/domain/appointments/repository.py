"""Appointment repository - Database operations for appointments"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...exceptions import PersistenceFailure
from ...models import Appointment
from .status import AppointmentStatus

logger = logging.getLogger(__name__)


class AppointmentRepository:
    """
    Appointment store backed by a SQLAlchemy session.

    Every write is its own commit; a failed write is rolled back and surfaces
    as PersistenceFailure.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, appointment_id: int) -> Optional[Appointment]:
        try:
            return self.db.query(Appointment).filter(Appointment.id == appointment_id).first()
        except SQLAlchemyError as e:
            raise self._failed("load appointment", e) from e

    def list_all(self, status: Optional[AppointmentStatus] = None) -> list[Appointment]:
        """All appointments ordered by date and time, optionally of one stored status"""
        try:
            query = self.db.query(Appointment)
            if status is not None:
                query = query.filter(Appointment.status == status.value)
            return query.order_by(Appointment.date.asc(), Appointment.time.asc()).all()
        except SQLAlchemyError as e:
            raise self._failed("list appointments", e) from e

    def find_in_slot(
        self, slot_date: date, slot_time: str, exclude_id: Optional[int] = None
    ) -> list[Appointment]:
        """Appointments holding a slot - every status except Cancelled"""
        try:
            query = self.db.query(Appointment).filter(
                Appointment.date == slot_date,
                Appointment.time == slot_time,
                Appointment.status != AppointmentStatus.CANCELLED.value,
            )
            if exclude_id is not None:
                query = query.filter(Appointment.id != exclude_id)
            return query.all()
        except SQLAlchemyError as e:
            raise self._failed("check time slot availability", e) from e

    def booked_times(self, slot_date: date) -> set[str]:
        try:
            rows = (
                self.db.query(Appointment.time)
                .filter(
                    Appointment.date == slot_date,
                    Appointment.status != AppointmentStatus.CANCELLED.value,
                )
                .all()
            )
        except SQLAlchemyError as e:
            raise self._failed("check time slot availability", e) from e
        return {row[0] for row in rows}

    def create(self, **appointment_data) -> Appointment:
        appointment = Appointment(status=AppointmentStatus.PENDING.value, **appointment_data)
        try:
            self.db.add(appointment)
            self.db.commit()
            self.db.refresh(appointment)
        except SQLAlchemyError as e:
            raise self._failed("save appointment", e) from e
        return appointment

    def update(self, appointment: Appointment, **updates) -> Appointment:
        for key, value in updates.items():
            if hasattr(appointment, key):
                setattr(appointment, key, value)
        return self.save(appointment, "update appointment")

    def save(self, appointment: Appointment, operation: str = "update appointment") -> Appointment:
        try:
            self.db.commit()
            self.db.refresh(appointment)
        except SQLAlchemyError as e:
            raise self._failed(operation, e) from e
        return appointment

    def delete(self, appointment: Appointment) -> None:
        try:
            self.db.delete(appointment)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._failed("delete appointment", e) from e

    def _failed(self, operation: str, error: SQLAlchemyError) -> PersistenceFailure:
        self.db.rollback()
        logger.error(f"❌ Failed to {operation}: {error}")
        return PersistenceFailure(operation, error)
