"""Feedback repository - Database operations for feedback"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...exceptions import PersistenceFailure
from ...models import Appointment, Feedback

logger = logging.getLogger(__name__)


class FeedbackRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self, rating: int, comment: Optional[str] = None, appointment_id: Optional[int] = None
    ) -> Feedback:
        feedback = Feedback(rating=rating, comment=comment, appointment_id=appointment_id)
        try:
            self.db.add(feedback)
            self.db.commit()
            self.db.refresh(feedback)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to save feedback: {e}")
            raise PersistenceFailure("save feedback", e) from e
        return feedback

    def appointment_exists(self, appointment_id: int) -> bool:
        try:
            return self.db.get(Appointment, appointment_id) is not None
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to load appointment {appointment_id}: {e}")
            raise PersistenceFailure("load appointment", e) from e

    def get_for_appointment(self, appointment_id: int) -> Optional[Feedback]:
        try:
            return (
                self.db.query(Feedback)
                .filter(Feedback.appointment_id == appointment_id)
                .order_by(Feedback.id.asc())
                .first()
            )
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to load feedback for appointment {appointment_id}: {e}")
            raise PersistenceFailure("load feedback", e) from e

    def list_all(self) -> list[Feedback]:
        """Newest first"""
        try:
            return (
                self.db.query(Feedback)
                .order_by(Feedback.created_at.desc(), Feedback.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to list feedback: {e}")
            raise PersistenceFailure("list feedback", e) from e

    def rating_counts(self) -> dict[int, int]:
        try:
            rows = (
                self.db.query(Feedback.rating, func.count(Feedback.id))
                .group_by(Feedback.rating)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to load feedback stats: {e}")
            raise PersistenceFailure("load feedback stats", e) from e
        return {rating: count for rating, count in rows}
