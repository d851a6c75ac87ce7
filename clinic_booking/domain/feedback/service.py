"""Feedback service - Business logic for patient feedback"""

import logging
from typing import Optional

from ...exceptions import NotFound, ValidationError
from ...models import Feedback
from ...shared.validators import validate_rating
from ...utils.sanitization import sanitize_string
from .repository import FeedbackRepository
from .schemas import FeedbackCreate, FeedbackStats

logger = logging.getLogger(__name__)


class FeedbackService:
    def __init__(self, repo: FeedbackRepository):
        self.repo = repo

    def save_feedback(self, data: FeedbackCreate) -> Feedback:
        try:
            rating = validate_rating(data.rating)
        except ValueError as e:
            raise ValidationError({"rating": str(e)}) from None

        if data.appointmentId is not None:
            if not self.repo.appointment_exists(data.appointmentId):
                raise NotFound("Appointment", data.appointmentId)

        comment = sanitize_string(data.comment) if data.comment else None
        feedback = self.repo.create(rating, comment, data.appointmentId)
        logger.info(f"✅ Feedback {feedback.id} saved (rating {feedback.rating})")
        return feedback

    def get_appointment_feedback(self, appointment_id: int) -> Optional[Feedback]:
        return self.repo.get_for_appointment(appointment_id)

    def get_all_feedback(self) -> list[Feedback]:
        return self.repo.list_all()

    def get_stats(self) -> FeedbackStats:
        """Average rating plus the count of each star value"""
        counts = {rating: 0 for rating in range(1, 6)}
        for rating, count in self.repo.rating_counts().items():
            if rating in counts:
                counts[rating] = count

        total = sum(counts.values())
        average = sum(r * c for r, c in counts.items()) / total if total else 0.0
        return FeedbackStats(
            averageRating=round(average, 1), totalRatings=total, ratingsCount=counts
        )
