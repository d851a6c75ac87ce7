"""Feedback router - FastAPI endpoints for patient feedback"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ...exceptions import NotFound
from ...models import Feedback
from .repository import FeedbackRepository
from .schemas import FeedbackCreate, FeedbackResponse, FeedbackStats
from .service import FeedbackService

router = APIRouter(prefix="/feedback", tags=["Feedback"])


def get_feedback_service(db: Session = Depends(get_db)) -> FeedbackService:
    """Dependency injection for FeedbackService"""
    return FeedbackService(FeedbackRepository(db))


def to_response(feedback: Feedback) -> FeedbackResponse:
    return FeedbackResponse(
        id=feedback.id,
        rating=feedback.rating,
        comment=feedback.comment,
        appointmentId=feedback.appointment_id,
        createdAt=feedback.created_at,
    )


@router.post("", response_model=FeedbackResponse, status_code=201)
async def submit_feedback(
    data: FeedbackCreate, service: FeedbackService = Depends(get_feedback_service)
):
    return to_response(service.save_feedback(data))


@router.get("", response_model=list[FeedbackResponse])
async def list_feedback(service: FeedbackService = Depends(get_feedback_service)):
    """All feedback, newest first"""
    return [to_response(f) for f in service.get_all_feedback()]


@router.get("/stats", response_model=FeedbackStats)
async def feedback_stats(service: FeedbackService = Depends(get_feedback_service)):
    """Rating summary for the admin dashboard"""
    return service.get_stats()


@router.get("/appointment/{appointment_id}", response_model=FeedbackResponse)
async def get_appointment_feedback(
    appointment_id: int, service: FeedbackService = Depends(get_feedback_service)
):
    feedback = service.get_appointment_feedback(appointment_id)
    if not feedback:
        raise NotFound("Feedback for appointment", appointment_id)
    return to_response(feedback)
