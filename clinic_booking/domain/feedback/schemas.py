"""Feedback domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class FeedbackCreate(BaseModel):
    rating: Optional[int] = None
    comment: Optional[str] = None
    appointmentId: Optional[int] = None


class FeedbackResponse(BaseModel):
    id: int
    rating: int
    comment: Optional[str]
    appointmentId: Optional[int]
    createdAt: Optional[datetime] = None


class FeedbackStats(BaseModel):
    averageRating: float
    totalRatings: int
    ratingsCount: dict[int, int]
