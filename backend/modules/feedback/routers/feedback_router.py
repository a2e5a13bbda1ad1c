# backend/modules/feedback/routers/feedback_router.py

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from core.database import get_db
from core.auth import require_admin
from modules.auth.models.user_models import User
from modules.feedback.services.feedback_service import FeedbackService
from modules.feedback.schemas.feedback_schemas import (
    FeedbackCreate,
    FeedbackResponse,
    FeedbackStatusUpdate,
)

review_feedback_router = APIRouter(prefix="/reviews", tags=["Feedback"])
router = APIRouter(prefix="/feedback", tags=["Feedback"])


@review_feedback_router.post(
    "/{review_id}/feedback", response_model=FeedbackResponse, status_code=201
)
async def create_feedback(
    feedback_data: FeedbackCreate,
    review_id: int = Path(..., description="Review ID"),
    db: Session = Depends(get_db),
):
    """
    Submit the private feedback form for a review.

    Only reviews rated 3 or lower accept feedback, and only once.
    """
    return FeedbackService(db).create_feedback(review_id, feedback_data)


@review_feedback_router.get("/{review_id}/feedback", response_model=FeedbackResponse)
async def get_review_feedback(
    review_id: int = Path(..., description="Review ID"),
    db: Session = Depends(get_db),
):
    return FeedbackService(db).get_feedback_for_review(review_id)


@router.put("/{feedback_id}/status", response_model=FeedbackResponse)
async def update_feedback_status(
    status_update: FeedbackStatusUpdate,
    feedback_id: int = Path(..., description="Feedback ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Move feedback through NEW, IN_PROGRESS, RESOLVED and CLOSED, optionally replying"""
    return FeedbackService(db).update_status(
        feedback_id, status_update.status, status_update.admin_response
    )
