# backend/modules/feedback/routers/admin_router.py

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session
from typing import List
import logging

from core.database import get_db
from core.auth import require_admin
from modules.auth.models.user_models import User
from modules.feedback.models.feedback_models import FeedbackStatus
from modules.feedback.services.review_service import ReviewService
from modules.feedback.services.feedback_service import FeedbackService
from modules.feedback.services.aggregation_service import BusinessRatingAggregator
from modules.feedback.services.notification_service import ReviewNotificationService
from modules.feedback.schemas.feedback_schemas import (
    FeedbackResponse,
    ReconciliationResponse,
    ReviewAdminResponse,
)

logger = logging.getLogger(__name__)

# Every route here requires the admin role
reviews_router = APIRouter(
    prefix="/admin/reviews", tags=["Admin - Reviews"], dependencies=[Depends(require_admin)]
)
feedback_router = APIRouter(
    prefix="/admin/feedback", tags=["Admin - Feedback"], dependencies=[Depends(require_admin)]
)
maintenance_router = APIRouter(
    prefix="/admin", tags=["Admin - Maintenance"], dependencies=[Depends(require_admin)]
)


class EmailTestRequest(BaseModel):
    to_email: EmailStr


# Reviews

@reviews_router.get("", response_model=List[ReviewAdminResponse])
async def list_all_reviews(db: Session = Depends(get_db)):
    return ReviewService(db).list_all()


@reviews_router.get("/low-rating", response_model=List[ReviewAdminResponse])
async def list_low_rating_reviews(
    threshold: int = Query(3, ge=1, le=5, description="Highest rating to include"),
    db: Session = Depends(get_db),
):
    return ReviewService(db).list_low_rating(threshold)


@reviews_router.get("/business/{business_id}", response_model=List[ReviewAdminResponse])
async def list_owned_business_reviews(
    business_id: int = Path(..., description="Business ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Reviews of one business; only its owner may list them here"""
    return ReviewService(db).list_for_business_owner(business_id, current_user)


# Feedback

@feedback_router.get("", response_model=List[FeedbackResponse])
async def list_all_feedback(db: Session = Depends(get_db)):
    return FeedbackService(db).list_all()


@feedback_router.get("/new", response_model=List[FeedbackResponse])
async def list_new_feedback(db: Session = Depends(get_db)):
    return FeedbackService(db).list_new()


@feedback_router.get("/status/{status}", response_model=List[FeedbackResponse])
async def list_feedback_by_status(
    status: FeedbackStatus,
    db: Session = Depends(get_db),
):
    return FeedbackService(db).list_by_status(status)


@feedback_router.get("/followup-required", response_model=List[FeedbackResponse])
async def list_followup_feedback(db: Session = Depends(get_db)):
    return FeedbackService(db).list_followup_required()


@feedback_router.get("/{feedback_id}", response_model=FeedbackResponse)
async def get_feedback(
    feedback_id: int = Path(..., description="Feedback ID"),
    db: Session = Depends(get_db),
):
    return FeedbackService(db).get_feedback(feedback_id)


@feedback_router.delete("/{feedback_id}")
async def delete_feedback(
    feedback_id: int = Path(..., description="Feedback ID"),
    db: Session = Depends(get_db),
):
    FeedbackService(db).delete_feedback(feedback_id)
    return {"message": "Feedback deleted successfully"}


# Maintenance

@maintenance_router.post("/aggregates/reconcile", response_model=ReconciliationResponse)
async def reconcile_aggregates(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Recompute every business rating and report the ones that had drifted"""
    logger.info(f"Rating reconciliation requested by user {current_user.id}")
    return BusinessRatingAggregator(db).reconcile_all()


@maintenance_router.post("/email/test")
async def send_test_email(request: EmailTestRequest):
    ReviewNotificationService().send_test_email(request.to_email)
    return {"message": f"Test email sent to {request.to_email}"}
