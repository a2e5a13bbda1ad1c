# backend/modules/feedback/routers/reviews_router.py

from fastapi import APIRouter, BackgroundTasks, Depends, Path
from sqlalchemy.orm import Session
from typing import List
import logging

from core.database import get_db
from core.auth import get_current_user
from modules.auth.models.user_models import User
from modules.feedback.models.feedback_models import Review
from modules.feedback.services.review_service import ReviewService, ReviewSubmission
from modules.feedback.services.notification_service import (
    ReviewSnapshot,
    send_review_notification,
)
from modules.feedback.schemas.feedback_schemas import (
    AnonymousReviewCreate,
    ReviewCheckResponse,
    ReviewCreate,
    ReviewResponse,
    ReviewSubmissionResponse,
    ReviewUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["Reviews"])
business_reviews_router = APIRouter(prefix="/businesses", tags=["Reviews"])


def to_submission_response(submission: ReviewSubmission) -> ReviewSubmissionResponse:
    return ReviewSubmissionResponse(
        review=ReviewResponse.model_validate(submission.review),
        should_redirect_to_google=submission.decision.should_redirect_to_google,
        should_show_feedback_form=submission.decision.should_show_feedback_form,
        google_review_url=submission.google_review_url,
        message=submission.message,
    )


def schedule_review_notification(background_tasks: BackgroundTasks, review: Review) -> None:
    """Queue the owner email; a failure here must not fail the stored review"""
    try:
        snapshot = ReviewSnapshot.from_review(review)
    except Exception as e:
        logger.error(f"Could not prepare notification for review {review.id}: {e}", exc_info=True)
        return
    background_tasks.add_task(send_review_notification, snapshot)


@business_reviews_router.get("/{business_id}/reviews", response_model=List[ReviewResponse])
async def list_business_reviews(
    business_id: int = Path(..., description="Business ID"),
    db: Session = Depends(get_db),
):
    """Public list of a business's reviews, newest first"""
    return ReviewService(db).list_for_business(business_id)


@business_reviews_router.post(
    "/{business_id}/reviews", response_model=ReviewSubmissionResponse, status_code=201
)
async def create_review(
    review_data: ReviewCreate,
    background_tasks: BackgroundTasks,
    business_id: int = Path(..., description="Business ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Rate a business as the signed-in customer.

    The response tells the client what to do next: ratings of 4 or 5
    redirect to the business's Google review page, 3 and below show the
    private feedback form.
    """
    submission = ReviewService(db).create_review(business_id, current_user, review_data)
    schedule_review_notification(background_tasks, submission.review)
    return to_submission_response(submission)


@business_reviews_router.post(
    "/{business_id}/reviews/anonymous",
    response_model=ReviewSubmissionResponse,
    status_code=201,
)
async def create_anonymous_review(
    review_data: AnonymousReviewCreate,
    background_tasks: BackgroundTasks,
    business_id: int = Path(..., description="Business ID"),
    db: Session = Depends(get_db),
):
    """Rate a business without signing in"""
    submission = ReviewService(db).create_anonymous_review(business_id, review_data)
    schedule_review_notification(background_tasks, submission.review)
    return to_submission_response(submission)


@business_reviews_router.get("/{business_id}/reviews/check", response_model=ReviewCheckResponse)
async def check_reviewed(
    business_id: int = Path(..., description="Business ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    has_reviewed = ReviewService(db).has_reviewed(current_user, business_id)
    return ReviewCheckResponse(business_id=business_id, has_reviewed=has_reviewed)


@router.get("/mine", response_model=List[ReviewResponse])
async def list_my_reviews(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ReviewService(db).list_for_customer(current_user)


@router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(
    review_id: int = Path(..., description="Review ID"),
    db: Session = Depends(get_db),
):
    """Get a specific review by ID"""
    return ReviewService(db).get_review(review_id)


@router.put("/{review_id}", response_model=ReviewSubmissionResponse)
async def update_review(
    update_data: ReviewUpdate,
    review_id: int = Path(..., description="Review ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Change your own review. The redirect decision follows the new rating."""
    submission = ReviewService(db).update_review(review_id, current_user, update_data)
    return to_submission_response(submission)


@router.delete("/{review_id}")
async def delete_review(
    review_id: int = Path(..., description="Review ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete your own review and any feedback attached to it"""
    ReviewService(db).delete_review(review_id, current_user)
    return {"message": "Review deleted successfully"}
