# backend/modules/feedback/services/review_service.py

from dataclasses import dataclass
from typing import List, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from core.permissions import require_owner
from modules.auth.models.user_models import User
from modules.businesses.models.business_models import BusinessProfile
from modules.feedback.models.feedback_models import Review
from modules.feedback.schemas.feedback_schemas import (
    AnonymousReviewCreate,
    ReviewCreate,
    ReviewUpdate,
)
from modules.feedback.services.aggregation_service import BusinessRatingAggregator

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class ReviewDecision:
    """Where the customer goes after rating: the private form or Google"""
    should_redirect_to_google: bool
    should_show_feedback_form: bool


@dataclass
class ReviewSubmission:
    review: Review
    decision: ReviewDecision
    google_review_url: Optional[str] = None

    @property
    def message(self) -> str:
        if self.decision.should_redirect_to_google:
            return "Thank you for your review! Please share it on Google too."
        return "Thank you for your review. Please tell us how we can improve."


def review_decision(rating: int) -> ReviewDecision:
    """Ratings up to the threshold (3) get the feedback form; 4 and 5 redirect."""
    low = rating <= settings.FEEDBACK_RATING_THRESHOLD
    return ReviewDecision(
        should_redirect_to_google=not low,
        should_show_feedback_form=low,
    )


class ReviewService:
    """Service for managing reviews and their effect on business ratings"""

    def __init__(self, db: Session):
        self.db = db
        self.aggregator = BusinessRatingAggregator(db)

    def create_review(
        self,
        business_id: int,
        customer: User,
        review_data: ReviewCreate,
    ) -> ReviewSubmission:
        """Create a review as a signed-in customer. One per customer per business."""

        business = self._get_business(business_id)
        self._validate_rating(review_data.rating)

        if self.has_reviewed(customer, business_id):
            raise ConflictError("You have already reviewed this business")

        review = Review(
            rating=review_data.rating,
            comment=review_data.comment,
            business_profile_id=business.id,
            customer_id=customer.id,
            is_anonymous=False,
            customer_name=customer.name,
            customer_email=customer.email,
        )
        return self._persist_new_review(business, review)

    def create_anonymous_review(
        self,
        business_id: int,
        review_data: AnonymousReviewCreate,
    ) -> ReviewSubmission:
        """Create a review without an account. Contact details are dropped when anonymous."""

        business = self._get_business(business_id)
        self._validate_rating(review_data.rating)

        review = Review(
            rating=review_data.rating,
            comment=review_data.comment,
            business_profile_id=business.id,
            customer_id=None,
            is_anonymous=review_data.is_anonymous,
        )
        if not review_data.is_anonymous:
            review.customer_name = review_data.customer_name
            review.customer_email = review_data.customer_email
            review.customer_phone = review_data.customer_phone

        return self._persist_new_review(business, review)

    def update_review(
        self,
        review_id: int,
        customer: User,
        update_data: ReviewUpdate,
    ) -> ReviewSubmission:
        """Change the rating or comment of one's own review"""

        review = self.get_review(review_id)
        self._require_review_owner(review, customer)
        self._validate_rating(update_data.rating)

        try:
            review.rating = update_data.rating
            review.comment = update_data.comment
            review.redirected_to_google = review_decision(update_data.rating).should_redirect_to_google
            self.db.flush()

            self.aggregator.recompute(review.business_profile_id)
            self.db.commit()
            self.db.refresh(review)

            logger.info(f"Updated review {review.id} (rating {review.rating})")

        except Exception as e:
            self.db.rollback()
            logger.error(f"Error updating review {review_id}: {e}")
            raise

        business = review.business_profile
        return self._submission(review, business)

    def delete_review(self, review_id: int, customer: User) -> None:
        """Delete one's own review together with its feedback"""

        review = self.get_review(review_id)
        self._require_review_owner(review, customer)
        business_id = review.business_profile_id

        try:
            self.db.delete(review)
            self.db.flush()

            self.aggregator.recompute(business_id)
            self.db.commit()

            logger.info(f"Deleted review {review_id} of business {business_id}")

        except Exception as e:
            self.db.rollback()
            logger.error(f"Error deleting review {review_id}: {e}")
            raise

    def has_reviewed(self, customer: User, business_id: int) -> bool:
        return (
            self.db.query(Review.id)
            .filter(
                Review.customer_id == customer.id,
                Review.business_profile_id == business_id,
            )
            .first()
            is not None
        )

    # Queries

    def get_review(self, review_id: int) -> Review:
        review = self.db.query(Review).filter(Review.id == review_id).first()
        if not review:
            raise NotFoundError(f"Review {review_id} not found")
        return review

    def list_for_business(self, business_id: int) -> List[Review]:
        return (
            self.db.query(Review)
            .filter(Review.business_profile_id == business_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )

    def list_for_customer(self, customer: User) -> List[Review]:
        return (
            self.db.query(Review)
            .filter(Review.customer_id == customer.id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )

    def list_for_business_owner(self, business_id: int, principal: User) -> List[Review]:
        business = self._get_business(business_id)
        require_owner(business, principal)
        return self.list_for_business(business_id)

    def list_all(self) -> List[Review]:
        return self.db.query(Review).order_by(Review.created_at.desc(), Review.id.desc()).all()

    def list_low_rating(self, threshold: int = 3) -> List[Review]:
        return (
            self.db.query(Review)
            .filter(Review.rating <= threshold)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )

    # Helpers

    def _persist_new_review(self, business: BusinessProfile, review: Review) -> ReviewSubmission:
        decision = review_decision(review.rating)
        review.redirected_to_google = decision.should_redirect_to_google

        try:
            self.db.add(review)
            self.db.flush()

            self.aggregator.recompute(business.id)
            self.db.commit()
            self.db.refresh(review)

        except IntegrityError as e:
            self.db.rollback()
            if review.customer_id is None:
                logger.error(f"Error creating guest review for business {business.id}: {e.orig}")
                raise
            logger.warning(f"Duplicate review rejected for business {business.id}: {e.orig}")
            raise ConflictError("You have already reviewed this business")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error creating review for business {business.id}: {e}")
            raise

        logger.info(
            f"Created review {review.id} for business {business.id} "
            f"(rating {review.rating}, redirect={decision.should_redirect_to_google})"
        )
        return self._submission(review, business)

    def _submission(self, review: Review, business: BusinessProfile) -> ReviewSubmission:
        decision = review_decision(review.rating)
        return ReviewSubmission(
            review=review,
            decision=decision,
            google_review_url=business.google_review_url if decision.should_redirect_to_google else None,
        )

    def _get_business(self, business_id: int) -> BusinessProfile:
        business = (
            self.db.query(BusinessProfile)
            .filter(BusinessProfile.id == business_id)
            .first()
        )
        if not business:
            raise NotFoundError(f"Business with ID {business_id} not found")
        return business

    @staticmethod
    def _validate_rating(rating: int) -> None:
        if rating is None or not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

    @staticmethod
    def _require_review_owner(review: Review, customer: User) -> None:
        if review.customer_id is None or review.customer_id != customer.id:
            raise ForbiddenError("You can only modify your own reviews")
