# backend/modules/feedback/tests/conftest.py

import pytest
from typing import Any, Dict
from sqlalchemy.orm import Session

from modules.auth.models.user_models import User
from modules.businesses.models.business_models import BusinessProfile
from modules.feedback.models.feedback_models import Feedback, FeedbackStatus, Review
from modules.feedback.services.review_service import ReviewService
from modules.feedback.services.feedback_service import FeedbackService
from modules.feedback.services.aggregation_service import BusinessRatingAggregator
from modules.feedback.schemas.feedback_schemas import ReviewCreate


# Service fixtures
@pytest.fixture
def review_service(db_session: Session) -> ReviewService:
    """Create a review service instance."""
    return ReviewService(db_session)


@pytest.fixture
def feedback_service(db_session: Session) -> FeedbackService:
    """Create a feedback service instance."""
    return FeedbackService(db_session)


@pytest.fixture
def aggregator(db_session: Session) -> BusinessRatingAggregator:
    return BusinessRatingAggregator(db_session)


# Data fixtures
@pytest.fixture
def sample_feedback_data() -> Dict[str, Any]:
    """Sample feedback form answers."""
    return {
        "feedback_text": "The bread was stale and the queue was long.",
        "service_quality": "Slow",
        "staff_behavior": "Polite",
        "cleanliness": "Fine",
        "value_for_money": "Poor",
        "overall_experience": "Disappointing",
        "suggestions": "Open a second till at peak hours.",
        "contact_email": "jane.doe@example.com",
        "wants_followup": True,
    }


@pytest.fixture
def low_review(
    review_service: ReviewService, business: BusinessProfile, customer: User
) -> Review:
    """A 2-star review of the business by the customer"""
    submission = review_service.create_review(
        business.id, customer, ReviewCreate(rating=2, comment="Not great")
    )
    return submission.review


@pytest.fixture
def high_review(
    review_service: ReviewService, business: BusinessProfile, other_customer: User
) -> Review:
    """A 5-star review of the business by another customer"""
    submission = review_service.create_review(
        business.id, other_customer, ReviewCreate(rating=5, comment="Lovely")
    )
    return submission.review


@pytest.fixture
def sample_feedback(db_session: Session, low_review: Review) -> Feedback:
    feedback = Feedback(
        review_id=low_review.id,
        feedback_text="Too slow",
        wants_followup=False,
        status=FeedbackStatus.NEW,
    )
    db_session.add(feedback)
    db_session.commit()
    db_session.refresh(feedback)
    return feedback
