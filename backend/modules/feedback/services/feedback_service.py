# backend/modules/feedback/services/feedback_service.py

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
import logging

from core.config import settings
from core.exceptions import ConflictError, NotFoundError, PolicyError
from modules.feedback.models.feedback_models import Feedback, FeedbackStatus, Review
from modules.feedback.schemas.feedback_schemas import FeedbackCreate

logger = logging.getLogger(__name__)


class FeedbackService:
    """Private feedback attached to low-rated reviews, and its handling by admins"""

    def __init__(self, db: Session):
        self.db = db

    def create_feedback(self, review_id: int, feedback_data: FeedbackCreate) -> Feedback:
        """Attach feedback to a review rated at or below the threshold. Once per review."""

        review = self.db.query(Review).filter(Review.id == review_id).first()
        if not review:
            raise NotFoundError(f"Review {review_id} not found")

        if self._find_for_review(review_id) is not None:
            raise ConflictError(f"Feedback already submitted for review {review_id}")

        if review.rating > settings.FEEDBACK_RATING_THRESHOLD:
            raise PolicyError(
                f"Feedback can only be left for reviews rated "
                f"{settings.FEEDBACK_RATING_THRESHOLD} or lower"
            )

        try:
            feedback = Feedback(
                review_id=review.id,
                **feedback_data.model_dump(),
                status=FeedbackStatus.NEW,
                created_at=datetime.utcnow(),
            )
            self.db.add(feedback)
            self.db.commit()
            self.db.refresh(feedback)

        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Duplicate feedback rejected for review {review_id}: {e.orig}")
            raise ConflictError(f"Feedback already submitted for review {review_id}")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error creating feedback for review {review_id}: {e}")
            raise

        logger.info(f"Created feedback {feedback.id} for review {review_id}")
        return feedback

    def update_status(
        self,
        feedback_id: int,
        status: FeedbackStatus,
        admin_response: Optional[str] = None,
    ) -> Feedback:
        """
        Move feedback through its handling states.

        A non-blank ``admin_response`` replaces the stored one and stamps
        ``responded_at``; a blank one leaves both untouched.
        """
        feedback = self.get_feedback(feedback_id)

        try:
            previous = feedback.status
            feedback.status = status

            if admin_response is not None and admin_response.strip():
                feedback.admin_response = admin_response.strip()
                feedback.responded_at = datetime.utcnow()

            self.db.commit()
            self.db.refresh(feedback)

        except Exception as e:
            self.db.rollback()
            logger.error(f"Error updating feedback {feedback_id}: {e}")
            raise

        logger.info(
            f"Feedback {feedback_id} status {previous.value} -> {status.value}"
        )
        return feedback

    def get_feedback(self, feedback_id: int) -> Feedback:
        feedback = self.db.query(Feedback).filter(Feedback.id == feedback_id).first()
        if not feedback:
            raise NotFoundError(f"Feedback {feedback_id} not found")
        return feedback

    def get_feedback_for_review(self, review_id: int) -> Feedback:
        if self.db.query(Review.id).filter(Review.id == review_id).first() is None:
            raise NotFoundError(f"Review {review_id} not found")

        feedback = self._find_for_review(review_id)
        if feedback is None:
            raise NotFoundError(f"No feedback for review {review_id}")
        return feedback

    def list_all(self) -> List[Feedback]:
        return self._ordered(self.db.query(Feedback)).all()

    def list_by_status(self, status: FeedbackStatus) -> List[Feedback]:
        return self._ordered(self.db.query(Feedback).filter(Feedback.status == status)).all()

    def list_new(self) -> List[Feedback]:
        return self.list_by_status(FeedbackStatus.NEW)

    def list_followup_required(self) -> List[Feedback]:
        return self._ordered(
            self.db.query(Feedback).filter(Feedback.wants_followup.is_(True))
        ).all()

    def delete_feedback(self, feedback_id: int) -> None:
        feedback = self.get_feedback(feedback_id)

        try:
            self.db.delete(feedback)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error deleting feedback {feedback_id}: {e}")
            raise

        logger.info(f"Deleted feedback {feedback_id}")

    def _find_for_review(self, review_id: int) -> Optional[Feedback]:
        return self.db.query(Feedback).filter(Feedback.review_id == review_id).first()

    @staticmethod
    def _ordered(query):
        return query.order_by(Feedback.created_at.desc(), Feedback.id.desc())
