# backend/modules/feedback/models/feedback_models.py

import enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from core.database import Base
from core.mixins import CreatedAtMixin, TimestampMixin


class FeedbackStatus(str, enum.Enum):
    """Feedback processing status"""
    NEW = "new"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


# Database Models
class Review(Base, TimestampMixin):
    """A star rating left for a business, by a signed-in or anonymous customer"""
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    rating = Column(Integer, nullable=False, index=True)  # 1 to 5
    comment = Column(Text, nullable=True)

    business_profile_id = Column(
        Integer,
        ForeignKey("business_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # NULL for anonymous submissions
    customer_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Contact details; copied from the account or typed in by anonymous visitors
    is_anonymous = Column(Boolean, nullable=False, default=False)
    customer_name = Column(String(255), nullable=True)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(20), nullable=True)

    redirected_to_google = Column(Boolean, nullable=False, default=False)

    business_profile = relationship("BusinessProfile", back_populates="reviews")
    customer = relationship("User", back_populates="reviews")
    feedback = relationship(
        "Feedback",
        back_populates="review",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint(
            "customer_id", "business_profile_id", name="uq_reviews_customer_business"
        ),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        Index("idx_reviews_business_rating", "business_profile_id", "rating"),
    )

    def __repr__(self):
        return f"<Review(id={self.id}, business={self.business_profile_id}, rating={self.rating})>"


class Feedback(Base, CreatedAtMixin):
    """Private follow-up a customer leaves after a low rating"""
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, index=True)
    review_id = Column(
        Integer,
        ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    feedback_text = Column(Text, nullable=True)

    # Structured answers from the feedback form
    service_quality = Column(String(255), nullable=True)
    staff_behavior = Column(String(255), nullable=True)
    cleanliness = Column(String(255), nullable=True)
    value_for_money = Column(String(255), nullable=True)
    overall_experience = Column(String(255), nullable=True)
    suggestions = Column(Text, nullable=True)

    # Follow-up contact
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(20), nullable=True)
    wants_followup = Column(Boolean, nullable=False, default=False)

    # Handling
    status = Column(
        Enum(FeedbackStatus, name="feedback_status"),
        nullable=False,
        default=FeedbackStatus.NEW,
        index=True,
    )
    admin_response = Column(Text, nullable=True)
    responded_at = Column(DateTime, nullable=True)

    review = relationship("Review", back_populates="feedback")

    __table_args__ = (
        Index("idx_feedback_status_created", "status", "created_at"),
    )

    @property
    def business_profile_id(self):
        return self.review.business_profile_id if self.review else None

    @property
    def rating(self):
        return self.review.rating if self.review else None

    def __repr__(self):
        return f"<Feedback(id={self.id}, review={self.review_id}, status={self.status})>"
