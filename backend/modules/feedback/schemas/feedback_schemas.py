# backend/modules/feedback/schemas/feedback_schemas.py

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from modules.feedback.models.feedback_models import FeedbackStatus


def _strip_or_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


# Review schemas
class ReviewCreate(BaseModel):
    """Schema for creating a review as a signed-in customer.

    Rating bounds are enforced by ReviewService so an out-of-range value is
    reported as a 400 like every other business-rule violation.
    """

    rating: int
    comment: Optional[str] = Field(None, max_length=2000)

    @field_validator("comment", mode="before")
    @classmethod
    def clean_comment(cls, v):
        return _strip_or_none(v)


class AnonymousReviewCreate(ReviewCreate):
    """Schema for a review left without signing in"""

    is_anonymous: bool = True
    customer_name: Optional[str] = Field(None, max_length=255)
    customer_email: Optional[EmailStr] = None
    customer_phone: Optional[str] = Field(None, max_length=20)

    @field_validator("customer_name", "customer_email", "customer_phone", mode="before")
    @classmethod
    def clean_contact(cls, v):
        return _strip_or_none(v)


class ReviewUpdate(ReviewCreate):
    """Schema for updating a review"""
    pass


class ReviewResponse(BaseModel):
    """Public view of a review"""

    id: int
    rating: int
    comment: Optional[str]
    business_profile_id: int
    customer_id: Optional[int]
    is_anonymous: bool
    customer_name: Optional[str]
    redirected_to_google: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ReviewAdminResponse(ReviewResponse):
    """Review with the contact details only admins see"""

    customer_email: Optional[str]
    customer_phone: Optional[str]


class ReviewSubmissionResponse(BaseModel):
    """What the client needs after submitting a rating"""

    review: ReviewResponse
    should_redirect_to_google: bool
    should_show_feedback_form: bool
    google_review_url: Optional[str] = None
    message: str


class ReviewCheckResponse(BaseModel):
    business_id: int
    has_reviewed: bool


# Feedback schemas
class FeedbackCreate(BaseModel):
    """Answers from the feedback form shown after a low rating"""

    feedback_text: Optional[str] = Field(None, max_length=5000)
    service_quality: Optional[str] = Field(None, max_length=255)
    staff_behavior: Optional[str] = Field(None, max_length=255)
    cleanliness: Optional[str] = Field(None, max_length=255)
    value_for_money: Optional[str] = Field(None, max_length=255)
    overall_experience: Optional[str] = Field(None, max_length=255)
    suggestions: Optional[str] = Field(None, max_length=5000)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=20)
    wants_followup: bool = False

    @field_validator(
        "feedback_text",
        "service_quality",
        "staff_behavior",
        "cleanliness",
        "value_for_money",
        "overall_experience",
        "suggestions",
        "contact_email",
        "contact_phone",
        mode="before",
    )
    @classmethod
    def clean_text(cls, v):
        return _strip_or_none(v)


class FeedbackStatusUpdate(BaseModel):
    status: FeedbackStatus
    admin_response: Optional[str] = Field(None, max_length=5000)


class FeedbackResponse(BaseModel):
    id: int
    review_id: int
    business_profile_id: Optional[int]
    rating: Optional[int]
    feedback_text: Optional[str]
    service_quality: Optional[str]
    staff_behavior: Optional[str]
    cleanliness: Optional[str]
    value_for_money: Optional[str]
    overall_experience: Optional[str]
    suggestions: Optional[str]
    contact_email: Optional[str]
    contact_phone: Optional[str]
    wants_followup: bool
    status: FeedbackStatus
    admin_response: Optional[str]
    responded_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class ReconciliationResponse(BaseModel):
    checked: int
    corrected: int
    failed: int
    corrected_ids: list[int]
