# backend/modules/businesses/schemas/business_schemas.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

PHONE_PATTERN = r"^[+]?[0-9]{10,15}$"


class BusinessProfileBase(BaseModel):
    business_name: str = Field(..., min_length=1, max_length=255)
    phone_number: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, max_length=5000)
    facebook_url: Optional[str] = Field(None, max_length=500)
    instagram_url: Optional[str] = Field(None, max_length=500)
    twitter_url: Optional[str] = Field(None, max_length=500)
    linkedin_url: Optional[str] = Field(None, max_length=500)
    website_url: Optional[str] = Field(None, max_length=500)
    google_review_url: Optional[str] = Field(None, max_length=500)

    @field_validator(
        "phone_number",
        "address",
        "description",
        "facebook_url",
        "instagram_url",
        "twitter_url",
        "linkedin_url",
        "website_url",
        "google_review_url",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        # multipart forms send empty strings for untouched inputs
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("business_name")
    @classmethod
    def validate_business_name(cls, v):
        if not v.strip():
            raise ValueError("Business name is required")
        return v.strip()


class BusinessProfileCreate(BusinessProfileBase):
    pass


class BusinessProfileResponse(BaseModel):
    id: int
    business_name: str
    phone_number: Optional[str]
    address: Optional[str]
    description: Optional[str]
    facebook_url: Optional[str]
    instagram_url: Optional[str]
    twitter_url: Optional[str]
    linkedin_url: Optional[str]
    website_url: Optional[str]
    google_review_url: Optional[str]
    image_name: Optional[str]
    image_type: Optional[str]
    has_image: bool
    created_by_id: Optional[int]
    average_rating: float
    total_reviews: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ImageUpload(BaseModel):
    """Validated image part of a multipart request"""

    filename: str
    content_type: str
    data: bytes
