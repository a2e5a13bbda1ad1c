# backend/modules/businesses/routes/admin_business_routes.py

import logging
from typing import List, Optional

import pydantic
from fastapi import APIRouter, Depends, File, Form, Path, UploadFile
from sqlalchemy.orm import Session

from core.auth import require_admin
from core.database import get_db
from core.exceptions import ValidationError
from modules.auth.models.user_models import User
from modules.businesses.schemas.business_schemas import (
    BusinessProfileCreate,
    BusinessProfileResponse,
    ImageUpload,
)
from modules.businesses.services.business_service import BusinessService, validate_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/businesses", tags=["Admin - Businesses"])


def business_form(
    business_name: str = Form(...),
    phone_number: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    facebook_url: Optional[str] = Form(None),
    instagram_url: Optional[str] = Form(None),
    twitter_url: Optional[str] = Form(None),
    linkedin_url: Optional[str] = Form(None),
    website_url: Optional[str] = Form(None),
    google_review_url: Optional[str] = Form(None),
) -> BusinessProfileCreate:
    """Collect the multipart text parts into a validated profile"""
    try:
        return BusinessProfileCreate(
            business_name=business_name,
            phone_number=phone_number,
            address=address,
            description=description,
            facebook_url=facebook_url,
            instagram_url=instagram_url,
            twitter_url=twitter_url,
            linkedin_url=linkedin_url,
            website_url=website_url,
            google_review_url=google_review_url,
        )
    except pydantic.ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise ValidationError(f"Invalid business profile fields: {fields}")


async def image_part(image: Optional[UploadFile] = File(None)) -> Optional[ImageUpload]:
    if image is None:
        return None
    data = await image.read()
    return validate_image(image.filename, image.content_type, data)


@router.get("/mine", response_model=List[BusinessProfileResponse])
async def list_my_businesses(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return BusinessService(db).list_for_owner(current_user)


@router.post("", response_model=BusinessProfileResponse, status_code=201)
async def create_business(
    data: BusinessProfileCreate = Depends(business_form),
    image: Optional[ImageUpload] = Depends(image_part),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Create a business profile owned by the calling admin (multipart form)"""
    return BusinessService(db).create(data, current_user, image)


@router.put("/{business_id}", response_model=BusinessProfileResponse)
async def update_business(
    business_id: int = Path(..., description="Business ID"),
    data: BusinessProfileCreate = Depends(business_form),
    image: Optional[ImageUpload] = Depends(image_part),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Replace a business profile's fields. Only its owner may do this."""
    return BusinessService(db).update(business_id, data, current_user, image)


@router.delete("/{business_id}")
async def delete_business(
    business_id: int = Path(..., description="Business ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Delete a business and, with it, all of its reviews and feedback"""
    BusinessService(db).delete(business_id, current_user)
    return {"message": "Business deleted successfully"}
