# backend/modules/businesses/services/business_service.py

import logging
from typing import List, Optional

from sqlalchemy.orm import Session, undefer

from core.config import settings
from core.exceptions import NotFoundError, ValidationError
from core.permissions import require_owner
from modules.auth.models.user_models import User
from modules.businesses.models.business_models import BusinessProfile
from modules.businesses.schemas.business_schemas import (
    BusinessProfileCreate,
    ImageUpload,
)

logger = logging.getLogger(__name__)


def validate_image(filename: Optional[str], content_type: Optional[str], data: bytes) -> Optional[ImageUpload]:
    """
    Check an uploaded image part.

    Returns None for an empty part (no file chosen in the form).

    Raises:
        ValidationError: Wrong content type or file too large
    """
    if not data:
        return None

    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Only image uploads are allowed")

    if len(data) > settings.max_upload_size_bytes:
        raise ValidationError(
            f"Image exceeds the {settings.MAX_UPLOAD_SIZE_MB}MB upload limit"
        )

    return ImageUpload(filename=filename or "image", content_type=content_type, data=data)


class BusinessService:
    """Business profile management"""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[BusinessProfile]:
        return self.db.query(BusinessProfile).order_by(BusinessProfile.id).all()

    def list_top_rated(self) -> List[BusinessProfile]:
        return (
            self.db.query(BusinessProfile)
            .order_by(BusinessProfile.average_rating.desc(), BusinessProfile.total_reviews.desc())
            .all()
        )

    def get(self, business_id: int) -> BusinessProfile:
        business = (
            self.db.query(BusinessProfile)
            .filter(BusinessProfile.id == business_id)
            .first()
        )
        if not business:
            raise NotFoundError(f"Business with ID {business_id} not found")
        return business

    def search(self, name: str) -> List[BusinessProfile]:
        """Case-insensitive substring match on the business name"""
        term = (name or "").strip()
        if not term:
            return []
        return (
            self.db.query(BusinessProfile)
            .filter(BusinessProfile.business_name.ilike(f"%{term}%"))
            .order_by(BusinessProfile.business_name)
            .all()
        )

    def list_for_owner(self, owner: User) -> List[BusinessProfile]:
        return (
            self.db.query(BusinessProfile)
            .filter(BusinessProfile.created_by_id == owner.id)
            .order_by(BusinessProfile.id)
            .all()
        )

    def create(
        self,
        data: BusinessProfileCreate,
        owner: User,
        image: Optional[ImageUpload] = None,
    ) -> BusinessProfile:
        try:
            business = BusinessProfile(
                **data.model_dump(),
                created_by_id=owner.id,
                average_rating=0.0,
                total_reviews=0,
            )
            if image:
                self._apply_image(business, image)

            self.db.add(business)
            self.db.commit()
            self.db.refresh(business)

            logger.info(f"Created business {business.id} for owner {owner.id}")
            return business

        except Exception as e:
            self.db.rollback()
            logger.error(f"Error creating business: {e}")
            raise

    def update(
        self,
        business_id: int,
        data: BusinessProfileCreate,
        principal: User,
        image: Optional[ImageUpload] = None,
    ) -> BusinessProfile:
        business = self.get(business_id)
        require_owner(business, principal)

        try:
            for field, value in data.model_dump().items():
                setattr(business, field, value)
            if image:
                self._apply_image(business, image)

            self.db.commit()
            self.db.refresh(business)

            logger.info(f"Updated business {business.id}")
            return business

        except Exception as e:
            self.db.rollback()
            logger.error(f"Error updating business {business_id}: {e}")
            raise

    def delete(self, business_id: int, principal: User) -> None:
        """Delete a business together with its reviews and their feedback"""
        business = self.get(business_id)
        require_owner(business, principal)

        try:
            self.db.delete(business)
            self.db.commit()
            logger.info(f"Deleted business {business_id} by user {principal.id}")

        except Exception as e:
            self.db.rollback()
            logger.error(f"Error deleting business {business_id}: {e}")
            raise

    def get_image(self, business_id: int) -> BusinessProfile:
        business = (
            self.db.query(BusinessProfile)
            .options(undefer(BusinessProfile.image_data))
            .filter(BusinessProfile.id == business_id)
            .first()
        )
        if not business:
            raise NotFoundError(f"Business with ID {business_id} not found")
        if not business.image_data:
            raise NotFoundError(f"Business {business_id} has no image")
        return business

    @staticmethod
    def _apply_image(business: BusinessProfile, image: ImageUpload) -> None:
        business.image_name = image.filename
        business.image_type = image.content_type
        business.image_data = image.data
