# backend/modules/businesses/models/business_models.py

from sqlalchemy import Column, Float, ForeignKey, Index, Integer, LargeBinary, String, Text
from sqlalchemy.orm import deferred, relationship

from core.database import Base
from core.mixins import TimestampMixin


class BusinessProfile(Base, TimestampMixin):
    """A reviewable business owned by the admin who created it"""
    __tablename__ = "business_profiles"

    id = Column(Integer, primary_key=True, index=True)
    business_name = Column(String(255), nullable=False, index=True)
    phone_number = Column(String(20), nullable=True)
    address = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)

    # Social and review links
    facebook_url = Column(String(500), nullable=True)
    instagram_url = Column(String(500), nullable=True)
    twitter_url = Column(String(500), nullable=True)
    linkedin_url = Column(String(500), nullable=True)
    website_url = Column(String(500), nullable=True)
    google_review_url = Column(String(500), nullable=True)

    # Uploaded logo; bytes are loaded only when asked for
    image_name = Column(String(255), nullable=True)
    image_type = Column(String(100), nullable=True)
    image_data = deferred(Column(LargeBinary, nullable=True))

    created_by_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Derived from reviews; written only by BusinessRatingAggregator
    average_rating = Column(Float, nullable=False, default=0.0)
    total_reviews = Column(Integer, nullable=False, default=0)

    created_by = relationship("User", back_populates="businesses")
    reviews = relationship(
        "Review",
        back_populates="business_profile",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_business_profiles_rating", "average_rating"),
    )

    @property
    def has_image(self) -> bool:
        return self.image_name is not None

    def __repr__(self):
        return f"<BusinessProfile(id={self.id}, name='{self.business_name}', rating={self.average_rating})>"
