# backend/modules/auth/models/user_models.py

import enum

from sqlalchemy import Boolean, Column, Enum, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import TimestampMixin


class UserRole(str, enum.Enum):
    """Principal roles"""
    CUSTOMER = "customer"
    ADMIN = "admin"


class AuthProvider(str, enum.Enum):
    """Identity providers that can vouch for a user"""
    GOOGLE = "google"
    FACEBOOK = "facebook"
    GITHUB = "github"


class User(Base, TimestampMixin):
    """A person known to the platform through an external identity provider"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=True)
    image_url = Column(String(500), nullable=True)

    provider = Column(Enum(AuthProvider, name="auth_provider"), nullable=False)
    provider_id = Column(String(255), nullable=False)

    role = Column(
        Enum(UserRole, name="user_role"), nullable=False, default=UserRole.CUSTOMER
    )
    is_active = Column(Boolean, nullable=False, default=True)

    businesses = relationship("BusinessProfile", back_populates="created_by")
    reviews = relationship("Review", back_populates="customer")

    __table_args__ = (
        UniqueConstraint("provider", "provider_id", name="uq_users_provider_identity"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"
