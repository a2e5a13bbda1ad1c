# backend/modules/auth/services/user_service.py

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import NotFoundError, ValidationError
from core.permissions import require_admin
from modules.auth.models.user_models import AuthProvider, User, UserRole
from modules.auth.schemas.user_schemas import IdentityClaims

logger = logging.getLogger(__name__)


class UserService:
    """Lookups and role management for platform users"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    def sync_identity(self, claims: IdentityClaims) -> User:
        """
        Create or refresh a user from identity-provider claims.

        A user is matched by provider identity first, then by email. The
        admin seed list only decides the role of a brand new record; an
        existing user's role is never touched here.
        """
        email = claims.email.lower()
        provider = AuthProvider(claims.provider)

        try:
            user = (
                self.db.query(User)
                .filter(User.provider == provider, User.provider_id == claims.provider_id)
                .first()
            )
            if user is None:
                user = self.get_by_email(email)

            if user is None:
                role = (
                    UserRole.ADMIN
                    if email in settings.ADMIN_SEED_EMAILS
                    else UserRole.CUSTOMER
                )
                user = User(
                    email=email,
                    name=claims.name,
                    image_url=claims.image_url,
                    provider=provider,
                    provider_id=claims.provider_id,
                    role=role,
                )
                self.db.add(user)
                logger.info(f"Created user {email} with role {role.value}")
            else:
                user.email = email
                user.provider = provider
                user.provider_id = claims.provider_id
                if claims.name:
                    user.name = claims.name
                if claims.image_url:
                    user.image_url = claims.image_url

            self.db.commit()
            self.db.refresh(user)
            return user

        except Exception as e:
            self.db.rollback()
            logger.error(f"Error syncing identity for {email}: {e}")
            raise

    def assign_role(self, user_id: int, role: UserRole, acting_admin: User) -> User:
        """Explicit promotion/demotion. The only path that changes a role."""
        require_admin(acting_admin)
        user = self.get(user_id)

        if user.id == acting_admin.id and role != UserRole.ADMIN:
            raise ValidationError("Admins cannot remove their own admin role")

        previous = user.role
        try:
            user.role = role
            self.db.commit()
            self.db.refresh(user)

        except Exception as e:
            self.db.rollback()
            logger.error(f"Error changing role of user {user_id}: {e}")
            raise

        logger.info(
            f"User {acting_admin.id} changed role of user {user.id} "
            f"from {previous.value} to {role.value}"
        )
        return user
