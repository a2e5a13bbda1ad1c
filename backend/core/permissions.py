# backend/core/permissions.py

"""
Ownership and role checks shared by services and routes.

The predicates are pure; ``require_*`` wrappers raise ``ForbiddenError``.
"""

from typing import TYPE_CHECKING, Optional

from .exceptions import ForbiddenError

if TYPE_CHECKING:
    from modules.auth.models.user_models import User
    from modules.businesses.models.business_models import BusinessProfile


def is_admin(user: Optional["User"]) -> bool:
    return user is not None and user.is_admin


def is_owner(business: "BusinessProfile", user: Optional["User"]) -> bool:
    """True when ``user`` created ``business``. Admin status is not considered."""
    if user is None or business is None:
        return False
    return business.created_by_id is not None and business.created_by_id == user.id


def require_owner(business: "BusinessProfile", user: "User") -> None:
    """
    Raise unless ``user`` owns ``business``.

    Raises:
        ForbiddenError: If the caller did not create the business
    """
    if not is_owner(business, user):
        raise ForbiddenError("You do not own this business profile")


def require_admin(user: Optional["User"]) -> None:
    if not is_admin(user):
        raise ForbiddenError("Admin role required")
