"""
Authentication routes for the ReviewGate API.

The OAuth2 dance happens at the identity gateway. It posts the verified
claims here, authenticated by a shared secret, and receives a bearer token
for the user.
"""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from core.auth import create_access_token, get_current_user, get_current_user_optional
from core.config import settings
from core.database import get_db
from core.exceptions import AuthenticationError
from core.permissions import is_admin
from modules.auth.models.user_models import User
from modules.auth.schemas.user_schemas import (
    AuthStatus,
    IdentityClaims,
    TokenResponse,
    UserResponse,
)
from modules.auth.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _verify_gateway_secret(provided: Optional[str]) -> None:
    expected = settings.IDENTITY_PROVIDER_SECRET
    if not expected or not provided or not secrets.compare_digest(provided, expected):
        logger.warning("Rejected identity hand-over with invalid gateway secret")
        raise AuthenticationError("Invalid identity provider credentials")


@router.post("/session", response_model=TokenResponse)
async def create_session(
    claims: IdentityClaims,
    x_identity_provider_secret: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    """
    Exchange verified identity claims for an API access token.

    ## Headers
    - **X-Identity-Provider-Secret**: shared secret of the OAuth2 gateway

    ## Response
    A bearer token plus the user record. First-time users are created as
    customers unless their email is in the admin seed list.
    """
    _verify_gateway_secret(x_identity_provider_secret)

    user = UserService(db).sync_identity(claims)
    if not user.is_active:
        raise AuthenticationError("User account is disabled")

    token = create_access_token({"sub": user.id, "email": user.email})
    logger.info(f"Issued access token for user {user.id}")

    return TokenResponse(
        access_token=token,
        expires_in=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserResponse.model_validate(user),
    )


@router.get("/user", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/status", response_model=AuthStatus)
async def auth_status(current_user: Optional[User] = Depends(get_current_user_optional)):
    """Report whether the caller is signed in, without failing when they are not."""
    if current_user is None:
        return AuthStatus(authenticated=False)

    return AuthStatus(
        authenticated=True,
        user=UserResponse.model_validate(current_user),
        is_admin=is_admin(current_user),
    )
