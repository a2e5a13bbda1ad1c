"""
JWT authentication for the ReviewGate API.

Identity itself is established by an external OAuth2 provider. Once the
claims are handed over (see ``modules.auth.routes.auth_routes``) the API
issues its own short-lived bearer token, and every protected endpoint
resolves the caller back to a ``User`` row through ``get_current_user``.
Roles are read from the database on every request, never from the token,
so an admin promotion or demotion takes effect immediately.
"""

import secrets
import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db
from .exceptions import AuthenticationError
from .permissions import is_admin, require_admin as ensure_admin
from modules.auth.models.user_models import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class TokenData(BaseModel):
    user_id: int
    email: Optional[str] = None
    token_id: Optional[str] = None


def generate_token_id() -> str:
    """Generate a unique token ID for tracking."""
    return secrets.token_urlsafe(32)


def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed access token. ``data["sub"]`` must hold the user id."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update(
        {
            "exp": expire,
            "type": "access",
            "jti": generate_token_id(),
            "iat": datetime.utcnow(),
            "iss": settings.JWT_ISSUER,
        }
    )
    if "sub" in to_encode:
        to_encode["sub"] = str(to_encode["sub"])

    return jwt.encode(
        to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )


def verify_token(token: str) -> Optional[TokenData]:
    """
    Verify and decode an access token.

    Returns:
        TokenData if valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
            options={"require_exp": True, "require_iat": True},
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Token has expired")
        return None
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None

    if payload.get("type") != "access":
        logger.warning(f"Token type mismatch: got {payload.get('type')}")
        return None

    try:
        user_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        return None

    return TokenData(
        user_id=user_id,
        email=payload.get("email"),
        token_id=payload.get("jti"),
    )


def _resolve_user(
    credentials: Optional[HTTPAuthorizationCredentials], db: Session
) -> User:
    if not credentials:
        raise AuthenticationError("Not authenticated")

    token_data = verify_token(credentials.credentials)
    if token_data is None:
        raise AuthenticationError("Could not validate credentials")

    user = db.query(User).filter(User.id == token_data.user_id).first()
    if user is None or not user.is_active:
        raise AuthenticationError("Could not validate credentials")

    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the authenticated caller or fail with 401."""
    return _resolve_user(credentials, db)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Get current user if authenticated, None otherwise."""
    if not credentials:
        return None

    try:
        return _resolve_user(credentials, db)
    except AuthenticationError:
        return None


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Gate for every /admin route."""
    if not is_admin(current_user):
        logger.warning(f"User {current_user.id} denied admin access")
    ensure_admin(current_user)
    return current_user
