# backend/modules/auth/schemas/user_schemas.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from modules.auth.models.user_models import AuthProvider, UserRole


class IdentityClaims(BaseModel):
    """Verified claims handed over by the OAuth2 gateway"""

    provider: AuthProvider
    provider_id: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    name: Optional[str] = Field(None, max_length=255)
    image_url: Optional[str] = Field(None, max_length=500)

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, v):
        return v.lower() if isinstance(v, str) else v


class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str]
    image_url: Optional[str] = None
    provider: AuthProvider
    role: UserRole
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class AuthStatus(BaseModel):
    authenticated: bool
    user: Optional[UserResponse] = None
    is_admin: bool = False


class RoleAssignment(BaseModel):
    role: UserRole
