# backend/modules/auth/routes/user_admin_routes.py

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.auth import require_admin
from core.database import get_db
from modules.auth.models.user_models import User
from modules.auth.schemas.user_schemas import RoleAssignment, UserResponse
from modules.auth.services.user_service import UserService

router = APIRouter(prefix="/admin/users", tags=["Admin - Users"])


@router.get("", response_model=List[UserResponse])
async def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return UserService(db).list_users()


@router.put("/{user_id}/role", response_model=UserResponse)
async def assign_role(
    user_id: int,
    assignment: RoleAssignment,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Promote a user to admin or demote them back to customer."""
    return UserService(db).assign_role(user_id, assignment.role, current_user)
