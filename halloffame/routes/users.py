"""
halloffame/routes/users.py
User management (admin only)
"""
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.database import get_db
from halloffame.schemas.auth import UserResponse
from halloffame.security.rbac import Identity, require_admin
from halloffame.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=List[UserResponse])
async def list_users(
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await UserService.list_users(db)


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete an account. Admins cannot delete themselves."""
    await UserService.delete_user(db, admin, user_id)
    return {"message": "User deleted successfully"}
