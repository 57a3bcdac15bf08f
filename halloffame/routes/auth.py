"""
halloffame/routes/auth.py
Login, account registration and password change
"""
import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.config.settings import get_settings
from halloffame.database import get_db
from halloffame.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserInfo,
)
from halloffame.security.rbac import Identity, get_current_identity, limiter, require_admin
from halloffame.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

settings = get_settings()


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,  # Required by slowapi
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Exchange username and password for a bearer token."""
    token, identity = await UserService.login(db, credentials.username, credentials.password)
    return LoginResponse(token=token, user=UserInfo(**identity.to_dict()))


@router.post(
    "/register",
    response_model=RegisterResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create an account (admin only)."""
    user = await UserService.create_user(db, payload.username, payload.password, payload.role)
    logger.info(f"{admin.username} registered {user.username} as {user.role.value}")
    return RegisterResponse(message="User created successfully", user_id=user.id)


@router.post("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    await UserService.change_password(db, identity, payload.current_password, payload.new_password)
    return {"message": "Password changed successfully"}


@router.get("/me", response_model=UserInfo)
async def me(identity: Identity = Depends(get_current_identity)):
    return UserInfo(**identity.to_dict())
