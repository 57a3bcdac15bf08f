"""
halloffame/routes/setup.py
One-time bootstrap of the first admin and the committee accounts
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.config.settings import get_settings
from halloffame.database import get_db
from halloffame.schemas.auth import SetupRequest, SetupResponse
from halloffame.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/setup", tags=["Setup"])


@router.post("", response_model=SetupResponse, status_code=status.HTTP_201_CREATED)
async def run_setup(payload: SetupRequest, db: AsyncSession = Depends(get_db)):
    """
    Create the first admin plus committee accounts.

    Guarded by SETUP_KEY and refused once any admin exists. Generated
    passwords are returned once and never stored in plaintext.
    """
    credentials = await UserService.run_setup(
        db,
        setup_key=payload.setup_key,
        expected_key=get_settings().SETUP_KEY,
        admin_username=payload.admin_username,
        admin_password=payload.admin_password,
        members=payload.committee_members,
    )
    return SetupResponse(message="Setup completed successfully", credentials=credentials)
