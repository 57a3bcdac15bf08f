"""
halloffame/routes/nominations.py
Nomination CRUD

Any authenticated user can read; only admins can write.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.database import get_db
from halloffame.schemas.nominations import NominationCreate, NominationResponse, NominationUpdate
from halloffame.security.rbac import Identity, get_current_identity, require_admin
from halloffame.services.nomination_service import NominationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/nominations", tags=["Nominations"])


@router.get("", response_model=List[NominationResponse])
async def list_nominations(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    return await NominationService.list_all(db)


@router.get("/{nomination_id}", response_model=NominationResponse)
async def get_nomination(
    nomination_id: int,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    return await NominationService.get(db, nomination_id)


@router.post("", response_model=NominationResponse, status_code=status.HTTP_201_CREATED)
async def create_nomination(
    payload: NominationCreate,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await NominationService.create(db, payload, created_by=admin.id)


@router.put("/{nomination_id}", response_model=NominationResponse)
async def update_nomination(
    nomination_id: int,
    payload: NominationUpdate,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Partial update: fields left out of the body are not touched."""
    return await NominationService.update(db, nomination_id, payload)


@router.delete("/{nomination_id}")
async def delete_nomination(
    nomination_id: int,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await NominationService.delete(db, nomination_id)
    return {"message": "Nomination deleted successfully"}
