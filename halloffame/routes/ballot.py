"""
halloffame/routes/ballot.py
The caller's own ballot

A submission replaces the caller's whole selection set, so re-sending
the same ballot is idempotent.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.database import get_db
from halloffame.schemas.ballot import BallotSaved, BallotSubmission, SelectionResponse
from halloffame.security.rbac import Identity, get_current_identity
from halloffame.services.ballot_service import BallotService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ballot", tags=["Ballot"])


@router.get("/my-selections", response_model=List[SelectionResponse])
async def my_selections(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    return await BallotService.get_selections(db, identity.id)


@router.post("", response_model=BallotSaved)
async def submit_ballot(
    payload: BallotSubmission,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    count = await BallotService.replace_selections(db, identity.id, payload.selections)
    return BallotSaved(count=count)
