"""
halloffame/routes/people.py
People: nominations grouped by (name, year)
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.database import get_db
from halloffame.errors import ErrorCode, NotFoundError
from halloffame.schemas.nominations import NominationResponse, normalize_year
from halloffame.schemas.results import PersonSummary
from halloffame.security.rbac import Identity, get_current_identity
from halloffame.services.aggregation_service import AggregationService
from halloffame.services.nomination_service import NominationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/people", tags=["People"])


async def _person_nominations(db: AsyncSession, name: str, year: Optional[str]) -> List:
    nominations = await NominationService.list_by_person(db, name, year)
    if not nominations:
        raise NotFoundError("No nominations found for this person", ErrorCode.PERSON_NOT_FOUND)
    return nominations


@router.get("", response_model=List[PersonSummary])
async def list_people(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    return await AggregationService.grouped_people(db)


@router.get("/{name}/nominations", response_model=List[NominationResponse])
async def get_person_nominations_without_year(
    name: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Nominations for a person whose year is unknown."""
    return await _person_nominations(db, name, None)


@router.get("/{name}/{year}/nominations", response_model=List[NominationResponse])
async def get_person_nominations(
    name: str,
    year: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    return await _person_nominations(db, name, normalize_year(year) or None)
