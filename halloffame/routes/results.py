"""
halloffame/routes/results.py
Ranked results and dashboard stats
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.database import get_db
from halloffame.schemas.results import Stats
from halloffame.security.rbac import Identity, get_current_identity
from halloffame.services.aggregation_service import AggregationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Results"])


@router.get("/results")
async def get_results(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """
    Every nominated person ranked by selection count.
    Admins also see who selected each person.
    """
    entries = await AggregationService.results(db, include_voters=identity.is_admin)
    if identity.is_admin:
        return [entry.model_dump() for entry in entries]
    return [entry.model_dump(exclude={"voters"}) for entry in entries]


@router.get("/stats", response_model=Stats)
async def get_stats(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    return await AggregationService.stats(db, identity.id)
