"""
halloffame/routes/admin.py
Admin bulk import
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.database import get_db
from halloffame.schemas.nominations import ImportRequest, ImportResult
from halloffame.security.rbac import Identity, require_admin
from halloffame.services.nomination_service import NominationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/import-nominations", response_model=ImportResult, response_model_by_alias=True)
async def import_nominations(
    payload: ImportRequest,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Import many nominations at once.

    Each row is validated and stored on its own; failed rows are listed
    in the response and do not stop the others.
    """
    logger.info(f"Bulk import of {len(payload.nominations)} rows by {admin.username}")
    return await NominationService.bulk_import(db, payload.nominations, created_by=admin.id)
