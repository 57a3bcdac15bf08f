"""
halloffame/routes/health.py
"""
from fastapi import APIRouter

from halloffame import __version__
from halloffame.config.settings import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "environment": get_settings().ENVIRONMENT,
        "version": __version__,
    }
