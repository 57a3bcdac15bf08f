"""
halloffame/routes/__init__.py
Route registration. main.py mounts this router under /api.
"""
from fastapi import APIRouter

from halloffame.routes import admin, auth, ballot, health, nominations, people, results, setup, users

router = APIRouter()

router.include_router(health.router)
router.include_router(auth.router)
router.include_router(setup.router)
router.include_router(users.router)
router.include_router(nominations.router)
router.include_router(people.router)
router.include_router(ballot.router)
router.include_router(results.router)
router.include_router(admin.router)
