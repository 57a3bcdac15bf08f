"""
Shared fixtures: a fresh SQLite file database per test, an app bound to
it, and one admin and one committee account.
"""
import os

# Must be set before halloffame reads its settings
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.database import Database
from halloffame.main import create_app
from halloffame.orm.user import UserRole
from halloffame.security.rbac import Identity
from halloffame.tests.helpers import make_user


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as s:
        yield s


@pytest_asyncio.fixture
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """ASGITransport skips lifespan; the database fixture already created the tables."""
    app = create_app(database=database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def admin(database: Database) -> Identity:
    return await make_user(database, "admin", UserRole.admin)


@pytest_asyncio.fixture
async def committee(database: Database) -> Identity:
    return await make_user(database, "member1", UserRole.committee)
