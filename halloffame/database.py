"""
halloffame/database.py
Relational store handle with an explicit lifecycle

A Database is opened at process start (API lifespan or CLI command),
handed to whoever needs it, and disposed at shutdown. Request handlers
receive sessions through the get_db dependency.
"""
import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from halloffame.config.settings import Settings, get_settings
from halloffame.orm import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Async engine plus session factory."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url

        if url.startswith("sqlite"):
            # SQLite: default pool, busy timeout for concurrent writers
            self.engine = create_async_engine(
                url,
                echo=echo,
                connect_args={"timeout": 30.0},
            )
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        else:
            # PostgreSQL/MySQL: standard pool
            self.engine = create_async_engine(
                url,
                echo=echo,
                pool_pre_ping=True,
                pool_size=10,
                max_overflow=20,
                pool_timeout=30,
                pool_recycle=3600,
            )

        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Database":
        settings = settings or get_settings()
        return cls(settings.DATABASE_URL, echo=settings.SQL_ECHO)

    @property
    def dialect(self) -> str:
        return self.engine.url.get_backend_name()

    def session(self) -> AsyncSession:
        return self.sessionmaker()

    async def create_all(self) -> None:
        """Create missing tables. Idempotent."""
        logger.info(f"Initializing database ({self.dialect})...")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("✓ Database initialization complete")

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connection closed")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting an async session from the app's Database"""
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        finally:
            await session.close()
