"""
Shared plumbing for CLI command handlers.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.config.settings import get_settings
from halloffame.database import Database
from halloffame.errors import APIError

logger = logging.getLogger(__name__)


class Command:
    """Base CLI command handler."""

    def __init__(self, dry_run: bool = False, database_url: Optional[str] = None):
        self.dry_run = dry_run
        self.database_url = database_url

    def open_database(self) -> Database:
        if self.database_url:
            return Database(self.database_url)
        return Database.from_settings(get_settings())

    def run(self, handler: Callable[[AsyncSession], Awaitable[int]]) -> int:
        """Open the store, run handler with a session, and always dispose."""

        async def _run() -> int:
            database = self.open_database()
            try:
                await database.create_all()
                async with database.session() as session:
                    return await handler(session)
            finally:
                await database.dispose()

        try:
            return asyncio.run(_run())
        except APIError as e:
            logger.debug(f"Command failed with {e.code}")
            print(f"Error: {e.message}")
            return 1
