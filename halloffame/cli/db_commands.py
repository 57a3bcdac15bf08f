"""
Database CLI commands: init
"""
import asyncio

from halloffame.cli.base import Command


class DbCommand(Command):
    """Database CLI command handler."""

    def execute(self, args) -> int:
        if args.db_action == "init":
            return self._init(args)
        print("Error: Unknown database action")
        return 1

    def _init(self, args) -> int:
        """Create any missing tables."""
        print("=== Database Initialization ===")

        database = self.open_database()
        if self.dry_run:
            print(f"[DRY RUN] Would create tables on {database.dialect}")
            asyncio.run(database.dispose())
            return 0

        async def _create() -> None:
            try:
                await database.create_all()
            finally:
                await database.dispose()

        try:
            asyncio.run(_create())
        except Exception as e:
            print(f"Initialization failed: {e}")
            return 1

        print("✓ Tables ready")
        return 0
