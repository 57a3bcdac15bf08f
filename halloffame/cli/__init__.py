#!/usr/bin/env python3
"""
Hall of Fame nominations maintenance CLI

Usage:
    python -m halloffame.cli <command> [options]

Commands:
    db           Database operations (init)
    users        Account operations (create-admin, create-committee)
    nominations  Nomination data (import, export, duplicates, rename)

Environment:
    DATABASE_URL    async SQLAlchemy URL (default: local SQLite file)
    LOG_LEVEL       DEBUG|INFO|WARNING|ERROR
"""
import argparse
import sys
from typing import Optional

from halloffame import __version__
from halloffame.cli.db_commands import DbCommand
from halloffame.cli.nomination_commands import NominationCommand
from halloffame.cli.user_commands import UserCommand
from halloffame.config.logging_config import setup_logging


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="halloffame",
        description="Hall of Fame nominations maintenance CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s db init
  %(prog)s users create-admin admin
  %(prog)s users create-committee --member "Jane Doe:jdoe:jane@example.com"
  %(prog)s nominations import responses.csv
  %(prog)s nominations rename --name "Jon Smith" --year 1999 --to-name "John Smith"
        """
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without executing"
    )
    parser.add_argument(
        "--database-url",
        help="Override DATABASE_URL for this run"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Database commands
    db_parser = subparsers.add_parser("db", help="Database operations")
    db_subparsers = db_parser.add_subparsers(dest="db_action")
    db_subparsers.add_parser("init", help="Create missing tables")

    # User commands
    users_parser = subparsers.add_parser("users", help="Account operations")
    users_subparsers = users_parser.add_subparsers(dest="users_action")

    admin_parser = users_subparsers.add_parser("create-admin", help="Create or reset an admin account")
    admin_parser.add_argument("username", help="Admin username")
    admin_parser.add_argument("--password", help="Password (generated when omitted)")

    committee_parser = users_subparsers.add_parser(
        "create-committee", help="Create committee accounts with generated passwords"
    )
    committee_parser.add_argument(
        "--member", action="append", metavar="NAME:USERNAME[:EMAIL]", help="Member to create (repeatable)"
    )
    committee_parser.add_argument("--file", help="CSV file with name, username, email columns")

    # Nomination commands
    nominations_parser = subparsers.add_parser("nominations", help="Nomination data")
    nominations_subparsers = nominations_parser.add_subparsers(dest="nominations_action")

    import_parser = nominations_subparsers.add_parser("import", help="Import nominations from CSV or JSON")
    import_parser.add_argument("file", help="CSV form export or JSON file")
    import_parser.add_argument("--as-user", help="Attribute nominations to this user (default: first admin)")

    export_parser = nominations_subparsers.add_parser("export", help="Export nominations to JSON")
    export_parser.add_argument("file", help="Output path")

    nominations_subparsers.add_parser("duplicates", help="List people with more than one nomination")

    rename_parser = nominations_subparsers.add_parser(
        "rename", help="Merge one person into another (fixes misspelt names or years)"
    )
    rename_parser.add_argument("--name", required=True, help="Current name")
    rename_parser.add_argument("--year", help="Current year (omit for unknown)")
    rename_parser.add_argument("--to-name", required=True, help="New name")
    rename_parser.add_argument("--to-year", help="New year (omit for unknown)")

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        return 1

    setup_logging(parsed.log_level)

    command_map = {
        "db": DbCommand,
        "users": UserCommand,
        "nominations": NominationCommand,
    }

    handler = command_map[parsed.command](dry_run=parsed.dry_run, database_url=parsed.database_url)
    return handler.execute(parsed)


if __name__ == "__main__":
    sys.exit(main())
