"""
Nomination CLI commands: import, export, duplicates, rename

CSV files exported from the nomination form are read with their
question headers mapped onto nomination fields. JSON files may hold a
list of rows or {"nominations": [...]}, the same shape that export
writes.
"""
import csv
import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from halloffame.cli.base import Command
from halloffame.orm.nomination import NOMINATION_TEXT_FIELDS
from halloffame.services.aggregation_service import AggregationService
from halloffame.services.nomination_service import NominationService
from halloffame.services.user_service import UserService

# Form question -> nomination field
COLUMN_MAPPING = {
    "Name of the Nominee": "name",
    "Graduation Year": "year",
    "Career / Position / Title": "career_position",
    "Professional Achievements": "professional_achievements",
    "Professional Awards and Honors": "professional_awards",
    "Educational Achievements": "educational_achievements",
    "Merit Awards": "merit_awards",
    "Service to Church and Community": "service_church_community",
    "Service to MBAPHS": "service_mbaphs",
    "Nomination Summary / Narrative": "nomination_summary",
    "Your Name": "nominator_name",
    "Email": "nominator_email",
    "Phone": "nominator_phone",
}

IMPORT_FIELDS = ("name", "year") + NOMINATION_TEXT_FIELDS


def normalize_headers(headers: List[str]) -> List[str]:
    """Collapse whitespace and number repeated headers ("Email", "Email 2")."""
    seen: Dict[str, int] = {}
    result = []
    for header in headers:
        normalized = re.sub(r"\s+", " ", header).strip()
        if normalized in seen:
            seen[normalized] += 1
            result.append(f"{normalized} {seen[normalized]}")
        else:
            seen[normalized] = 1
            result.append(normalized)
    return result


def _field_for(header: str) -> Optional[str]:
    if header in COLUMN_MAPPING:
        return COLUMN_MAPPING[header]
    if header in IMPORT_FIELDS:
        return header
    return None


def read_csv_rows(path: str) -> List[Dict[str, Optional[str]]]:
    """
    Parse a CSV export into import rows.

    Blank cells become None, fully blank lines are skipped and
    unrecognised columns are ignored.
    """
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.reader(f)
        headers = normalize_headers(next(reader, []))
        fields = [_field_for(header) for header in headers]

        rows = []
        for values in reader:
            if not any(value.strip() for value in values):
                continue
            row: Dict[str, Optional[str]] = {}
            for field, value in zip(fields, values):
                if field is None:
                    continue
                value = value.strip()
                row[field] = value or None
            rows.append(row)
    return rows


def read_json_rows(path: str) -> List[Any]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("nominations")
    if not isinstance(data, list):
        raise ValueError("Expected a list of nominations or {\"nominations\": [...]}")
    return data


def load_rows(path: str) -> List[Any]:
    if Path(path).suffix.lower() == ".json":
        return read_json_rows(path)
    return read_csv_rows(path)


class NominationCommand(Command):
    """Nomination CLI command handler."""

    def execute(self, args) -> int:
        actions = {
            "import": self._import,
            "export": self._export,
            "duplicates": self._duplicates,
            "rename": self._rename,
        }
        action = actions.get(args.nominations_action)
        if action is None:
            print("Error: Unknown nominations action")
            return 1
        return action(args)

    def _import(self, args) -> int:
        print(f"Starting import from: {args.file}")
        try:
            rows = load_rows(args.file)
        except (OSError, ValueError) as e:
            print(f"Error: {e}")
            return 1
        print(f"Parsed {len(rows)} rows")

        if self.dry_run:
            print(f"[DRY RUN] Would import {len(rows)} rows")
            return 0

        async def handler(db) -> int:
            if args.as_user:
                author = await UserService.get_by_username(db, args.as_user)
                if author is None:
                    print(f"Error: User {args.as_user} not found")
                    return 1
            else:
                author = await UserService.first_admin(db)
                if author is None:
                    print("Error: No admin user found. Create an admin account first.")
                    return 1

            report = await NominationService.bulk_import(db, rows, created_by=author.id)
            for error in report.errors:
                print(f"⚠️  Row {error.row}: {error.reason}")
            print(f"✓ Import completed: {report.success_count} imported, {report.error_count} errors")
            return 0

        return self.run(handler)

    def _export(self, args) -> int:
        if self.dry_run:
            print(f"[DRY RUN] Would export nominations to {args.file}")
            return 0

        async def handler(db) -> int:
            nominations = await NominationService.export_all(db)
            with open(args.file, "w", encoding="utf-8") as f:
                json.dump({"nominations": nominations}, f, indent=2, ensure_ascii=False)
            print(f"✓ Exported {len(nominations)} nominations to {args.file}")
            return 0

        return self.run(handler)

    def _duplicates(self, args) -> int:
        """List people named by more than one nomination."""

        async def handler(db) -> int:
            people = await AggregationService.grouped_people(db, min_count=2)
            if not people:
                print("No duplicate people found")
                return 0
            print(f"Found {len(people)} people with multiple nominations:")
            for person in people:
                year = person.person_year or "unknown year"
                print(f"  - {person.person_name} ({year}): {person.nomination_count} nominations")
            return 0

        return self.run(handler)

    def _rename(self, args) -> int:
        old_year = args.year or None
        new_year = args.to_year or None
        label = f"{args.name} ({old_year}) -> {args.to_name} ({new_year})"

        if self.dry_run:
            print(f"[DRY RUN] Would rename {label}")
            return 0

        async def handler(db) -> int:
            summary = await NominationService.rename_person(db, args.name, old_year, args.to_name, new_year)
            print(f"✓ Renamed {label}")
            print(f"  Nominations updated: {summary['nominations']}")
            print(f"  Ballot selections moved: {summary['selections_moved']}")
            print(f"  Ballot selections merged: {summary['selections_merged']}")
            return 0

        return self.run(handler)
