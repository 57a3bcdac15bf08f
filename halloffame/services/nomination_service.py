"""
halloffame/services/nomination_service.py
Nomination Store

Nominations are free-text submissions naming a (name, year) pair.
Committee members only read them; create/update/delete and bulk import
are admin operations (gated in the routes).

Bulk import is deliberately partial-success: each row runs in its own
transaction, a bad row is reported and skipped, and every valid row is
committed. Ballot replacement is the opposite (all-or-nothing).
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.errors import ErrorCode, NotFoundError, StoreError
from halloffame.orm.ballot_selection import BallotSelection
from halloffame.orm.nomination import Nomination
from halloffame.schemas.nominations import (
    ImportResult,
    ImportRowError,
    NominationCreate,
    NominationUpdate,
)

logger = logging.getLogger(__name__)


def _year_matches(column, year: Optional[str]):
    # NULL and "" are both the unknown year
    return func.coalesce(column, "") == (year or "")


def describe_row_error(exc: PydanticValidationError) -> str:
    """Turn a pydantic error into the short reason reported per import row."""
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else ""
        if field not in ("name", "person_name"):
            continue
        value = error.get("input")
        if error.get("type") == "missing" or value is None or (isinstance(value, str) and not value.strip()):
            return "Missing name"
        return f"Invalid name: {error.get('msg')}"
    first = exc.errors()[0]
    loc = ".".join(str(part) for part in first.get("loc") or ())
    return f"Invalid {loc}: {first.get('msg')}" if loc else str(first.get("msg"))


class NominationService:
    """CRUD, lookup and bulk import for nominations"""

    @classmethod
    async def list_all(cls, db: AsyncSession) -> List[Nomination]:
        """All nominations, newest first."""
        result = await db.execute(
            select(Nomination).order_by(Nomination.created_at.desc(), Nomination.id.desc())
        )
        return list(result.scalars().all())

    @classmethod
    async def get(cls, db: AsyncSession, nomination_id: int) -> Nomination:
        nomination = await db.get(Nomination, nomination_id)
        if nomination is None:
            raise NotFoundError(
                f"Nomination with id '{nomination_id}' not found",
                ErrorCode.NOMINATION_NOT_FOUND,
            )
        return nomination

    @classmethod
    async def list_by_person(cls, db: AsyncSession, name: str, year: Optional[str]) -> List[Nomination]:
        """
        Nominations matching both name and year exactly, newest first.
        Returns an empty list when the pair has none.
        """
        result = await db.execute(
            select(Nomination)
            .where(Nomination.name == name, _year_matches(Nomination.year, year))
            .order_by(Nomination.created_at.desc(), Nomination.id.desc())
        )
        return list(result.scalars().all())

    @classmethod
    async def create(cls, db: AsyncSession, data: NominationCreate, created_by: Optional[int]) -> Nomination:
        nomination = Nomination(**data.model_dump(), created_by=created_by)
        db.add(nomination)
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to create nomination: {type(e).__name__}: {e}")
            raise StoreError("Failed to create nomination")

        await db.refresh(nomination)
        logger.info(f"Nomination {nomination.id} created for {nomination.name} ({nomination.year})")
        return nomination

    @classmethod
    async def update(cls, db: AsyncSession, nomination_id: int, data: NominationUpdate) -> Nomination:
        """
        Apply only the fields present in the payload.

        When the edit moves the last nomination off its (name, year) pair,
        ballot selections of the old pair follow it to the new one.
        """
        nomination = await cls.get(db, nomination_id)
        old_name, old_year = nomination.name, nomination.year
        for field, value in data.changes().items():
            setattr(nomination, field, value)
        pair_changed = (nomination.name, nomination.year or "") != (old_name, old_year or "")

        try:
            if pair_changed:
                await db.flush()
                remaining = await db.execute(
                    select(func.count())
                    .select_from(Nomination)
                    .where(Nomination.name == old_name, _year_matches(Nomination.year, old_year))
                )
                if not remaining.scalar():
                    await cls._move_selections(db, old_name, old_year, nomination.name, nomination.year)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to update nomination {nomination_id}: {type(e).__name__}: {e}")
            raise StoreError("Failed to update nomination")

        await db.refresh(nomination)
        logger.info(f"Nomination {nomination_id} updated")
        return nomination

    @classmethod
    async def delete(cls, db: AsyncSession, nomination_id: int) -> None:
        result = await db.execute(delete(Nomination).where(Nomination.id == nomination_id))
        if result.rowcount == 0:
            await db.rollback()
            raise NotFoundError(
                f"Nomination with id '{nomination_id}' not found",
                ErrorCode.NOMINATION_NOT_FOUND,
            )
        await db.commit()
        logger.info(f"Nomination {nomination_id} deleted")

    @classmethod
    async def bulk_import(
        cls,
        db: AsyncSession,
        rows: Sequence[Mapping[str, Any]],
        created_by: Optional[int],
    ) -> ImportResult:
        """
        Import rows independently.

        Row numbers in the report are 1-based positions in rows.
        """
        report = ImportResult()

        for index, row in enumerate(rows, start=1):
            if not isinstance(row, Mapping):
                report.errors.append(ImportRowError(row=index, reason="Row is not an object"))
                continue

            try:
                data = NominationCreate.model_validate(dict(row))
            except PydanticValidationError as e:
                reason = describe_row_error(e)
                logger.warning(f"Skipping import row {index}: {reason}")
                report.errors.append(ImportRowError(row=index, reason=reason))
                continue

            db.add(Nomination(**data.model_dump(), created_by=created_by))
            try:
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                logger.warning(f"Import row {index} rejected by store: {e}")
                report.errors.append(ImportRowError(row=index, reason="Could not be stored"))
                continue

            report.success_count += 1

        report.error_count = len(report.errors)
        logger.info(f"Import completed: {report.success_count} imported, {report.error_count} errors")
        return report

    @classmethod
    async def export_all(cls, db: AsyncSession) -> List[Dict[str, Any]]:
        """All nominations as plain dicts, ordered by name then year."""
        result = await db.execute(select(Nomination).order_by(Nomination.name, Nomination.year))
        return [nomination.to_export_dict() for nomination in result.scalars().all()]

    @classmethod
    async def _move_selections(
        cls,
        db: AsyncSession,
        old_name: str,
        old_year: Optional[str],
        new_name: str,
        new_year: Optional[str],
    ) -> Tuple[int, int]:
        """
        Point ballot selections of one pair at another without committing.

        A user who had already selected the new pair keeps one row.
        Returns (moved, merged) row counts.
        """
        new_key_year = new_year or ""
        already_selected = (
            select(BallotSelection.user_id)
            .where(
                BallotSelection.person_name == new_name,
                BallotSelection.person_year == new_key_year,
            )
        )
        old_pair = and_(
            BallotSelection.person_name == old_name,
            BallotSelection.person_year == (old_year or ""),
        )
        dropped = await db.execute(
            delete(BallotSelection).where(old_pair, BallotSelection.user_id.in_(already_selected))
        )
        moved = await db.execute(
            update(BallotSelection)
            .where(old_pair)
            .values(person_name=new_name, person_year=new_key_year)
        )
        return moved.rowcount, dropped.rowcount

    @classmethod
    async def rename_person(
        cls,
        db: AsyncSession,
        old_name: str,
        old_year: Optional[str],
        new_name: str,
        new_year: Optional[str],
    ) -> Dict[str, int]:
        """
        Merge one (name, year) pair into another.

        Nominations are rewritten in place. Ballot selections move to the
        new pair; a user who had already selected the new pair keeps one row.
        Runs as one transaction.
        """
        try:
            renamed = await db.execute(
                update(Nomination)
                .where(Nomination.name == old_name, _year_matches(Nomination.year, old_year))
                .values(name=new_name, year=new_year)
            )
            moved, dropped = await cls._move_selections(db, old_name, old_year, new_name, new_year)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to rename {old_name} ({old_year}): {type(e).__name__}: {e}")
            raise StoreError("Failed to rename person")

        summary = {
            "nominations": renamed.rowcount,
            "selections_moved": moved,
            "selections_merged": dropped,
        }
        logger.info(f"Renamed {old_name} ({old_year}) -> {new_name} ({new_year}): {summary}")
        return summary
