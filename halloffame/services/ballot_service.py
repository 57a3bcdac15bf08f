"""
halloffame/services/ballot_service.py
Ballot Store

Each user owns one active selection set of at most MAX_SELECTIONS
(person_name, person_year) pairs. A submission replaces the whole set
in a single transaction: delete-all-then-insert, scoped to that user.

Concurrency:
- Different users never touch the same rows, so their submissions never conflict.
- Two submissions from the same user race; the last one to commit wins.
  No optimistic-lock token is used.
- The (user_id, person_name, person_year) unique constraint backs the
  duplicate check under concurrent writers.
"""
import logging
from typing import List, Sequence, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.errors import ConflictError, DuplicateSelection, StoreError, TooManySelections
from halloffame.orm.ballot_selection import BallotSelection
from halloffame.schemas.ballot import SelectionInput

logger = logging.getLogger(__name__)

MAX_SELECTIONS = 8

PersonKey = Tuple[str, str]


def validate_selections(selections: Sequence[SelectionInput]) -> List[PersonKey]:
    """
    Check a proposed set before any mutation.

    Raises TooManySelections for more than MAX_SELECTIONS entries and
    DuplicateSelection when the same pair appears twice.
    """
    if len(selections) > MAX_SELECTIONS:
        raise TooManySelections(MAX_SELECTIONS, len(selections))

    keys: List[PersonKey] = []
    seen = set()
    for selection in selections:
        key = selection.key
        if key in seen:
            raise DuplicateSelection(*key)
        seen.add(key)
        keys.append(key)
    return keys


class BallotService:
    """Reads and replaces a user's ballot selections"""

    @classmethod
    async def get_selections(cls, db: AsyncSession, user_id: int) -> List[BallotSelection]:
        """Current set, most recently created first. Empty list if none."""
        result = await db.execute(
            select(BallotSelection)
            .where(BallotSelection.user_id == user_id)
            .order_by(BallotSelection.created_at.desc(), BallotSelection.id.desc())
        )
        return list(result.scalars().all())

    @classmethod
    async def count_selections(cls, db: AsyncSession, user_id: int) -> int:
        result = await db.execute(
            select(func.count()).select_from(BallotSelection).where(BallotSelection.user_id == user_id)
        )
        return result.scalar() or 0

    @classmethod
    async def replace_selections(
        cls,
        db: AsyncSession,
        user_id: int,
        selections: Sequence[SelectionInput],
    ) -> int:
        """
        Atomically replace user_id's selections with the given set.

        All-or-nothing: on any failure the transaction is rolled back and
        the previous set remains. Returns the number of selections stored.
        """
        keys = validate_selections(selections)

        try:
            await db.execute(delete(BallotSelection).where(BallotSelection.user_id == user_id))
            db.add_all([
                BallotSelection(user_id=user_id, person_name=name, person_year=year)
                for name, year in keys
            ])
            await db.flush()
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"Ballot for user {user_id} rejected by store constraint: {e.orig}")
            raise ConflictError("Ballot conflicts with a concurrent change, please resubmit")
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to save ballot for user {user_id}: {type(e).__name__}: {e}")
            raise StoreError("Failed to save ballot")

        logger.info(f"Ballot saved for user {user_id}: {len(keys)} selections")
        return len(keys)
