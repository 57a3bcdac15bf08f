"""
halloffame/services/aggregation_service.py
Aggregation Engine

Derived views over nominations and ballot selections. Nothing here is
stored; every call recomputes from current store state.

Results:
- One row per nominated (name, year) pair, including pairs nobody selected
- selection_count: ballot rows naming the pair
- total_committee: committee users at query time (one snapshot for all rows)
- percentage: round half-up of selection_count / total_committee * 100,
  0 when there are no committee members, never above 100
- Order: selection_count desc, then name asc, then year asc
"""
import logging
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Tuple

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.orm.ballot_selection import BallotSelection
from halloffame.orm.nomination import Nomination
from halloffame.orm.user import User, UserRole
from halloffame.schemas.results import PersonSummary, ResultEntry, Stats, Voter

logger = logging.getLogger(__name__)


def compute_percentage(selection_count: int, total_committee: int) -> int:
    if total_committee <= 0:
        return 0
    value = (Decimal(selection_count) * 100 / Decimal(total_committee)).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return max(0, min(100, int(value)))


def _year_or_none(year_key: str):
    # Nominations store an unknown year as NULL, selections as ""
    return year_key or None


class AggregationService:
    """People list, ranked results and dashboard counts"""

    @classmethod
    async def grouped_people(cls, db: AsyncSession, min_count: int = 1) -> List[PersonSummary]:
        """
        Distinct (name, year) pairs with their nomination counts,
        ordered by name then year.
        """
        year_key = func.coalesce(Nomination.year, "")
        nomination_count = func.count(Nomination.id)
        query = (
            select(Nomination.name, year_key.label("year_key"), nomination_count.label("nomination_count"))
            .group_by(Nomination.name, year_key)
            .order_by(Nomination.name, year_key)
        )
        if min_count > 1:
            query = query.having(nomination_count >= min_count)

        result = await db.execute(query)
        return [
            PersonSummary(
                person_name=row.name,
                person_year=_year_or_none(row.year_key),
                nomination_count=row.nomination_count,
            )
            for row in result.all()
        ]

    @classmethod
    async def count_committee(cls, db: AsyncSession) -> int:
        result = await db.execute(
            select(func.count()).select_from(User).where(User.role == UserRole.committee)
        )
        return result.scalar() or 0

    @classmethod
    async def voters_by_person(cls, db: AsyncSession) -> Dict[Tuple[str, str], List[Voter]]:
        result = await db.execute(
            select(BallotSelection.person_name, BallotSelection.person_year, User.id, User.username)
            .join(User, User.id == BallotSelection.user_id)
            .order_by(User.username)
        )
        voters: Dict[Tuple[str, str], List[Voter]] = defaultdict(list)
        for row in result.all():
            voters[(row.person_name, row.person_year)].append(Voter(id=row.id, username=row.username))
        return voters

    @classmethod
    async def results(cls, db: AsyncSession, include_voters: bool = False) -> List[ResultEntry]:
        """
        Ranked tally for every nominated person.

        include_voters adds who selected each person; only admins see it.
        """
        total_committee = await cls.count_committee(db)

        year_key = func.coalesce(Nomination.year, "")
        people = (
            select(
                Nomination.name.label("name"),
                year_key.label("year_key"),
                func.count(Nomination.id).label("nomination_count"),
            )
            .group_by(Nomination.name, year_key)
            .subquery("people")
        )
        votes = (
            select(
                BallotSelection.person_name.label("name"),
                BallotSelection.person_year.label("year_key"),
                func.count(BallotSelection.id).label("selection_count"),
            )
            .group_by(BallotSelection.person_name, BallotSelection.person_year)
            .subquery("votes")
        )
        selection_count = func.coalesce(votes.c.selection_count, 0)

        result = await db.execute(
            select(
                people.c.name,
                people.c.year_key,
                people.c.nomination_count,
                selection_count.label("selection_count"),
            )
            .outerjoin(
                votes,
                and_(votes.c.name == people.c.name, votes.c.year_key == people.c.year_key),
            )
            .order_by(selection_count.desc(), people.c.name, people.c.year_key)
        )
        rows = result.all()

        voters = await cls.voters_by_person(db) if include_voters else {}

        entries = []
        for rank, row in enumerate(rows, start=1):
            entry = ResultEntry(
                rank=rank,
                person_name=row.name,
                person_year=_year_or_none(row.year_key),
                nomination_count=row.nomination_count,
                selection_count=row.selection_count,
                total_committee=total_committee,
                percentage=compute_percentage(row.selection_count, total_committee),
            )
            if include_voters:
                entry.voters = voters.get((row.name, row.year_key), [])
            entries.append(entry)

        logger.debug(f"Computed results for {len(entries)} people, {total_committee} committee members")
        return entries

    @classmethod
    async def stats(cls, db: AsyncSession, user_id: int) -> Stats:
        """Four independent dashboard counts."""
        pairs = (
            select(Nomination.name, func.coalesce(Nomination.year, ""))
            .distinct()
            .subquery()
        )
        total_people = await db.execute(select(func.count()).select_from(pairs))
        total_nominations = await db.execute(select(func.count()).select_from(Nomination))
        my_selections = await db.execute(
            select(func.count()).select_from(BallotSelection).where(BallotSelection.user_id == user_id)
        )

        return Stats(
            totalPeople=total_people.scalar() or 0,
            totalNominations=total_nominations.scalar() or 0,
            totalCommitteeMembers=await cls.count_committee(db),
            mySelectionsCount=my_selections.scalar() or 0,
        )
