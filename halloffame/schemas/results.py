"""
Aggregated view schemas (people, results, stats)
"""
from typing import List, Optional

from pydantic import BaseModel


class PersonSummary(BaseModel):
    person_name: str
    person_year: Optional[str] = None
    nomination_count: int


class Voter(BaseModel):
    id: int
    username: str


class ResultEntry(BaseModel):
    rank: int
    person_name: str
    person_year: Optional[str] = None
    nomination_count: int
    selection_count: int
    total_committee: int
    percentage: int
    voters: Optional[List[Voter]] = None


class Stats(BaseModel):
    totalPeople: int
    totalNominations: int
    totalCommitteeMembers: int
    mySelectionsCount: int
