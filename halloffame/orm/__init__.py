"""
halloffame/orm/__init__.py
Importing this package registers every model on Base.metadata
"""
from halloffame.orm.base import Base
from halloffame.orm.user import User, UserRole
from halloffame.orm.nomination import Nomination, NOMINATION_TEXT_FIELDS
from halloffame.orm.ballot_selection import BallotSelection

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Nomination",
    "NOMINATION_TEXT_FIELDS",
    "BallotSelection",
]
