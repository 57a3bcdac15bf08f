from halloffame.services.aggregation_service import AggregationService
from halloffame.services.ballot_service import MAX_SELECTIONS, BallotService
from halloffame.services.nomination_service import NominationService
from halloffame.services.user_service import UserService

__all__ = [
    "AggregationService",
    "BallotService",
    "MAX_SELECTIONS",
    "NominationService",
    "UserService",
]
