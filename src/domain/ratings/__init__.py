"""Rating-update domain modules."""

from domain.ratings.common import (
    MatchParticipant,
    MatchResult,
    RatingDelta,
    RatingHistoryEntry,
    build_match_result,
    initial_rating_for_skill_level,
    winner_from_score,
)
from domain.ratings.settlement import settle_match, settle_player

__all__ = [
    "MatchParticipant",
    "MatchResult",
    "RatingDelta",
    "RatingHistoryEntry",
    "build_match_result",
    "initial_rating_for_skill_level",
    "settle_match",
    "settle_player",
    "winner_from_score",
]
