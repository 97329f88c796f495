"""Matchmaking and rating domain modules."""

from domain.errors import InsufficientPlayersError, InvalidConfigurationError, MatchmakingError
from domain.matchmaking.common import PlayerGroup, PlayerRecord, Position, Side

__all__ = [
    "InsufficientPlayersError",
    "InvalidConfigurationError",
    "MatchmakingError",
    "PlayerGroup",
    "PlayerRecord",
    "Position",
    "Side",
]
