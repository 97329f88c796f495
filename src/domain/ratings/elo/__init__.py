"""Elo rating modules."""

from domain.ratings.elo.calculator import (
    EloParameters,
    MatchEloCalculator,
    calculate_expected_score,
    calculate_rating_delta,
)
from domain.ratings.elo.config import EloSystemConfig, load_elo_system_configs

__all__ = [
    "EloParameters",
    "EloSystemConfig",
    "MatchEloCalculator",
    "calculate_expected_score",
    "calculate_rating_delta",
    "load_elo_system_configs",
]
