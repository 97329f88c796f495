"""Per-player Elo updates for team matches."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from domain.matchmaking.common import Side
from domain.ratings.common import (
    MatchParticipant,
    MatchResult,
    RatingDelta,
    initial_rating_for_skill_level,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EloParameters:
    initial_elo: float = 1500.0
    k_factor: float = 32.0
    scale_factor: float = 400.0
    # 0.0 rates everyone on the team average; 1.0 rates each player on their own rating.
    individual_weight: float = 0.0

    def starting_rating(self, skill_level: str | None = None) -> int:
        """Rating for a new player; unknown or missing skill levels get ``initial_elo``."""
        return initial_rating_for_skill_level(skill_level, default=int(round(self.initial_elo)))


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def calculate_rating_delta(
    rating_before: float,
    team_average: float,
    opponent_average: float,
    won: bool,
    params: EloParameters | None = None,
) -> int:
    """Signed, rounded rating change for one player after a match."""
    params = params or EloParameters()
    effective_rating = team_average + params.individual_weight * (rating_before - team_average)
    expected = calculate_expected_score(
        rating=effective_rating,
        opponent_rating=opponent_average,
        scale_factor=params.scale_factor,
    )
    actual = 1.0 if won else 0.0
    return int(round(params.k_factor * (actual - expected)))


class MatchEloCalculator:
    """Stateless calculator turning a completed match into per-player deltas.

    Only the pre-match snapshot on the result is read; persisting new ratings
    and counters is left to the caller.
    """

    def __init__(self, params: EloParameters | None = None) -> None:
        self.params = params or EloParameters()

    def process_match(self, match_result: MatchResult) -> list[RatingDelta]:
        """Return one delta per participant, or none for an unrated game."""
        self._validate_match(match_result)
        if not match_result.rated:
            logger.info("game_id=%s is unrated; skipping rating update", match_result.game_id)
            return []

        side_a = match_result.side_participants(Side.A)
        side_b = match_result.side_participants(Side.B)
        averages = {
            Side.A: self._average_rating(side_a),
            Side.B: self._average_rating(side_b),
        }

        deltas: list[RatingDelta] = []
        for participant in match_result.participants:
            team_average = averages[participant.side]
            opponent_average = averages[participant.side.opponent]
            won = participant.side == match_result.winner
            effective_rating = team_average + self.params.individual_weight * (
                participant.rating_before - team_average
            )
            deltas.append(
                RatingDelta(
                    player_id=participant.player_id,
                    game_id=match_result.game_id,
                    side=participant.side,
                    won=won,
                    rating_before=participant.rating_before,
                    team_average=team_average,
                    opponent_average=opponent_average,
                    expected_score=calculate_expected_score(
                        rating=effective_rating,
                        opponent_rating=opponent_average,
                        scale_factor=self.params.scale_factor,
                    ),
                    delta=calculate_rating_delta(
                        participant.rating_before,
                        team_average,
                        opponent_average,
                        won,
                        self.params,
                    ),
                )
            )
        return deltas

    @staticmethod
    def _average_rating(participants: tuple[MatchParticipant, ...]) -> float:
        return sum(participant.rating_before for participant in participants) / float(len(participants))

    def _validate_match(self, match_result: MatchResult) -> None:
        if not match_result.side_participants(Side.A) or not match_result.side_participants(Side.B):
            raise ValueError(
                f"game_id={match_result.game_id} is missing players for one or both sides"
            )
        player_ids = [participant.player_id for participant in match_result.participants]
        if len(player_ids) != len(set(player_ids)):
            raise ValueError(f"game_id={match_result.game_id} lists a player more than once")


__all__ = [
    "EloParameters",
    "MatchEloCalculator",
    "calculate_expected_score",
    "calculate_rating_delta",
]
