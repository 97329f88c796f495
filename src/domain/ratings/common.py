"""Shared types for match results and rating updates."""

from __future__ import annotations

from dataclasses import dataclass

from domain.matchmaking.common import CourtAssignment, Side
from domain.matchmaking.rotation import RotationMode, should_skip_ratings

# Starting ratings by self-reported skill level at registration.
SKILL_LEVEL_RATINGS: dict[str, int] = {
    "beginner": 1200,
    "casual": 1350,
    "regular": 1500,
    "experienced": 1650,
    "advanced": 1800,
}


def initial_rating_for_skill_level(skill_level: str | None, *, default: int = 1500) -> int:
    if skill_level is None:
        return default
    return SKILL_LEVEL_RATINGS.get(skill_level.strip().lower(), default)


@dataclass(frozen=True)
class MatchParticipant:
    """Player snapshot taken when teams were generated."""

    player_id: str
    side: Side
    rating_before: int


@dataclass(frozen=True)
class MatchResult:
    """Completed game on one court.

    ``rated`` is False for games whose rotation mode never moves ratings.
    """

    game_id: str
    court_number: int
    winner: Side
    participants: tuple[MatchParticipant, ...]
    rated: bool = True

    def side_participants(self, side: Side) -> tuple[MatchParticipant, ...]:
        return tuple(participant for participant in self.participants if participant.side == side)


@dataclass(frozen=True)
class RatingDelta:
    player_id: str
    game_id: str
    side: Side
    won: bool
    rating_before: int
    team_average: float
    opponent_average: float
    expected_score: float
    delta: int

    @property
    def rating_after(self) -> int:
        return self.rating_before + self.delta


@dataclass(frozen=True)
class RatingHistoryEntry:
    player_id: str
    game_id: str
    previous_rating: int
    new_rating: int
    change: int


def winner_from_score(score_a: int, score_b: int) -> Side:
    """Side with the higher score; ties cannot be rated."""
    if score_a == score_b:
        raise ValueError(f"Tied score {score_a}-{score_b} has no winner")
    return Side.A if score_a > score_b else Side.B


def build_match_result(
    assignment: CourtAssignment,
    *,
    winner: Side,
    game_id: str,
    rotation_mode: RotationMode | None = None,
) -> MatchResult:
    """Snapshot every player's current rating as their pre-match rating."""
    participants = tuple(
        MatchParticipant(player_id=player.player_id, side=side, rating_before=player.rating)
        for side in (Side.A, Side.B)
        for player in assignment.side(side)
    )
    return MatchResult(
        game_id=game_id,
        court_number=assignment.court_number,
        winner=winner,
        participants=participants,
        rated=rotation_mode is None or not should_skip_ratings(rotation_mode),
    )
