"""Shared types for the matchmaking engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Position(str, Enum):
    """Preferred on-court position of a player."""

    SETTER = "setter"
    OUTSIDE = "outside"
    MIDDLE = "middle"
    OPPOSITE = "opposite"
    LIBERO = "libero"
    ANY = "any"


# Order in which position buckets are drafted when position balancing is on.
POSITION_DRAFT_ORDER: tuple[Position, ...] = (
    Position.SETTER,
    Position.LIBERO,
    Position.OUTSIDE,
    Position.MIDDLE,
    Position.OPPOSITE,
    Position.ANY,
)


class Side(str, Enum):
    """One of the two rosters competing on a court."""

    A = "A"
    B = "B"

    @property
    def opponent(self) -> Side:
        return Side.B if self is Side.A else Side.A


@dataclass(frozen=True)
class PlayerRecord:
    """Checked-in player as supplied by the session layer."""

    player_id: str
    name: str
    rating: int
    position: Position | None = None
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    win_streak: int = 0
    best_win_streak: int = 0
    highest_rating: int | None = None

    @property
    def position_bucket(self) -> Position:
        return self.position or Position.ANY


@dataclass(frozen=True)
class PlayerGroup:
    """Players who asked to play together on the same side."""

    group_id: str
    members: tuple[PlayerRecord, ...]

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def average_rating(self) -> float:
        if not self.members:
            return 0.0
        return sum(member.rating for member in self.members) / float(len(self.members))

    def member_ids(self) -> frozenset[str]:
        return frozenset(member.player_id for member in self.members)


@dataclass(frozen=True)
class CourtAssignment:
    """Both sides of one court for a generated batch."""

    court_number: int
    side_a: tuple[PlayerRecord, ...]
    side_b: tuple[PlayerRecord, ...]
    team_size: int

    @property
    def player_count(self) -> int:
        return len(self.side_a) + len(self.side_b)

    @property
    def is_full(self) -> bool:
        return len(self.side_a) == self.team_size and len(self.side_b) == self.team_size

    def side(self, side: Side) -> tuple[PlayerRecord, ...]:
        return self.side_a if side is Side.A else self.side_b

    def player_ids(self) -> list[str]:
        return [player.player_id for player in (*self.side_a, *self.side_b)]


@dataclass(frozen=True)
class BalanceReport:
    """Fairness summary of one court."""

    avg_a: float
    avg_b: float
    difference: float
    fairness_percent: float


class UnplacedReason(str, Enum):
    """Why a group could not be seated as a unit."""

    NO_CAPACITY = "no_capacity"
    OVERLAPPING_MEMBERS = "overlapping_members"


@dataclass(frozen=True)
class UnplacedGroup:
    group: PlayerGroup
    reason: UnplacedReason
    returned_to_pool: bool = False


@dataclass(frozen=True)
class MatchmakingResult:
    """Everything one engine invocation produces."""

    assignments: tuple[CourtAssignment, ...]
    reports: tuple[BalanceReport, ...]
    requested_slots: int
    unplaced_groups: tuple[UnplacedGroup, ...] = ()
    unassigned_players: tuple[PlayerRecord, ...] = ()

    @property
    def assigned_count(self) -> int:
        return sum(assignment.player_count for assignment in self.assignments)

    @property
    def is_partial(self) -> bool:
        """True when fewer players were seated than the courts can hold."""
        return self.assigned_count < self.requested_slots


__all__ = [
    "BalanceReport",
    "CourtAssignment",
    "MatchmakingResult",
    "POSITION_DRAFT_ORDER",
    "PlayerGroup",
    "PlayerRecord",
    "Position",
    "Side",
    "UnplacedGroup",
    "UnplacedReason",
]
