"""Round-by-round rotation of session teams across courts.

Teams are fixed for the session; each round pairs them onto courts according
to a rotation mode and benches the rest. Only completed games feed the next
round, standings and round-robin progress.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from domain.errors import InvalidConfigurationError
from domain.matchmaking.common import CourtAssignment, Side

logger = logging.getLogger(__name__)


class RotationMode(str, Enum):
    KING_OF_COURT = "king_of_court"
    ROUND_ROBIN = "round_robin"
    SWISS = "swiss"
    SPEED = "speed"
    MANUAL = "manual"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]

    @property
    def description(self) -> str:
        return _MODE_DESCRIPTIONS[self]


_MODE_LABELS = {
    RotationMode.KING_OF_COURT: "King of the Court",
    RotationMode.ROUND_ROBIN: "Round Robin",
    RotationMode.SWISS: "Swiss (Winners vs Winners)",
    RotationMode.SPEED: "Speed Mode",
    RotationMode.MANUAL: "Manual",
}

_MODE_DESCRIPTIONS = {
    RotationMode.KING_OF_COURT: "Winners stay on court, losers rotate to bench",
    RotationMode.ROUND_ROBIN: "Every team plays every other team once",
    RotationMode.SWISS: "Teams with similar records play each other",
    RotationMode.SPEED: "Rapid rotation, no rating changes; losers run off, next team runs on",
    RotationMode.MANUAL: "Manually assign matchups each round",
}


@dataclass(frozen=True)
class SessionTeam:
    team_id: str
    name: str
    player_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class SessionGame:
    """One game between two session teams; ``winner`` is None while undecided."""

    game_id: str
    round_number: int
    court_number: int
    team_a_id: str
    team_b_id: str
    winner: Side | None = None
    score_a: int = 0
    score_b: int = 0
    completed: bool = True

    @property
    def pairing(self) -> frozenset[str]:
        return frozenset((self.team_a_id, self.team_b_id))

    def winner_id(self) -> str | None:
        if self.winner is None:
            return None
        return self.team_a_id if self.winner == Side.A else self.team_b_id

    def loser_id(self) -> str | None:
        if self.winner is None:
            return None
        return self.team_b_id if self.winner == Side.A else self.team_a_id


@dataclass(frozen=True)
class RoundMatchup:
    team_a: SessionTeam
    team_b: SessionTeam
    court_number: int


@dataclass(frozen=True)
class RotationResult:
    round_number: int
    matchups: tuple[RoundMatchup, ...]
    benched: tuple[SessionTeam, ...]


@dataclass(frozen=True)
class TeamStanding:
    team: SessionTeam
    wins: int
    losses: int
    point_differential: int


def should_skip_ratings(mode: RotationMode) -> bool:
    """Speed rounds are casual; their results never move ratings."""
    return mode is RotationMode.SPEED


def session_teams_from_assignments(assignments: Sequence[CourtAssignment]) -> list[SessionTeam]:
    """Turn generated courts into session teams named ``court<N>-<side>``."""
    teams: list[SessionTeam] = []
    for assignment in assignments:
        for side in (Side.A, Side.B):
            team_id = f"court{assignment.court_number}-{side.value}"
            teams.append(
                SessionTeam(
                    team_id=team_id,
                    name=f"Court {assignment.court_number} {side.value}",
                    player_ids=tuple(player.player_id for player in assignment.side(side)),
                )
            )
    return teams


def next_round_number(games: Sequence[SessionGame]) -> int:
    """One past the highest round with a completed game, or 1 for a fresh session."""
    completed_rounds = [game.round_number for game in games if game.completed]
    return max(completed_rounds, default=0) + 1


def calculate_standings(
    teams: Sequence[SessionTeam],
    games: Sequence[SessionGame],
) -> list[TeamStanding]:
    """Wins, losses and point differential per team, best record first.

    Ties on wins are broken by point differential; equal records keep team order.
    """
    wins = {team.team_id: 0 for team in teams}
    losses = {team.team_id: 0 for team in teams}
    differential = {team.team_id: 0 for team in teams}

    for game in games:
        if not game.completed:
            continue
        margin = game.score_a - game.score_b
        if game.team_a_id in differential:
            differential[game.team_a_id] += margin
        if game.team_b_id in differential:
            differential[game.team_b_id] -= margin
        winner_id, loser_id = game.winner_id(), game.loser_id()
        if winner_id in wins:
            wins[winner_id] += 1
        if loser_id in losses:
            losses[loser_id] += 1

    standings = [
        TeamStanding(
            team=team,
            wins=wins[team.team_id],
            losses=losses[team.team_id],
            point_differential=differential[team.team_id],
        )
        for team in teams
    ]
    return sorted(standings, key=lambda standing: (-standing.wins, -standing.point_differential))


def is_round_robin_complete(teams: Sequence[SessionTeam], games: Sequence[SessionGame]) -> bool:
    """True once every pair of teams has a completed game."""
    team_ids = {team.team_id for team in teams}
    played = {
        game.pairing
        for game in games
        if game.completed and len(game.pairing) == 2 and game.pairing <= team_ids
    }
    needed = len(team_ids) * (len(team_ids) - 1) // 2
    return len(played) >= needed


def generate_next_round(
    teams: Sequence[SessionTeam],
    games: Sequence[SessionGame],
    mode: RotationMode,
    court_count: int,
    round_number: int,
) -> RotationResult:
    """Pair teams onto courts for ``round_number`` under ``mode``.

    Every team not on a court is benched, in the order it should come back on.
    """
    if court_count <= 0:
        raise InvalidConfigurationError(f"court_count must be > 0, got {court_count}")
    if round_number < 1:
        raise InvalidConfigurationError(f"round_number must be >= 1, got {round_number}")
    team_ids = [team.team_id for team in teams]
    if len(team_ids) != len(set(team_ids)):
        raise InvalidConfigurationError("session teams must have unique ids")

    completed = [game for game in games if game.completed]
    if mode is RotationMode.ROUND_ROBIN:
        result = _round_robin_round(teams, completed, court_count, round_number)
    elif mode is RotationMode.SWISS:
        result = _swiss_round(teams, completed, court_count, round_number)
    elif round_number == 1 or mode is RotationMode.MANUAL:
        result = _opening_round(teams, court_count, round_number)
    elif mode is RotationMode.KING_OF_COURT:
        result = _king_of_court_round(teams, completed, court_count, round_number)
    else:
        result = _speed_round(teams, completed, court_count, round_number)

    logger.info(
        "round=%d mode=%s matchups=%d benched=%d",
        round_number,
        mode.value,
        len(result.matchups),
        len(result.benched),
    )
    return result


def _pair_in_order(teams: Sequence[SessionTeam], court_count: int) -> list[RoundMatchup]:
    return [
        RoundMatchup(team_a=teams[court * 2], team_b=teams[court * 2 + 1], court_number=court + 1)
        for court in range(min(court_count, len(teams) // 2))
    ]


def _result(
    round_number: int,
    matchups: list[RoundMatchup],
    benched: list[SessionTeam],
) -> RotationResult:
    return RotationResult(round_number=round_number, matchups=tuple(matchups), benched=tuple(benched))


def _opening_round(
    teams: Sequence[SessionTeam],
    court_count: int,
    round_number: int,
) -> RotationResult:
    matchups = _pair_in_order(teams, court_count)
    return _result(round_number, matchups, list(teams[len(matchups) * 2 :]))


def _last_round_outcome(
    teams: Sequence[SessionTeam],
    completed: Sequence[SessionGame],
    round_number: int,
) -> tuple[list[SessionTeam], list[SessionTeam], list[SessionTeam], list[SessionTeam]]:
    """Split teams into (winners, losers, undecided, sat_out) for the previous round."""
    by_id = {team.team_id: team for team in teams}
    last_round = sorted(
        (game for game in completed if game.round_number == round_number - 1),
        key=lambda game: game.court_number,
    )

    winners: list[SessionTeam] = []
    losers: list[SessionTeam] = []
    undecided: list[SessionTeam] = []
    played: set[str] = set()
    for game in last_round:
        if game.team_a_id not in by_id or game.team_b_id not in by_id:
            continue
        played.update((game.team_a_id, game.team_b_id))
        winner_id, loser_id = game.winner_id(), game.loser_id()
        if winner_id is None or loser_id is None:
            undecided.extend((by_id[game.team_a_id], by_id[game.team_b_id]))
            continue
        winners.append(by_id[winner_id])
        losers.append(by_id[loser_id])

    sat_out = [team for team in teams if team.team_id not in played]
    return winners, losers, undecided, sat_out


def _king_of_court_round(
    teams: Sequence[SessionTeam],
    completed: Sequence[SessionGame],
    court_count: int,
    round_number: int,
) -> RotationResult:
    winners, losers, undecided, sat_out = _last_round_outcome(teams, completed, round_number)

    # Winners hold their courts and benched teams come on; losers sit.
    active = winners + sat_out
    matchups = _pair_in_order(active, court_count)
    benched = losers + undecided + active[len(matchups) * 2 :]
    return _result(round_number, matchups, benched)


def _speed_round(
    teams: Sequence[SessionTeam],
    completed: Sequence[SessionGame],
    court_count: int,
    round_number: int,
) -> RotationResult:
    winners, losers, undecided, waiting = _last_round_outcome(teams, completed, round_number)

    # FIFO queue: each winner faces the next waiting team, losers join the back.
    challengers = waiting[: len(winners)]
    matchups = [
        RoundMatchup(team_a=winner, team_b=challenger, court_number=index + 1)
        for index, (winner, challenger) in enumerate(zip(winners[:court_count], challengers))
    ]
    seated = {team.team_id for matchup in matchups for team in (matchup.team_a, matchup.team_b)}

    unmatched_winners = [team for team in winners if team.team_id not in seated]
    while len(unmatched_winners) >= 2 and len(matchups) < court_count:
        team_a, team_b = unmatched_winners.pop(0), unmatched_winners.pop(0)
        matchups.append(RoundMatchup(team_a=team_a, team_b=team_b, court_number=len(matchups) + 1))
        seated.update((team_a.team_id, team_b.team_id))

    still_waiting = [team for team in waiting if team.team_id not in seated]
    queue = unmatched_winners + still_waiting + losers + undecided
    return _result(round_number, matchups, queue)


def _round_robin_round(
    teams: Sequence[SessionTeam],
    completed: Sequence[SessionGame],
    court_count: int,
    round_number: int,
) -> RotationResult:
    played = {game.pairing for game in completed}
    matchups: list[RoundMatchup] = []
    scheduled: set[str] = set()

    for index, team_a in enumerate(teams):
        for team_b in teams[index + 1 :]:
            if len(matchups) >= court_count:
                break
            if team_a.team_id in scheduled or team_b.team_id in scheduled:
                continue
            if frozenset((team_a.team_id, team_b.team_id)) in played:
                continue
            matchups.append(RoundMatchup(team_a=team_a, team_b=team_b, court_number=len(matchups) + 1))
            scheduled.update((team_a.team_id, team_b.team_id))

    benched = [team for team in teams if team.team_id not in scheduled]
    return _result(round_number, matchups, benched)


def _swiss_round(
    teams: Sequence[SessionTeam],
    completed: Sequence[SessionGame],
    court_count: int,
    round_number: int,
) -> RotationResult:
    played = {game.pairing for game in completed}
    ranked = [standing.team for standing in calculate_standings(teams, completed)]
    matchups: list[RoundMatchup] = []
    scheduled: set[str] = set()

    for index, team_a in enumerate(ranked):
        if len(matchups) >= court_count:
            break
        if team_a.team_id in scheduled:
            continue
        # Closest team below in the standings that has not been played yet.
        for team_b in ranked[index + 1 :]:
            if team_b.team_id in scheduled:
                continue
            if frozenset((team_a.team_id, team_b.team_id)) in played:
                continue
            matchups.append(RoundMatchup(team_a=team_a, team_b=team_b, court_number=len(matchups) + 1))
            scheduled.update((team_a.team_id, team_b.team_id))
            break

    benched = [team for team in teams if team.team_id not in scheduled]
    return _result(round_number, matchups, benched)


__all__ = [
    "RotationMode",
    "RotationResult",
    "RoundMatchup",
    "SessionGame",
    "SessionTeam",
    "TeamStanding",
    "calculate_standings",
    "generate_next_round",
    "is_round_robin_complete",
    "next_round_number",
    "session_teams_from_assignments",
    "should_skip_ratings",
]
