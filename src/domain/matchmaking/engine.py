"""Composition root: groups, snake draft, swap refinement, balance reports."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from domain.errors import InsufficientPlayersError, InvalidConfigurationError
from domain.matchmaking.allocator import CourtAllocator
from domain.matchmaking.balance import BalanceScorer, FairnessCurve
from domain.matchmaking.common import MatchmakingResult, PlayerGroup, PlayerRecord
from domain.matchmaking.groups import GroupAssigner
from domain.matchmaking.lineup import Lineup
from domain.matchmaking.optimizer import LocalSwapOptimizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchmakingParameters:
    team_size: int = 6
    max_team_size: int = 12
    max_group_size: int = 4
    minimum_players: int = 4
    position_balancing: bool = False
    return_unplaced_groups_to_pool: bool = True
    fairness_curve: FairnessCurve = FairnessCurve.LINEAR
    fairness_scale: float = 10.0
    target_fairness: float = 98.5
    min_fairness_gain: float = 0.1
    max_swap_iterations: int = 20


class MatchEngine:
    """Stateless team generator; every call works on its own copies of the inputs."""

    def __init__(self, params: MatchmakingParameters | None = None) -> None:
        self.params = params or MatchmakingParameters()
        self.scorer = BalanceScorer(curve=self.params.fairness_curve, scale=self.params.fairness_scale)
        self.optimizer = LocalSwapOptimizer(
            self.scorer,
            target_fairness=self.params.target_fairness,
            min_fairness_gain=self.params.min_fairness_gain,
            max_iterations=self.params.max_swap_iterations,
        )

    def generate(
        self,
        roster: Sequence[PlayerRecord],
        court_count: int,
        *,
        team_size: int | None = None,
        position_balancing: bool | None = None,
        groups: Sequence[PlayerGroup] = (),
    ) -> MatchmakingResult:
        team_size = self.params.team_size if team_size is None else team_size
        if position_balancing is None:
            position_balancing = self.params.position_balancing

        players = list(roster)
        by_id = self._validate(players, court_count=court_count, team_size=team_size, groups=groups)
        # Seat the roster's own records so rating snapshots come from one source.
        canonical_groups = [
            PlayerGroup(
                group_id=group.group_id,
                members=tuple(by_id[member.player_id] for member in group.members),
            )
            for group in groups
        ]

        lineup = Lineup(court_count=court_count, team_size=team_size)
        placement = GroupAssigner(
            return_unplaced_to_pool=self.params.return_unplaced_groups_to_pool
        ).assign(canonical_groups, lineup)

        held_back: set[str] = set()
        for unplaced in placement.unplaced:
            if not unplaced.returned_to_pool:
                held_back.update(unplaced.group.member_ids() - placement.reserved_ids)

        pool = [
            player
            for player in players
            if player.player_id not in placement.reserved_ids and player.player_id not in held_back
        ]
        allocator = CourtAllocator(position_balancing=position_balancing)
        allocation = allocator.allocate(pool, lineup)
        match_positions = allocator.uses_positions(allocation.seated)

        assignments = []
        reports = []
        for assignment in lineup.to_assignments():
            outcome = self.optimizer.optimize(
                assignment,
                locked_ids=placement.reserved_ids,
                match_positions=match_positions,
            )
            assignments.append(outcome.assignment)
            reports.append(self.scorer.score(outcome.assignment.side_a, outcome.assignment.side_b))

        unassigned = list(allocation.unassigned)
        unassigned.extend(player for player in players if player.player_id in held_back)

        result = MatchmakingResult(
            assignments=tuple(assignments),
            reports=tuple(reports),
            requested_slots=court_count * team_size * 2,
            unplaced_groups=placement.unplaced,
            unassigned_players=tuple(unassigned),
        )
        logger.info(
            "generated courts=%d team_size=%d assigned=%d/%d unassigned=%d unplaced_groups=%d",
            court_count,
            team_size,
            result.assigned_count,
            result.requested_slots,
            len(result.unassigned_players),
            len(result.unplaced_groups),
        )
        return result

    def _validate(
        self,
        players: list[PlayerRecord],
        *,
        court_count: int,
        team_size: int,
        groups: Sequence[PlayerGroup],
    ) -> dict[str, PlayerRecord]:
        if court_count <= 0:
            raise InvalidConfigurationError(f"court_count must be > 0, got {court_count}")
        if team_size <= 0 or team_size > self.params.max_team_size:
            raise InvalidConfigurationError(
                f"team_size must be between 1 and {self.params.max_team_size}, got {team_size}"
            )

        by_id: dict[str, PlayerRecord] = {}
        for player in players:
            if player.player_id in by_id:
                raise InvalidConfigurationError(f"player_id={player.player_id} appears twice in roster")
            by_id[player.player_id] = player

        max_group_size = min(team_size, self.params.max_group_size)
        for group in groups:
            if not group.members:
                raise InvalidConfigurationError(f"group_id={group.group_id} has no members")
            if group.size > max_group_size:
                raise InvalidConfigurationError(
                    f"group_id={group.group_id} has {group.size} members, max is {max_group_size}"
                )
            if len(group.member_ids()) != group.size:
                raise InvalidConfigurationError(f"group_id={group.group_id} lists a player twice")
            missing = sorted(group.member_ids() - by_id.keys())
            if missing:
                raise InvalidConfigurationError(
                    f"group_id={group.group_id} references players outside the roster: {missing}"
                )

        required = min(self.params.minimum_players, team_size * 2)
        if len(players) < required:
            raise InsufficientPlayersError(available=len(players), required=required)
        return by_id


def generate_teams(
    roster: Sequence[PlayerRecord],
    court_count: int,
    team_size: int = 6,
    *,
    position_balancing: bool = False,
    groups: Sequence[PlayerGroup] = (),
    params: MatchmakingParameters | None = None,
) -> MatchmakingResult:
    """One-shot helper around :class:`MatchEngine`."""
    return MatchEngine(params).generate(
        roster,
        court_count,
        team_size=team_size,
        position_balancing=position_balancing,
        groups=groups,
    )


__all__ = ["MatchEngine", "MatchmakingParameters", "generate_teams"]
