"""Greedy one-for-one swap refinement of a single court."""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass

from domain.matchmaking.balance import BalanceScorer
from domain.matchmaking.common import CourtAssignment, PlayerRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwapRecord:
    iteration: int
    from_side_a: PlayerRecord
    from_side_b: PlayerRecord
    fairness_before: float
    fairness_after: float


@dataclass(frozen=True)
class OptimizationOutcome:
    assignment: CourtAssignment
    swaps: tuple[SwapRecord, ...]
    fairness_before: float
    fairness_after: float


class LocalSwapOptimizer:
    """Bounded local search that trades one player per side while fairness improves.

    Each iteration scans (side A, side B) pairs in roster order and applies the
    first swap that raises fairness by at least ``min_fairness_gain``. While
    fairness sits below that gain the curve has bottomed out, so any swap that
    narrows the rating gap qualifies instead. The search stops once fairness
    reaches ``target_fairness``, when no pair qualifies, or after
    ``max_iterations`` swaps. Players never leave their court.
    """

    def __init__(
        self,
        scorer: BalanceScorer,
        *,
        target_fairness: float = 98.5,
        min_fairness_gain: float = 0.1,
        max_iterations: int = 20,
    ) -> None:
        if max_iterations < 0:
            raise ValueError("max_iterations must be >= 0")
        if min_fairness_gain <= 0.0:
            raise ValueError("min_fairness_gain must be > 0")
        self.scorer = scorer
        self.target_fairness = target_fairness
        self.min_fairness_gain = min_fairness_gain
        self.max_iterations = max_iterations

    def optimize(
        self,
        assignment: CourtAssignment,
        *,
        locked_ids: Collection[str] = frozenset(),
        match_positions: bool = False,
    ) -> OptimizationOutcome:
        side_a = assignment.side_a
        side_b = assignment.side_b
        initial_fairness = self._fairness(side_a, side_b)
        fairness = initial_fairness
        swaps: list[SwapRecord] = []

        for iteration in range(1, self.max_iterations + 1):
            if fairness >= self.target_fairness:
                break

            found = self._first_improving_pair(
                side_a,
                side_b,
                fairness=fairness,
                locked_ids=locked_ids,
                match_positions=match_positions,
            )
            if found is None:
                break

            index_a, index_b, new_fairness = found
            player_a, player_b = side_a[index_a], side_b[index_b]
            side_a = side_a[:index_a] + (player_b,) + side_a[index_a + 1 :]
            side_b = side_b[:index_b] + (player_a,) + side_b[index_b + 1 :]
            swaps.append(
                SwapRecord(
                    iteration=iteration,
                    from_side_a=player_a,
                    from_side_b=player_b,
                    fairness_before=fairness,
                    fairness_after=new_fairness,
                )
            )
            logger.debug(
                "court=%d iteration=%d swapped %s <-> %s fairness %.2f -> %.2f",
                assignment.court_number,
                iteration,
                player_a.player_id,
                player_b.player_id,
                fairness,
                new_fairness,
            )
            fairness = new_fairness

        return OptimizationOutcome(
            assignment=CourtAssignment(
                court_number=assignment.court_number,
                side_a=side_a,
                side_b=side_b,
                team_size=assignment.team_size,
            ),
            swaps=tuple(swaps),
            fairness_before=initial_fairness,
            fairness_after=fairness,
        )

    def _fairness(self, side_a: tuple[PlayerRecord, ...], side_b: tuple[PlayerRecord, ...]) -> float:
        return self.scorer.score(side_a, side_b).fairness_percent

    def _first_improving_pair(
        self,
        side_a: tuple[PlayerRecord, ...],
        side_b: tuple[PlayerRecord, ...],
        *,
        fairness: float,
        locked_ids: Collection[str],
        match_positions: bool,
    ) -> tuple[int, int, float] | None:
        if not side_a or not side_b:
            return None

        sum_a = float(sum(player.rating for player in side_a))
        sum_b = float(sum(player.rating for player in side_b))
        size_a = float(len(side_a))
        size_b = float(len(side_b))
        gap = abs(sum_a / size_a - sum_b / size_b)

        for index_a, player_a in enumerate(side_a):
            if player_a.player_id in locked_ids:
                continue
            for index_b, player_b in enumerate(side_b):
                if player_b.player_id in locked_ids:
                    continue
                if match_positions and player_a.position_bucket is not player_b.position_bucket:
                    continue

                shift = player_b.rating - player_a.rating
                new_avg_a = (sum_a + shift) / size_a
                new_avg_b = (sum_b - shift) / size_b
                candidate = self.scorer.fairness(new_avg_a, new_avg_b)
                if candidate - fairness >= self.min_fairness_gain:
                    return index_a, index_b, candidate
                # Fairness is flat past the bottom of the curve; fall back to the raw gap.
                if fairness < self.min_fairness_gain and abs(new_avg_a - new_avg_b) < gap:
                    return index_a, index_b, candidate
        return None


__all__ = ["LocalSwapOptimizer", "OptimizationOutcome", "SwapRecord"]
