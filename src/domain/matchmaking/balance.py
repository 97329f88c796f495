"""Balance metrics for two-sided courts."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from domain.matchmaking.common import BalanceReport, PlayerRecord


class FairnessCurve(str, Enum):
    """Decay of fairness percent as the rating gap grows."""

    LINEAR = "linear"
    EXPONENTIAL = "exponential"


def average_rating(players: Iterable[PlayerRecord]) -> float:
    """Mean rating of a roster, 0.0 for an empty roster."""
    ratings = [player.rating for player in players]
    if not ratings:
        return 0.0
    return sum(ratings) / float(len(ratings))


def calculate_fairness_percent(
    difference: float,
    *,
    curve: FairnessCurve = FairnessCurve.LINEAR,
    scale: float = 10.0,
) -> float:
    """Map an average-rating gap to a fairness score in [0, 100].

    ``LINEAR`` loses one percent per ``scale`` rating points.
    ``EXPONENTIAL`` halves the score every ``scale`` rating points.
    """
    if scale <= 0.0:
        raise ValueError("scale must be greater than 0")

    gap = abs(difference)
    if curve is FairnessCurve.EXPONENTIAL:
        percent = 100.0 * 0.5 ** (gap / scale)
    else:
        percent = 100.0 - (gap / scale)
    return max(0.0, min(percent, 100.0))


@dataclass(frozen=True)
class BalanceScorer:
    """Scores courts; the optimizer and the reports share this one formula."""

    curve: FairnessCurve = FairnessCurve.LINEAR
    scale: float = 10.0

    def fairness(self, avg_a: float, avg_b: float) -> float:
        return calculate_fairness_percent(avg_a - avg_b, curve=self.curve, scale=self.scale)

    def score(
        self,
        side_a: Iterable[PlayerRecord],
        side_b: Iterable[PlayerRecord],
    ) -> BalanceReport:
        avg_a = average_rating(side_a)
        avg_b = average_rating(side_b)
        return BalanceReport(
            avg_a=avg_a,
            avg_b=avg_b,
            difference=abs(avg_a - avg_b),
            fairness_percent=self.fairness(avg_a, avg_b),
        )


__all__ = [
    "BalanceScorer",
    "FairnessCurve",
    "average_rating",
    "calculate_fairness_percent",
]
