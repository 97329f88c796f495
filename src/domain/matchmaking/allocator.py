"""Serpentine draft of individual players onto the remaining side slots."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from domain.matchmaking.common import POSITION_DRAFT_ORDER, PlayerRecord, Position
from domain.matchmaking.lineup import Lineup
from domain.matchmaking.serpentine import SerpentineCursor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllocationOutcome:
    seated: tuple[PlayerRecord, ...]
    unassigned: tuple[PlayerRecord, ...]


def sort_by_rating(players: Sequence[PlayerRecord]) -> list[PlayerRecord]:
    """Highest rating first; equal ratings keep their input order."""
    return sorted(players, key=lambda player: -player.rating)


class CourtAllocator:
    """Fills open slots with a snake draft, optionally one position bucket at a time."""

    def __init__(self, *, position_balancing: bool = False) -> None:
        self.position_balancing = position_balancing

    def allocate(self, players: Sequence[PlayerRecord], lineup: Lineup) -> AllocationOutcome:
        ordered = sort_by_rating(players)
        capacity = lineup.total_open_slots()
        selected = ordered[:capacity]
        overflow = ordered[capacity:]
        if overflow:
            logger.info(
                "%d players exceed the %d open slots and stay unassigned", len(overflow), capacity
            )

        if self.uses_positions(selected):
            seated, leftover = self._draft_by_position(selected, lineup)
        else:
            seated, leftover = _draft(selected, lineup)

        return AllocationOutcome(seated=tuple(seated), unassigned=tuple(leftover + overflow))

    def uses_positions(self, players: Sequence[PlayerRecord]) -> bool:
        # With nobody declaring a position the buckets collapse to a plain draft.
        return self.position_balancing and any(
            player.position_bucket is not Position.ANY for player in players
        )

    def _draft_by_position(
        self, players: Sequence[PlayerRecord], lineup: Lineup
    ) -> tuple[list[PlayerRecord], list[PlayerRecord]]:
        buckets: dict[Position, list[PlayerRecord]] = {position: [] for position in POSITION_DRAFT_ORDER}
        for player in players:
            buckets[player.position_bucket].append(player)

        seated: list[PlayerRecord] = []
        leftover: list[PlayerRecord] = []
        for position in POSITION_DRAFT_ORDER:
            bucket_seated, bucket_leftover = _draft(buckets[position], lineup)
            seated.extend(bucket_seated)
            leftover.extend(bucket_leftover)
        return seated, leftover


def _draft(
    players: Sequence[PlayerRecord], lineup: Lineup
) -> tuple[list[PlayerRecord], list[PlayerRecord]]:
    """Run one snake draft from the first side, skipping full sides."""
    cursor = SerpentineCursor(lineup.side_count)
    seated: list[PlayerRecord] = []
    leftover: list[PlayerRecord] = []

    for player in players:
        index = cursor.seek(lambda candidate: lineup.open_slots(candidate) > 0)
        if index is None:
            leftover.append(player)
            continue
        lineup.seat(index, (player,))
        seated.append(player)
        cursor.advance()

    return seated, leftover


__all__ = ["AllocationOutcome", "CourtAllocator", "sort_by_rating"]
