"""Seat pre-formed player groups as indivisible units."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from domain.matchmaking.common import PlayerGroup, UnplacedGroup, UnplacedReason
from domain.matchmaking.lineup import Lineup
from domain.matchmaking.serpentine import SerpentineCursor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupPlacement:
    """Outcome of the group pass."""

    reserved_ids: frozenset[str]
    placed: tuple[PlayerGroup, ...]
    unplaced: tuple[UnplacedGroup, ...]


class GroupAssigner:
    """Places whole groups onto sides in serpentine order, strongest groups first."""

    def __init__(self, *, return_unplaced_to_pool: bool = True) -> None:
        self.return_unplaced_to_pool = return_unplaced_to_pool

    def assign(self, groups: Sequence[PlayerGroup], lineup: Lineup) -> GroupPlacement:
        # sorted() is stable, so equal-average groups keep their submitted order.
        ordered = sorted(groups, key=lambda group: -group.average_rating)
        cursor = SerpentineCursor(lineup.side_count)

        reserved: set[str] = set()
        placed: list[PlayerGroup] = []
        unplaced: list[UnplacedGroup] = []

        for group in ordered:
            if group.member_ids() & reserved:
                logger.warning(
                    "group_id=%s shares players with an already seated group", group.group_id
                )
                unplaced.append(
                    UnplacedGroup(
                        group=group,
                        reason=UnplacedReason.OVERLAPPING_MEMBERS,
                        returned_to_pool=self.return_unplaced_to_pool,
                    )
                )
                continue

            index = cursor.seek(lambda candidate: lineup.open_slots(candidate) >= group.size)
            if index is None:
                logger.warning(
                    "group_id=%s size=%d does not fit on any side", group.group_id, group.size
                )
                unplaced.append(
                    UnplacedGroup(
                        group=group,
                        reason=UnplacedReason.NO_CAPACITY,
                        returned_to_pool=self.return_unplaced_to_pool,
                    )
                )
                continue

            lineup.seat(index, group.members)
            reserved.update(group.member_ids())
            placed.append(group)
            court_number, side = lineup.locate(index)
            logger.debug(
                "group_id=%s avg=%.1f seated on court=%d side=%s",
                group.group_id,
                group.average_rating,
                court_number,
                side.value,
            )
            cursor.advance()

        return GroupPlacement(
            reserved_ids=frozenset(reserved),
            placed=tuple(placed),
            unplaced=tuple(unplaced),
        )


__all__ = ["GroupAssigner", "GroupPlacement"]
