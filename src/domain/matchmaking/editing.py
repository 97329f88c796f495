"""Manual lineup edits applied after generation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from domain.matchmaking.common import CourtAssignment, PlayerRecord, Side


def _find(assignments: Sequence[CourtAssignment], player_id: str) -> tuple[int, Side, int]:
    for court_index, assignment in enumerate(assignments):
        for side in (Side.A, Side.B):
            for slot, player in enumerate(assignment.side(side)):
                if player.player_id == player_id:
                    return court_index, side, slot
    raise KeyError(f"player_id={player_id} is not in any court assignment")


def _with_side(
    assignment: CourtAssignment, side: Side, players: tuple[PlayerRecord, ...]
) -> CourtAssignment:
    if side is Side.A:
        return replace(assignment, side_a=players)
    return replace(assignment, side_b=players)


def swap_players(
    assignments: Sequence[CourtAssignment],
    player_a_id: str,
    player_b_id: str,
) -> tuple[CourtAssignment, ...]:
    """Exchange two players anywhere in a batch; each takes the other's slot."""
    updated = list(assignments)
    court_a, side_a, slot_a = _find(updated, player_a_id)
    court_b, side_b, slot_b = _find(updated, player_b_id)
    if (court_a, side_a, slot_a) == (court_b, side_b, slot_b):
        return tuple(updated)

    player_a = updated[court_a].side(side_a)[slot_a]
    player_b = updated[court_b].side(side_b)[slot_b]

    roster_a = list(updated[court_a].side(side_a))
    roster_a[slot_a] = player_b
    updated[court_a] = _with_side(updated[court_a], side_a, tuple(roster_a))

    roster_b = list(updated[court_b].side(side_b))
    roster_b[slot_b] = player_a
    updated[court_b] = _with_side(updated[court_b], side_b, tuple(roster_b))

    return tuple(updated)


def move_player(
    assignments: Sequence[CourtAssignment],
    player_id: str,
) -> tuple[CourtAssignment, ...]:
    """Move a player to the opposite side of the same court."""
    updated = list(assignments)
    court_index, side, slot = _find(updated, player_id)
    assignment = updated[court_index]
    target = side.opponent
    if len(assignment.side(target)) >= assignment.team_size:
        raise ValueError(
            f"court={assignment.court_number} side={target.value} is already full "
            f"({assignment.team_size} players)"
        )

    source = assignment.side(side)
    moved = source[slot]
    assignment = _with_side(assignment, side, source[:slot] + source[slot + 1 :])
    assignment = _with_side(assignment, target, assignment.side(target) + (moved,))
    updated[court_index] = assignment
    return tuple(updated)


__all__ = ["move_player", "swap_players"]
