"""Caller-side helpers for applying rating deltas to player records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace

from domain.matchmaking.common import PlayerRecord
from domain.ratings.common import RatingDelta, RatingHistoryEntry


def settle_player(record: PlayerRecord, delta: RatingDelta) -> tuple[PlayerRecord, RatingHistoryEntry]:
    """Return the updated record and its history row; ``record`` is left untouched.

    The new rating is computed from the pre-match snapshot on ``delta``, not
    from whatever rating the record holds now.
    """
    if record.player_id != delta.player_id:
        raise ValueError(
            f"delta for player_id={delta.player_id} applied to player_id={record.player_id}"
        )

    new_rating = delta.rating_after
    win_streak = record.win_streak + 1 if delta.won else 0
    highest = max(new_rating, record.highest_rating if record.highest_rating is not None else new_rating)
    updated = replace(
        record,
        rating=new_rating,
        games_played=record.games_played + 1,
        wins=record.wins + 1 if delta.won else record.wins,
        losses=record.losses if delta.won else record.losses + 1,
        win_streak=win_streak,
        best_win_streak=max(win_streak, record.best_win_streak),
        highest_rating=highest,
    )
    history = RatingHistoryEntry(
        player_id=record.player_id,
        game_id=delta.game_id,
        previous_rating=delta.rating_before,
        new_rating=new_rating,
        change=delta.delta,
    )
    return updated, history


def settle_match(
    records: Mapping[str, PlayerRecord],
    deltas: Iterable[RatingDelta],
) -> tuple[dict[str, PlayerRecord], list[RatingHistoryEntry]]:
    """Settle every delta of one match; returns new records keyed by player id."""
    updated: dict[str, PlayerRecord] = {}
    history: list[RatingHistoryEntry] = []
    for delta in deltas:
        try:
            record = records[delta.player_id]
        except KeyError as exc:
            raise KeyError(f"No player record for player_id={delta.player_id}") from exc
        updated[delta.player_id], entry = settle_player(record, delta)
        history.append(entry)
    return updated, history


__all__ = ["settle_match", "settle_player"]
