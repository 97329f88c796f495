"""Unit tests for the individual snake draft."""

from __future__ import annotations

import pytest

from domain.matchmaking.allocator import CourtAllocator, sort_by_rating
from domain.matchmaking.common import PlayerRecord, Position
from domain.matchmaking.lineup import Lineup


def _player(player_id: str, rating: int, position: Position | None = None) -> PlayerRecord:
    return PlayerRecord(player_id=player_id, name=player_id.upper(), rating=rating, position=position)


def _ids(lineup: Lineup, index: int) -> list[str]:
    return [player.player_id for player in lineup.players(index)]


def test_sort_keeps_input_order_for_equal_ratings() -> None:
    players = [_player("a", 1500), _player("b", 1600), _player("c", 1500), _player("d", 1500)]
    assert [player.player_id for player in sort_by_rating(players)] == ["b", "a", "c", "d"]


def test_single_court_snake_draft_balances_twelve_players() -> None:
    ratings = [2000, 1900, 1800, 1700, 1600, 1500, 1400, 1300, 1200, 1100, 1000, 900]
    players = [_player(f"p{rating}", rating) for rating in ratings]
    lineup = Lineup(court_count=1, team_size=6)

    outcome = CourtAllocator().allocate(players, lineup)

    assert _ids(lineup, 0) == ["p2000", "p1700", "p1600", "p1300", "p1200", "p900"]
    assert _ids(lineup, 1) == ["p1900", "p1800", "p1500", "p1400", "p1100", "p1000"]
    assert len(outcome.seated) == 12
    assert outcome.unassigned == ()


def test_snake_draft_spans_all_courts() -> None:
    players = [_player(f"p{rating}", rating) for rating in range(800, 0, -100)]
    lineup = Lineup(court_count=2, team_size=2)

    CourtAllocator().allocate(players, lineup)

    side_totals = [sum(player.rating for player in lineup.players(index)) for index in range(4)]
    assert side_totals == [900, 900, 900, 900]
    assert _ids(lineup, 0) == ["p800", "p100"]
    assert _ids(lineup, 3) == ["p500", "p400"]


def test_overflow_players_are_reported_not_dropped() -> None:
    players = [_player(f"p{rating}", rating) for rating in (1500, 1900, 1300, 1700, 1100)]
    lineup = Lineup(court_count=1, team_size=2)

    outcome = CourtAllocator().allocate(players, lineup)

    assert [player.player_id for player in outcome.unassigned] == ["p1100"]
    assert len(outcome.seated) == 4
    assert lineup.total_open_slots() == 0


def test_short_roster_leaves_open_slots() -> None:
    players = [_player("a", 1500), _player("b", 1400), _player("c", 1300)]
    lineup = Lineup(court_count=2, team_size=3)

    outcome = CourtAllocator().allocate(players, lineup)

    assert len(outcome.seated) == 3
    assert outcome.unassigned == ()
    assert lineup.total_open_slots() == 9


def test_draft_skips_sides_already_filled_by_groups() -> None:
    lineup = Lineup(court_count=1, team_size=2)
    lineup.seat(0, (_player("g1", 1600), _player("g2", 1600)))

    CourtAllocator().allocate([_player("a", 1800), _player("b", 1200)], lineup)

    assert _ids(lineup, 1) == ["a", "b"]


def test_position_balancing_spreads_setters() -> None:
    players = [
        _player("s1", 1800, Position.SETTER),
        _player("o1", 1700, Position.OUTSIDE),
        _player("o2", 1600, Position.OUTSIDE),
        _player("s2", 1500, Position.SETTER),
    ]

    rating_only = Lineup(court_count=1, team_size=2)
    CourtAllocator().allocate(players, rating_only)
    assert _ids(rating_only, 0) == ["s1", "s2"]

    balanced = Lineup(court_count=1, team_size=2)
    CourtAllocator(position_balancing=True).allocate(players, balanced)
    assert _ids(balanced, 0) == ["s1", "o1"]
    assert _ids(balanced, 1) == ["s2", "o2"]


def test_position_balancing_without_declared_positions_is_plain_draft() -> None:
    players = [_player(f"p{rating}", rating, Position.ANY) for rating in (1800, 1700, 1600, 1500)]
    allocator = CourtAllocator(position_balancing=True)
    lineup = Lineup(court_count=1, team_size=2)

    allocator.allocate(players, lineup)

    assert allocator.uses_positions(players) is False
    assert _ids(lineup, 0) == ["p1800", "p1500"]


def test_position_buckets_respect_capacity() -> None:
    players = [_player(f"s{index}", 1500 + index, Position.SETTER) for index in range(5)]
    players.append(_player("free", 1400))
    lineup = Lineup(court_count=1, team_size=3)

    outcome = CourtAllocator(position_balancing=True).allocate(players, lineup)

    assert len(lineup.players(0)) == 3
    assert len(lineup.players(1)) == 3
    assert outcome.unassigned == ()


def test_seating_past_capacity_is_rejected() -> None:
    lineup = Lineup(court_count=1, team_size=1)
    with pytest.raises(ValueError, match="open slots"):
        lineup.seat(0, (_player("a", 1500), _player("b", 1500)))
