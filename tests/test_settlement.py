"""Unit tests for applying rating deltas and match sheet helpers."""

from __future__ import annotations

import pytest

from domain.matchmaking.common import CourtAssignment, PlayerRecord, Side
from domain.matchmaking.rotation import RotationMode
from domain.ratings.common import (
    RatingDelta,
    build_match_result,
    initial_rating_for_skill_level,
    winner_from_score,
)
from domain.ratings.elo.calculator import MatchEloCalculator
from domain.ratings.settlement import settle_match, settle_player


def _delta(player_id: str, *, won: bool, rating_before: int = 1500, delta: int = 16) -> RatingDelta:
    return RatingDelta(
        player_id=player_id,
        game_id="game-1",
        side=Side.A,
        won=won,
        rating_before=rating_before,
        team_average=1500.0,
        opponent_average=1500.0,
        expected_score=0.5,
        delta=delta if won else -delta,
    )


def test_win_updates_counters_and_history() -> None:
    record = PlayerRecord(
        player_id="p1",
        name="Avery",
        rating=1500,
        games_played=9,
        wins=5,
        losses=4,
        win_streak=2,
        best_win_streak=2,
        highest_rating=1510,
    )

    updated, history = settle_player(record, _delta("p1", won=True))

    assert updated.rating == 1516
    assert updated.games_played == 10
    assert updated.wins == 6
    assert updated.losses == 4
    assert updated.win_streak == 3
    assert updated.best_win_streak == 3
    assert updated.highest_rating == 1516
    assert history.previous_rating == 1500
    assert history.new_rating == 1516
    assert history.change == 16
    assert record.rating == 1500


def test_loss_resets_streak_and_keeps_best() -> None:
    record = PlayerRecord(
        player_id="p1", name="Avery", rating=1600, win_streak=4, best_win_streak=6, highest_rating=1650
    )

    updated, history = settle_player(record, _delta("p1", won=False, rating_before=1600))

    assert updated.rating == 1584
    assert updated.losses == 1
    assert updated.win_streak == 0
    assert updated.best_win_streak == 6
    assert updated.highest_rating == 1650
    assert history.change == -16


def test_new_rating_comes_from_snapshot_not_current_record() -> None:
    record = PlayerRecord(player_id="p1", name="Avery", rating=1700)
    updated, _ = settle_player(record, _delta("p1", won=True, rating_before=1500))
    assert updated.rating == 1516


def test_first_game_sets_highest_rating() -> None:
    record = PlayerRecord(player_id="p1", name="Avery", rating=1500)
    updated, _ = settle_player(record, _delta("p1", won=False))
    assert updated.highest_rating == 1484


def test_mismatched_player_is_rejected() -> None:
    record = PlayerRecord(player_id="p1", name="Avery", rating=1500)
    with pytest.raises(ValueError, match="applied to player_id=p1"):
        settle_player(record, _delta("p2", won=True))


def test_settle_match_requires_every_record() -> None:
    records = {"p1": PlayerRecord(player_id="p1", name="Avery", rating=1500)}
    with pytest.raises(KeyError, match="p2"):
        settle_match(records, [_delta("p1", won=True), _delta("p2", won=False)])


def test_settle_match_returns_new_records_and_history() -> None:
    records = {
        "p1": PlayerRecord(player_id="p1", name="Avery", rating=1500),
        "p2": PlayerRecord(player_id="p2", name="Blake", rating=1500),
    }

    updated, history = settle_match(records, [_delta("p1", won=True), _delta("p2", won=False)])

    assert updated["p1"].rating == 1516
    assert updated["p2"].rating == 1484
    assert [entry.player_id for entry in history] == ["p1", "p2"]
    assert records["p1"].rating == 1500


def test_build_match_result_snapshots_ratings() -> None:
    assignment = CourtAssignment(
        court_number=2,
        side_a=(PlayerRecord(player_id="a", name="A", rating=1600),),
        side_b=(PlayerRecord(player_id="b", name="B", rating=1400),),
        team_size=6,
    )

    result = build_match_result(assignment, winner=Side.B, game_id="game-9")

    assert result.court_number == 2
    assert result.winner is Side.B
    assert [(p.player_id, p.side, p.rating_before) for p in result.participants] == [
        ("a", Side.A, 1600),
        ("b", Side.B, 1400),
    ]


def test_winner_from_score() -> None:
    assert winner_from_score(25, 20) is Side.A
    assert winner_from_score(18, 25) is Side.B
    with pytest.raises(ValueError, match="Tied score"):
        winner_from_score(20, 20)


@pytest.mark.parametrize(
    ("skill_level", "expected"),
    [
        ("beginner", 1200),
        ("casual", 1350),
        ("regular", 1500),
        ("Experienced", 1650),
        ("advanced", 1800),
        ("legendary", 1500),
        (None, 1500),
    ],
)
def test_initial_rating_for_skill_level(skill_level: str | None, expected: int) -> None:
    assert initial_rating_for_skill_level(skill_level) == expected


def test_speed_mode_match_is_unrated_and_produces_no_deltas() -> None:
    assignment = CourtAssignment(
        court_number=1,
        side_a=(PlayerRecord(player_id="a", name="A", rating=1500),),
        side_b=(PlayerRecord(player_id="b", name="B", rating=1500),),
        team_size=6,
    )

    speed = build_match_result(assignment, winner=Side.A, game_id="g1", rotation_mode=RotationMode.SPEED)
    king = build_match_result(
        assignment, winner=Side.A, game_id="g2", rotation_mode=RotationMode.KING_OF_COURT
    )

    assert speed.rated is False
    assert king.rated is True
    assert MatchEloCalculator().process_match(speed) == []
    assert [delta.delta for delta in MatchEloCalculator().process_match(king)] == [16, -16]
