"""End-to-end tests for team generation."""

from __future__ import annotations

import random
from collections import Counter

import pytest

from domain.errors import InsufficientPlayersError, InvalidConfigurationError, MatchmakingError
from domain.matchmaking.common import (
    MatchmakingResult,
    PlayerGroup,
    PlayerRecord,
    Position,
    UnplacedReason,
)
from domain.matchmaking.engine import MatchEngine, MatchmakingParameters, generate_teams


def _player(player_id: str, rating: int, position: Position | None = None) -> PlayerRecord:
    return PlayerRecord(player_id=player_id, name=player_id.upper(), rating=rating, position=position)


def _roster(count: int, *, seed: int = 1) -> list[PlayerRecord]:
    rng = random.Random(seed)
    positions = [None, *Position]
    return [
        _player(f"p{index:02d}", rng.randint(900, 2100), rng.choice(positions))
        for index in range(count)
    ]


def _seated_ids(result: MatchmakingResult) -> list[str]:
    return [player_id for assignment in result.assignments for player_id in assignment.player_ids()]


def _side_of(result: MatchmakingResult, player_id: str) -> tuple[int, str]:
    for assignment in result.assignments:
        if player_id in [player.player_id for player in assignment.side_a]:
            return assignment.court_number, "A"
        if player_id in [player.player_id for player in assignment.side_b]:
            return assignment.court_number, "B"
    raise AssertionError(f"{player_id} not seated")


def test_twelve_players_one_court_split_evenly() -> None:
    ratings = [2000, 1900, 1800, 1700, 1600, 1500, 1400, 1300, 1200, 1100, 1000, 900]
    roster = [_player(f"p{rating}", rating) for rating in ratings]

    result = generate_teams(roster, court_count=1, team_size=6)

    assert len(result.assignments) == 1
    court = result.assignments[0]
    assert len(court.side_a) == 6
    assert len(court.side_b) == 6
    assert court.is_full
    assert result.reports[0].difference <= 15.0
    assert result.is_partial is False


def test_group_of_three_lands_on_one_side() -> None:
    grouped = [_player("g1", 1900), _player("g2", 1800), _player("g3", 1700)]
    others = [_player(f"o{index:02d}", 1000 + index * 45) for index in range(21)]
    roster = others[:10] + grouped + others[10:]
    group = PlayerGroup(group_id="friends", members=tuple(grouped))

    result = generate_teams(roster, court_count=2, team_size=6, groups=[group])

    sides = {_side_of(result, player.player_id) for player in grouped}
    assert len(sides) == 1
    assert result.unplaced_groups == ()
    assert sorted(_seated_ids(result)) == sorted(player.player_id for player in roster)


def test_twenty_players_on_two_courts_is_a_partial_fill() -> None:
    roster = _roster(20)

    result = generate_teams(roster, court_count=2, team_size=6)

    assert len(result.assignments) == 2
    assert all(assignment.player_count < 12 for assignment in result.assignments)
    assert not any(assignment.is_full for assignment in result.assignments)
    assert result.assigned_count == 20
    assert result.requested_slots == 24
    assert result.is_partial is True
    assert result.unassigned_players == ()


def test_surplus_players_are_reported_as_unassigned() -> None:
    roster = [_player(f"p{index:02d}", 1000 + index * 37) for index in range(15)]

    result = generate_teams(roster, court_count=1, team_size=6)

    assert result.assigned_count == 12
    assert result.is_partial is False
    assert [player.player_id for player in result.unassigned_players] == ["p02", "p01", "p00"]


@pytest.mark.parametrize("seed", range(12))
@pytest.mark.parametrize(("count", "courts", "team_size"), [(8, 1, 4), (20, 2, 6), (30, 3, 5), (17, 2, 4)])
def test_conservation_and_capacity(seed: int, count: int, courts: int, team_size: int) -> None:
    roster = _roster(count, seed=seed)
    groups = [
        PlayerGroup(group_id="duo", members=(roster[0], roster[5])),
        PlayerGroup(group_id="trio", members=(roster[1], roster[2], roster[7])),
    ]

    result = MatchEngine().generate(
        roster,
        courts,
        team_size=team_size,
        position_balancing=seed % 2 == 0,
        groups=groups,
    )

    seated = _seated_ids(result)
    unassigned = [player.player_id for player in result.unassigned_players]
    assert max(Counter(seated).values()) == 1
    assert sorted(seated + unassigned) == sorted(player.player_id for player in roster)
    for assignment in result.assignments:
        assert len(assignment.side_a) <= team_size
        assert len(assignment.side_b) <= team_size
    assert [assignment.court_number for assignment in result.assignments] == list(
        range(1, courts + 1)
    )
    for group in groups:
        if group in [unplaced.group for unplaced in result.unplaced_groups]:
            continue
        assert len({_side_of(result, member.player_id) for member in group.members}) == 1
    for report in result.reports:
        assert 0.0 <= report.fairness_percent <= 100.0


@pytest.mark.parametrize("seed", range(10))
def test_generation_is_deterministic(seed: int) -> None:
    roster = _roster(22, seed=seed)
    groups = [PlayerGroup(group_id="pair", members=(roster[3], roster[4]))]

    first = generate_teams(roster, 2, 6, position_balancing=True, groups=groups)
    second = generate_teams(list(roster), 2, 6, position_balancing=True, groups=list(groups))

    assert first == second


@pytest.mark.parametrize("seed", range(10))
def test_refinement_never_lowers_fairness(seed: int) -> None:
    roster = _roster(24, seed=seed)
    groups = [PlayerGroup(group_id="pair", members=(roster[0], roster[1]))]

    draft_only = MatchEngine(MatchmakingParameters(max_swap_iterations=0)).generate(
        roster, 2, groups=groups
    )
    refined = MatchEngine().generate(roster, 2, groups=groups)

    for before, after in zip(draft_only.reports, refined.reports):
        assert after.fairness_percent >= before.fairness_percent


def test_inputs_are_not_mutated() -> None:
    roster = _roster(14)
    snapshot = list(roster)
    groups = [PlayerGroup(group_id="pair", members=(roster[2], roster[9]))]
    groups_snapshot = list(groups)

    generate_teams(roster, 1, 6, groups=groups)

    assert roster == snapshot
    assert groups == groups_snapshot


def test_position_balancing_spreads_setters_across_sides() -> None:
    roster = [
        _player("s1", 1800, Position.SETTER),
        _player("o1", 1700, Position.OUTSIDE),
        _player("o2", 1600, Position.OUTSIDE),
        _player("s2", 1500, Position.SETTER),
    ]

    result = generate_teams(roster, 1, 2, position_balancing=True)

    court = result.assignments[0]
    assert [player.position for player in court.side_a].count(Position.SETTER) == 1
    assert [player.position for player in court.side_b].count(Position.SETTER) == 1


def test_unplaceable_group_falls_back_to_individual_seats() -> None:
    roster = [
        _player("a1", 1900), _player("a2", 1900),
        _player("b1", 1800), _player("b2", 1800),
        _player("c1", 1500), _player("c2", 1500),
    ]
    groups = [
        PlayerGroup(group_id="a", members=tuple(roster[0:2])),
        PlayerGroup(group_id="b", members=tuple(roster[2:4])),
        PlayerGroup(group_id="c", members=tuple(roster[4:6])),
    ]

    result = generate_teams(roster, 1, 3, groups=groups)

    assert len(result.unplaced_groups) == 1
    unplaced = result.unplaced_groups[0]
    assert unplaced.group.group_id == "c"
    assert unplaced.reason is UnplacedReason.NO_CAPACITY
    assert unplaced.returned_to_pool is True
    assert result.assigned_count == 6
    assert result.unassigned_players == ()
    assert _side_of(result, "a1") == _side_of(result, "a2")
    assert _side_of(result, "b1") == _side_of(result, "b2")


def test_unplaceable_group_is_held_back_when_fallback_disabled() -> None:
    roster = [
        _player("a1", 1900), _player("a2", 1900),
        _player("b1", 1800), _player("b2", 1800),
        _player("c1", 1500), _player("c2", 1500),
    ]
    groups = [
        PlayerGroup(group_id="a", members=tuple(roster[0:2])),
        PlayerGroup(group_id="b", members=tuple(roster[2:4])),
        PlayerGroup(group_id="c", members=tuple(roster[4:6])),
    ]
    params = MatchmakingParameters(return_unplaced_groups_to_pool=False)

    result = generate_teams(roster, 1, 3, groups=groups, params=params)

    assert result.assigned_count == 4
    assert [player.player_id for player in result.unassigned_players] == ["c1", "c2"]
    assert result.unplaced_groups[0].returned_to_pool is False


def test_group_members_use_roster_snapshot() -> None:
    roster = [_player(f"p{index}", 1500 + index * 10) for index in range(8)]
    stale = PlayerRecord(player_id="p0", name="P0", rating=100)
    group = PlayerGroup(group_id="pair", members=(stale, roster[1]))

    result = generate_teams(roster, 1, 4, groups=[group])

    court = result.assignments[0]
    seated = {player.player_id: player for player in (*court.side_a, *court.side_b)}
    assert seated["p0"].rating == 1500


def test_too_few_players_raises() -> None:
    with pytest.raises(InsufficientPlayersError, match="at least 4") as exc_info:
        generate_teams(_roster(3), 1, 6)
    assert exc_info.value.available == 3
    assert exc_info.value.required == 4


def test_one_a_side_needs_only_two_players() -> None:
    result = generate_teams(_roster(2), 1, 1)
    assert result.assigned_count == 2


@pytest.mark.parametrize(
    ("court_count", "team_size", "match"),
    [
        (0, 6, "court_count must be > 0"),
        (-1, 6, "court_count must be > 0"),
        (1, 0, "team_size must be between"),
        (1, 13, "team_size must be between"),
    ],
)
def test_invalid_dimensions_raise(court_count: int, team_size: int, match: str) -> None:
    with pytest.raises(InvalidConfigurationError, match=match):
        generate_teams(_roster(12), court_count, team_size)


def test_invalid_configuration_is_checked_before_player_count() -> None:
    with pytest.raises(InvalidConfigurationError):
        generate_teams([], 0, 6)


def test_group_larger_than_team_size_raises() -> None:
    roster = _roster(12)
    group = PlayerGroup(group_id="big", members=tuple(roster[:3]))
    with pytest.raises(InvalidConfigurationError, match="max is 2"):
        generate_teams(roster, 2, 2, groups=[group])


def test_group_larger_than_configured_max_raises() -> None:
    roster = _roster(12)
    group = PlayerGroup(group_id="big", members=tuple(roster[:5]))
    with pytest.raises(InvalidConfigurationError, match="max is 4"):
        generate_teams(roster, 1, 6, groups=[group])


def test_group_with_unknown_player_raises() -> None:
    roster = _roster(12)
    group = PlayerGroup(group_id="ghost", members=(roster[0], _player("ghost", 1500)))
    with pytest.raises(InvalidConfigurationError, match="outside the roster"):
        generate_teams(roster, 1, 6, groups=[group])


def test_empty_group_raises() -> None:
    with pytest.raises(InvalidConfigurationError, match="no members"):
        generate_teams(_roster(12), 1, 6, groups=[PlayerGroup(group_id="empty", members=())])


def test_duplicate_roster_entries_raise() -> None:
    roster = _roster(11)
    with pytest.raises(InvalidConfigurationError, match="appears twice"):
        generate_teams(roster + [roster[0]], 1, 6)


def test_configuration_errors_share_a_base_class() -> None:
    assert issubclass(InvalidConfigurationError, MatchmakingError)
    assert issubclass(InvalidConfigurationError, ValueError)
    assert issubclass(InsufficientPlayersError, MatchmakingError)
