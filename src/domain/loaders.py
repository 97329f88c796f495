"""Read rosters and match results from TOML files."""

from __future__ import annotations

from pathlib import Path
from typing import Any
import tomllib

from domain.matchmaking.common import PlayerGroup, PlayerRecord, Position, Side
from domain.matchmaking.rotation import RotationMode, SessionGame, SessionTeam, should_skip_ratings
from domain.ratings.common import MatchParticipant, MatchResult, winner_from_score
from domain.ratings.elo.calculator import EloParameters


def _read_toml(file_path: Path) -> dict[str, Any]:
    if not file_path.is_file():
        raise FileNotFoundError(f"File not found: {file_path}")
    with file_path.open("rb") as file:
        return tomllib.load(file)


def _parse_position(value: Any, file_path: Path, player_id: str) -> Position | None:
    if value is None or str(value).strip() == "":
        return None
    try:
        return Position(str(value).strip().lower())
    except ValueError as exc:
        choices = ", ".join(position.value for position in Position)
        raise ValueError(
            f"{file_path}: player {player_id!r} position must be one of {choices}"
        ) from exc


def _parse_side(value: Any, file_path: Path, label: str) -> Side:
    try:
        return Side(str(value).strip().upper())
    except ValueError as exc:
        raise ValueError(f"{file_path}: {label} must be 'A' or 'B', got {value!r}") from exc


def _parse_rotation_mode(value: Any, file_path: Path, label: str) -> RotationMode:
    try:
        return RotationMode(str(value).strip().lower())
    except ValueError as exc:
        choices = ", ".join(mode.value for mode in RotationMode)
        raise ValueError(f"{file_path}: {label} must be one of {choices}") from exc


def _parse_rating(player_raw: dict[str, Any], elo_params: EloParameters) -> int:
    if "rating" in player_raw:
        return int(player_raw["rating"])
    skill_level = player_raw.get("skill_level")
    return elo_params.starting_rating(None if skill_level is None else str(skill_level))


def load_roster(
    file_path: Path,
    *,
    elo_params: EloParameters | None = None,
) -> tuple[list[PlayerRecord], list[PlayerGroup]]:
    """Load ``[[players]]`` and optional ``[[groups]]`` tables, keeping file order.

    Players without a ``rating`` start from their ``skill_level`` via
    :meth:`EloParameters.starting_rating`.
    """
    raw = _read_toml(file_path)
    elo_params = elo_params or EloParameters()

    players: list[PlayerRecord] = []
    for index, player_raw in enumerate(raw.get("players", [])):
        player_id = str(player_raw.get("id", "")).strip()
        if not player_id:
            raise ValueError(f"{file_path}: players[{index}].id is required")
        players.append(
            PlayerRecord(
                player_id=player_id,
                name=str(player_raw.get("name", player_id)),
                rating=_parse_rating(player_raw, elo_params),
                position=_parse_position(player_raw.get("position"), file_path, player_id),
                games_played=int(player_raw.get("games_played", 0)),
                wins=int(player_raw.get("wins", 0)),
                losses=int(player_raw.get("losses", 0)),
                win_streak=int(player_raw.get("win_streak", 0)),
                best_win_streak=int(player_raw.get("best_win_streak", 0)),
            )
        )

    by_id = {player.player_id: player for player in players}
    groups: list[PlayerGroup] = []
    for index, group_raw in enumerate(raw.get("groups", [])):
        group_id = str(group_raw.get("id", f"group-{index + 1}"))
        member_ids = [str(member_id) for member_id in group_raw.get("members", [])]
        missing = [member_id for member_id in member_ids if member_id not in by_id]
        if missing:
            raise ValueError(f"{file_path}: group {group_id!r} references unknown players {missing}")
        groups.append(
            PlayerGroup(group_id=group_id, members=tuple(by_id[member_id] for member_id in member_ids))
        )

    return players, groups


def load_match_result(file_path: Path) -> MatchResult:
    """Load a ``[match]`` table and its ``[[participants]]`` snapshot.

    The winner comes from ``winner`` or, when absent, from ``score_a``/``score_b``.
    An optional ``rotation_mode`` marks games from modes that never move ratings.
    """
    raw = _read_toml(file_path)
    match_raw = raw.get("match", {})

    game_id = str(match_raw.get("game_id", "")).strip()
    if not game_id:
        raise ValueError(f"{file_path}: [match].game_id is required")

    if "winner" in match_raw:
        winner = _parse_side(match_raw["winner"], file_path, "[match].winner")
    elif "score_a" in match_raw and "score_b" in match_raw:
        winner = winner_from_score(int(match_raw["score_a"]), int(match_raw["score_b"]))
    else:
        raise ValueError(f"{file_path}: [match] needs winner or score_a/score_b")

    participants = tuple(
        MatchParticipant(
            player_id=str(participant_raw["player_id"]),
            side=_parse_side(participant_raw.get("side"), file_path, f"participants[{index}].side"),
            rating_before=int(participant_raw["rating_before"]),
        )
        for index, participant_raw in enumerate(raw.get("participants", []))
    )

    rated = True
    if "rotation_mode" in match_raw:
        mode = _parse_rotation_mode(match_raw["rotation_mode"], file_path, "[match].rotation_mode")
        rated = not should_skip_ratings(mode)

    return MatchResult(
        game_id=game_id,
        court_number=int(match_raw.get("court_number", 1)),
        winner=winner,
        participants=participants,
        rated=rated,
    )


def load_session(file_path: Path) -> tuple[RotationMode, list[SessionTeam], list[SessionGame]]:
    """Load a ``[session]`` table with its ``[[teams]]`` and ``[[games]]``.

    A game without ``winner`` takes it from unequal ``score_a``/``score_b``;
    equal or missing scores leave it undecided.
    """
    raw = _read_toml(file_path)
    session_raw = raw.get("session", {})
    mode = _parse_rotation_mode(
        session_raw.get("rotation_mode", RotationMode.MANUAL.value),
        file_path,
        "[session].rotation_mode",
    )

    teams: list[SessionTeam] = []
    for index, team_raw in enumerate(raw.get("teams", [])):
        team_id = str(team_raw.get("id", "")).strip()
        if not team_id:
            raise ValueError(f"{file_path}: teams[{index}].id is required")
        teams.append(
            SessionTeam(
                team_id=team_id,
                name=str(team_raw.get("name", team_id)),
                player_ids=tuple(str(player_id) for player_id in team_raw.get("players", [])),
            )
        )

    team_ids = {team.team_id for team in teams}
    games: list[SessionGame] = []
    for index, game_raw in enumerate(raw.get("games", [])):
        team_a_id = str(game_raw.get("team_a", ""))
        team_b_id = str(game_raw.get("team_b", ""))
        if team_a_id not in team_ids or team_b_id not in team_ids:
            raise ValueError(f"{file_path}: games[{index}] references unknown teams")
        score_a = int(game_raw.get("score_a", 0))
        score_b = int(game_raw.get("score_b", 0))
        if "winner" in game_raw:
            winner: Side | None = _parse_side(game_raw["winner"], file_path, f"games[{index}].winner")
        elif score_a != score_b:
            winner = winner_from_score(score_a, score_b)
        else:
            winner = None
        games.append(
            SessionGame(
                game_id=str(game_raw.get("id", f"game-{index + 1}")),
                round_number=int(game_raw.get("round", 1)),
                court_number=int(game_raw.get("court", 1)),
                team_a_id=team_a_id,
                team_b_id=team_b_id,
                winner=winner,
                score_a=score_a,
                score_b=score_b,
                completed=bool(game_raw.get("completed", True)),
            )
        )

    return mode, teams, games


__all__ = ["load_match_result", "load_roster", "load_session"]
