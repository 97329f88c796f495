#!/usr/bin/env python3
"""Suggest the next round of matchups for a session's teams."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from domain.errors import MatchmakingError
from domain.loaders import load_session
from domain.matchmaking.rotation import (
    RotationMode,
    calculate_standings,
    generate_next_round,
    is_round_robin_complete,
    next_round_number,
    should_skip_ratings,
)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Session rotation jobs.",
)


@app.command("next-round")
def next_round(
    session_file: Annotated[Path, typer.Argument(help="TOML session with [[teams]] and [[games]].")],
    courts: Annotated[int, typer.Option("--courts", help="Courts available this round.")] = 1,
    mode: Annotated[
        RotationMode | None,
        typer.Option("--mode", help="Rotation mode. Defaults to [session].rotation_mode."),
    ] = None,
    round_number: Annotated[
        int | None,
        typer.Option("--round", help="Round to generate. Defaults to the round after the last completed one."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Print matchups, bench order and current standings."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    session_mode, teams, games = load_session(session_file)
    mode = mode or session_mode
    if round_number is None:
        round_number = next_round_number(games)

    if mode is RotationMode.ROUND_ROBIN and is_round_robin_complete(teams, games):
        typer.echo("round robin complete: every pair of teams has played")
        return

    try:
        result = generate_next_round(teams, games, mode, courts, round_number)
    except MatchmakingError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(
        f"round={result.round_number} mode={mode.label} "
        f"rated={'no' if should_skip_ratings(mode) else 'yes'}"
    )
    for matchup in result.matchups:
        typer.echo(f"  court={matchup.court_number} {matchup.team_a.name} vs {matchup.team_b.name}")
    if result.benched:
        typer.echo("benched=" + ", ".join(team.name for team in result.benched))

    for position, standing in enumerate(calculate_standings(teams, games), start=1):
        typer.echo(
            f"{position:>2}. {standing.team.name} "
            f"wins={standing.wins} losses={standing.losses} diff={standing.point_differential:+d}"
        )


if __name__ == "__main__":
    app()
