#!/usr/bin/env python3
"""Compute per-player rating deltas for a completed match."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from domain.config_base import select_system
from domain.loaders import load_match_result
from domain.ratings.elo.calculator import MatchEloCalculator
from domain.ratings.elo.config import load_elo_system_configs

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "ratings" / "elo"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Rating update jobs.",
)


@app.command("settle")
def settle(
    match_file: Annotated[Path, typer.Argument(help="TOML match result with [[participants]].")],
    config_dir: Annotated[Path, typer.Option("--config-dir")] = DEFAULT_CONFIG_DIR,
    system: Annotated[
        str | None,
        typer.Option("--system", help="Elo system name. Defaults to the first config."),
    ] = None,
) -> None:
    """Print rating_before, delta and rating_after for every participant."""
    system_config = select_system(load_elo_system_configs(config_dir), system)
    match_result = load_match_result(match_file)

    try:
        deltas = MatchEloCalculator(system_config.parameters).process_match(match_result)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if not match_result.rated:
        typer.echo(f"game_id={match_result.game_id} is unrated; ratings unchanged")
        return

    for delta in deltas:
        typer.echo(
            f"player={delta.player_id} side={delta.side.value} "
            f"{'won' if delta.won else 'lost'} "
            f"rating_before={delta.rating_before} delta={delta.delta:+d} "
            f"rating_after={delta.rating_after} expected={delta.expected_score:.3f}"
        )
    typer.echo(
        f"completed system={system_config.name} game_id={match_result.game_id} "
        f"winner={match_result.winner.value} participants={len(deltas)}"
    )


if __name__ == "__main__":
    app()
