#!/usr/bin/env python3
"""Generate balanced courts from a roster file."""

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

from domain.config_base import select_system
from domain.errors import MatchmakingError
from domain.loaders import load_roster
from domain.matchmaking.common import PlayerRecord
from domain.matchmaking.config import load_matchmaking_system_configs
from domain.matchmaking.engine import MatchEngine
from domain.ratings.elo.config import load_elo_system_configs

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "matchmaking"
DEFAULT_ELO_CONFIG_DIR = ROOT_DIR / "configs" / "ratings" / "elo"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Team generation jobs.",
)


def _format_side(label: str, players: tuple[PlayerRecord, ...]) -> str:
    names = ", ".join(
        f"{player.name} ({player.rating}{'/' + player.position.value if player.position else ''})"
        for player in players
    )
    return f"  side {label} [{len(players)}]: {names or '-'}"


@app.command("generate")
def generate(
    roster_file: Annotated[Path, typer.Argument(help="TOML roster with [[players]] and [[groups]].")],
    courts: Annotated[int, typer.Option("--courts", help="Number of courts to fill.")] = 1,
    team_size: Annotated[
        int | None,
        typer.Option("--team-size", help="Players per side. Defaults to the system config."),
    ] = None,
    positions: Annotated[
        bool | None,
        typer.Option("--positions/--no-positions", help="Spread declared positions across sides."),
    ] = None,
    config_dir: Annotated[Path, typer.Option("--config-dir")] = DEFAULT_CONFIG_DIR,
    system: Annotated[
        str | None,
        typer.Option("--system", help="Matchmaking system name. Defaults to the first config."),
    ] = None,
    elo_config_dir: Annotated[
        Path,
        typer.Option("--elo-config-dir", help="Elo configs supplying starting ratings for unrated players."),
    ] = DEFAULT_ELO_CONFIG_DIR,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Print one assignment and balance report per court."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    system_config = select_system(load_matchmaking_system_configs(config_dir), system)
    elo_config = load_elo_system_configs(elo_config_dir)[0]
    players, groups = load_roster(roster_file, elo_params=elo_config.parameters)

    engine = MatchEngine(system_config.parameters)
    try:
        result = engine.generate(
            players,
            courts,
            team_size=team_size,
            position_balancing=positions,
            groups=groups,
        )
    except MatchmakingError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    for assignment, report in zip(result.assignments, result.reports):
        status = "full" if assignment.is_full else "partial"
        typer.echo(
            f"court={assignment.court_number} {status} "
            f"avg_a={report.avg_a:.1f} avg_b={report.avg_b:.1f} "
            f"difference={report.difference:.1f} fairness={report.fairness_percent:.1f}%"
        )
        typer.echo(_format_side("A", assignment.side_a))
        typer.echo(_format_side("B", assignment.side_b))

    for unplaced in result.unplaced_groups:
        fallback = "seated individually" if unplaced.returned_to_pool else "left out"
        typer.echo(
            f"unplaced_group={unplaced.group.group_id} reason={unplaced.reason.value} ({fallback})"
        )
    if result.unassigned_players:
        typer.echo(
            "unassigned="
            + ", ".join(player.name for player in result.unassigned_players)
        )
    typer.echo(
        f"completed system={system_config.name} "
        f"assigned={result.assigned_count}/{result.requested_slots} "
        f"partial={result.is_partial}"
    )


if __name__ == "__main__":
    app()
