"""Load matchmaking system definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_configs, parse_system_header
from domain.matchmaking.balance import FairnessCurve
from domain.matchmaking.engine import MatchmakingParameters


@dataclass(frozen=True)
class MatchmakingSystemConfig(BaseSystemConfig):
    """Configuration for one named matchmaking setup."""

    parameters: MatchmakingParameters

    def as_config_json(self) -> dict[str, Any]:
        return {
            "team_size": self.parameters.team_size,
            "max_team_size": self.parameters.max_team_size,
            "max_group_size": self.parameters.max_group_size,
            "minimum_players": self.parameters.minimum_players,
            "position_balancing": self.parameters.position_balancing,
            "return_unplaced_groups_to_pool": self.parameters.return_unplaced_groups_to_pool,
            "fairness_curve": self.parameters.fairness_curve.value,
            "fairness_scale": self.parameters.fairness_scale,
            "target_fairness": self.parameters.target_fairness,
            "min_fairness_gain": self.parameters.min_fairness_gain,
            "max_swap_iterations": self.parameters.max_swap_iterations,
        }


def load_matchmaking_system_configs(config_dir: Path) -> list[MatchmakingSystemConfig]:
    """Load and validate all matchmaking TOML config files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_matchmaking_system_config,
        duplicate_name_label="matchmaking",
    )


def _parse_matchmaking_system_config(raw: dict[str, Any], file_path: Path) -> MatchmakingSystemConfig:
    name, description = parse_system_header(raw, file_path)
    matchmaking_raw = raw.get("matchmaking", {})

    curve_value = str(matchmaking_raw.get("fairness_curve", FairnessCurve.LINEAR.value)).lower()
    try:
        fairness_curve = FairnessCurve(curve_value)
    except ValueError as exc:
        choices = ", ".join(curve.value for curve in FairnessCurve)
        raise ValueError(
            f"{file_path}: [matchmaking].fairness_curve must be one of {choices}"
        ) from exc

    parameters = MatchmakingParameters(
        team_size=int(matchmaking_raw.get("team_size", 6)),
        max_team_size=int(matchmaking_raw.get("max_team_size", 12)),
        max_group_size=int(matchmaking_raw.get("max_group_size", 4)),
        minimum_players=int(matchmaking_raw.get("minimum_players", 4)),
        position_balancing=bool(matchmaking_raw.get("position_balancing", False)),
        return_unplaced_groups_to_pool=bool(
            matchmaking_raw.get("return_unplaced_groups_to_pool", True)
        ),
        fairness_curve=fairness_curve,
        fairness_scale=float(matchmaking_raw.get("fairness_scale", 10.0)),
        target_fairness=float(matchmaking_raw.get("target_fairness", 98.5)),
        min_fairness_gain=float(matchmaking_raw.get("min_fairness_gain", 0.1)),
        max_swap_iterations=int(matchmaking_raw.get("max_swap_iterations", 20)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    return MatchmakingSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
    )


def _validate_parameters(*, file_path: Path, parameters: MatchmakingParameters) -> None:
    if parameters.max_team_size <= 0:
        raise ValueError(f"{file_path}: [matchmaking].max_team_size must be > 0")
    if parameters.team_size <= 0 or parameters.team_size > parameters.max_team_size:
        raise ValueError(
            f"{file_path}: [matchmaking].team_size must be between 1 and max_team_size"
        )
    if parameters.max_group_size <= 0 or parameters.max_group_size > parameters.max_team_size:
        raise ValueError(
            f"{file_path}: [matchmaking].max_group_size must be between 1 and max_team_size"
        )
    if parameters.minimum_players < 2:
        raise ValueError(f"{file_path}: [matchmaking].minimum_players must be >= 2")
    if parameters.fairness_scale <= 0.0:
        raise ValueError(f"{file_path}: [matchmaking].fairness_scale must be > 0")
    if parameters.target_fairness < 0.0 or parameters.target_fairness > 100.0:
        raise ValueError(f"{file_path}: [matchmaking].target_fairness must be between 0 and 100")
    if parameters.min_fairness_gain <= 0.0:
        raise ValueError(f"{file_path}: [matchmaking].min_fairness_gain must be > 0")
    if parameters.max_swap_iterations < 0:
        raise ValueError(f"{file_path}: [matchmaking].max_swap_iterations must be >= 0")
