"""Load Elo system definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_configs, parse_system_header
from domain.ratings.elo.calculator import EloParameters


@dataclass(frozen=True)
class EloSystemConfig(BaseSystemConfig):
    """Configuration for one Elo rating setup."""

    parameters: EloParameters

    def as_config_json(self) -> dict[str, Any]:
        return {
            "initial_elo": self.parameters.initial_elo,
            "k_factor": self.parameters.k_factor,
            "scale_factor": self.parameters.scale_factor,
            "individual_weight": self.parameters.individual_weight,
        }


def load_elo_system_configs(config_dir: Path) -> list[EloSystemConfig]:
    """Load and validate all Elo system TOML config files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_elo_system_config,
        duplicate_name_label="elo",
    )


def _parse_elo_system_config(raw: dict[str, Any], file_path: Path) -> EloSystemConfig:
    name, description = parse_system_header(raw, file_path)
    elo_raw = raw.get("elo", {})

    parameters = EloParameters(
        initial_elo=float(elo_raw.get("initial_elo", 1500.0)),
        k_factor=float(elo_raw.get("k_factor", 32.0)),
        scale_factor=float(elo_raw.get("scale_factor", 400.0)),
        individual_weight=float(elo_raw.get("individual_weight", 0.0)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    return EloSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
    )


def _validate_parameters(*, file_path: Path, parameters: EloParameters) -> None:
    if parameters.initial_elo <= 0.0:
        raise ValueError(f"{file_path}: [elo].initial_elo must be > 0")
    if parameters.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].k_factor must be > 0")
    if parameters.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].scale_factor must be > 0")
    if parameters.individual_weight < 0.0 or parameters.individual_weight > 1.0:
        raise ValueError(f"{file_path}: [elo].individual_weight must be between 0 and 1")
