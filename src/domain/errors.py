"""Exceptions raised by the matchmaking engine."""

from __future__ import annotations


class MatchmakingError(Exception):
    """Base class for every matchmaking error the engine raises."""


class InvalidConfigurationError(MatchmakingError, ValueError):
    """Raised before any assignment work when the request cannot be honored.

    Covers non-positive court counts, team sizes out of range, oversized
    groups, groups naming players outside the roster and duplicate roster ids.
    """


class InsufficientPlayersError(MatchmakingError):
    """Raised when the roster cannot fill even one two-sided court."""

    def __init__(self, *, available: int, required: int) -> None:
        self.available = available
        self.required = required
        super().__init__(
            f"Need at least {required} players to generate teams, got {available}"
        )


__all__ = [
    "InsufficientPlayersError",
    "InvalidConfigurationError",
    "MatchmakingError",
]
