"""Serpentine (snake draft) walk over a fixed sequence of sides."""

from __future__ import annotations

from collections.abc import Callable


class SerpentineCursor:
    """Explicit state machine for a boustrophedon walk over ``size`` slots.

    The cursor moves one slot per step in the current direction. Stepping past
    either end flips the direction and stays on the end slot, so the walk over
    four slots reads 0, 1, 2, 3, 3, 2, 1, 0, 0, 1, ...
    """

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("size must be greater than 0")
        self.size = size
        self.index = 0
        self.direction = 1

    def advance(self) -> int:
        """Take one step along the walk and return the new index."""
        next_index = self.index + self.direction
        if next_index < 0 or next_index >= self.size:
            self.direction = -self.direction
            next_index = self.index
        self.index = next_index
        return self.index

    def walk(self, steps: int) -> list[int]:
        """Return the indices visited over ``steps`` placements, advancing the cursor.

        Inspection helper for logs and tests; placement goes through :meth:`seek`.
        """
        visited: list[int] = []
        for _ in range(steps):
            visited.append(self.index)
            self.advance()
        return visited

    def seek(self, is_open: Callable[[int], bool]) -> int | None:
        """Move forward to the first open slot along the walk.

        Every slot is examined at most once per direction, so the search ends
        within ``2 * size`` steps. When no slot is open the cursor is left where
        it started and ``None`` is returned.
        """
        start_index, start_direction = self.index, self.direction
        seen: set[int] = set()
        while len(seen) < self.size:
            if is_open(self.index):
                return self.index
            seen.add(self.index)
            self.advance()

        self.index, self.direction = start_index, start_direction
        return None


__all__ = ["SerpentineCursor"]
