"""Working lineup owned by a single engine invocation."""

from __future__ import annotations

from collections.abc import Iterable

from domain.matchmaking.common import CourtAssignment, PlayerRecord, Side


class Lineup:
    """Flattened sides of every court: court 1 side A, court 1 side B, court 2 side A, ...

    A lineup is private scratch space. Callers hand in records and get fresh
    ``CourtAssignment`` tuples back from :meth:`to_assignments`.
    """

    def __init__(self, court_count: int, team_size: int) -> None:
        if court_count <= 0:
            raise ValueError("court_count must be greater than 0")
        if team_size <= 0:
            raise ValueError("team_size must be greater than 0")
        self.court_count = court_count
        self.team_size = team_size
        self._sides: list[list[PlayerRecord]] = [[] for _ in range(court_count * 2)]

    @property
    def side_count(self) -> int:
        return len(self._sides)

    @staticmethod
    def locate(index: int) -> tuple[int, Side]:
        """Return (court_number, side) for a flattened side index."""
        return index // 2 + 1, Side.A if index % 2 == 0 else Side.B

    def players(self, index: int) -> tuple[PlayerRecord, ...]:
        return tuple(self._sides[index])

    def open_slots(self, index: int) -> int:
        return self.team_size - len(self._sides[index])

    def total_open_slots(self) -> int:
        return sum(self.open_slots(index) for index in range(self.side_count))

    def seat(self, index: int, players: Iterable[PlayerRecord]) -> None:
        incoming = list(players)
        if len(incoming) > self.open_slots(index):
            court_number, side = self.locate(index)
            raise ValueError(
                f"court={court_number} side={side.value} has {self.open_slots(index)} open slots, "
                f"cannot seat {len(incoming)} players"
            )
        self._sides[index].extend(incoming)

    def to_assignments(self) -> tuple[CourtAssignment, ...]:
        return tuple(
            CourtAssignment(
                court_number=court_index + 1,
                side_a=tuple(self._sides[court_index * 2]),
                side_b=tuple(self._sides[court_index * 2 + 1]),
                team_size=self.team_size,
            )
            for court_index in range(self.court_count)
        )


__all__ = ["Lineup"]
