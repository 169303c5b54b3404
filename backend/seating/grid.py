from __future__ import annotations

from enum import Enum
from typing import Iterator

from seating.errors import SeatingInvariantError
from seating.models import Student


Position = tuple[int, int]


class Direction(str, Enum):
    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"
    DIAGONAL = "DIAGONAL"


# (row offset, column offset, direction) for the 8 neighbour slots.
ADJACENCY: tuple[tuple[int, int, Direction], ...] = (
    (0, -1, Direction.HORIZONTAL),
    (0, 1, Direction.HORIZONTAL),
    (-1, 0, Direction.VERTICAL),
    (1, 0, Direction.VERTICAL),
    (-1, -1, Direction.DIAGONAL),
    (-1, 1, Direction.DIAGONAL),
    (1, -1, Direction.DIAGONAL),
    (1, 1, Direction.DIAGONAL),
)


class SeatGrid:
    """Fixed rows x columns grid of optional students.

    Keeps a roll -> position index so a roll can never occupy two cells.
    """

    __slots__ = ("rows", "columns", "_cells", "_positions")

    def __init__(self, rows: int, columns: int):
        if rows < 0 or columns < 0:
            raise ValueError("grid dimensions must be non-negative")
        self.rows = int(rows)
        self.columns = int(columns)
        self._cells: list[list[Student | None]] = [[None] * self.columns for _ in range(self.rows)]
        self._positions: dict[str, Position] = {}

    @classmethod
    def from_rows(cls, cells: list[list[Student | None]]) -> "SeatGrid":
        rows = len(cells)
        columns = len(cells[0]) if rows else 0
        grid = cls(rows, columns)
        for r, line in enumerate(cells):
            if len(line) != columns:
                raise ValueError("ragged grid rows")
            for c, student in enumerate(line):
                if student is not None:
                    grid.place(r, c, student)
        return grid

    @property
    def capacity(self) -> int:
        return self.rows * self.columns

    @property
    def seated_count(self) -> int:
        return len(self._positions)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.columns

    def get(self, row: int, col: int) -> Student | None:
        return self._cells[row][col]

    def place(self, row: int, col: int, student: Student) -> None:
        existing = self._positions.get(student.roll)
        if existing is not None and existing != (row, col):
            raise SeatingInvariantError(
                f"Roll {student.roll} is already seated at {existing}",
                code="DOUBLE_BOOKED_ROLL",
                details={"roll": student.roll, "existing": existing, "target": (row, col)},
            )
        previous = self._cells[row][col]
        if previous is not None:
            self._positions.pop(previous.roll, None)
        self._cells[row][col] = student
        self._positions[student.roll] = (row, col)

    def clear(self, row: int, col: int) -> Student | None:
        previous = self._cells[row][col]
        if previous is not None:
            self._positions.pop(previous.roll, None)
            self._cells[row][col] = None
        return previous

    def swap(self, a: Position, b: Position) -> None:
        (ar, ac), (br, bc) = a, b
        first, second = self._cells[ar][ac], self._cells[br][bc]
        self._cells[ar][ac], self._cells[br][bc] = second, first
        if first is not None:
            self._positions[first.roll] = b
        if second is not None:
            self._positions[second.roll] = a

    def position_of(self, roll: str) -> Position | None:
        return self._positions.get(roll)

    def neighbors(self, row: int, col: int) -> list[Position]:
        return [
            (row + dr, col + dc)
            for dr, dc, _direction in ADJACENCY
            if 0 <= row + dr < self.rows and 0 <= col + dc < self.columns
        ]

    def positions(self) -> Iterator[Position]:
        for r in range(self.rows):
            for c in range(self.columns):
                yield (r, c)

    def occupied_positions(self) -> list[Position]:
        return [(r, c) for r, c in self.positions() if self._cells[r][c] is not None]

    def students(self) -> list[Student]:
        """Seated students in row-major order."""
        return [s for line in self._cells for s in line if s is not None]

    def column_has_space(self, col: int) -> bool:
        return any(self._cells[r][col] is None for r in range(self.rows))

    def copy(self) -> "SeatGrid":
        clone = SeatGrid(self.rows, self.columns)
        clone._cells = [list(line) for line in self._cells]
        clone._positions = dict(self._positions)
        return clone

    def to_rows(self) -> list[list[Student | None]]:
        return [list(line) for line in self._cells]

    def roll_rows(self) -> list[list[str | None]]:
        return [[s.roll if s is not None else None for s in line] for line in self._cells]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SeatGrid):
            return NotImplemented
        return self.rows == other.rows and self.columns == other.columns and self._cells == other._cells

    def __repr__(self) -> str:
        return f"SeatGrid({self.rows}x{self.columns}, seated={self.seated_count})"
