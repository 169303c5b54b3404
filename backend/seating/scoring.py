from __future__ import annotations

from seating.grid import ADJACENCY, Direction, SeatGrid
from seating.models import Student


# Subject collisions outrank group collisions: identical papers are the main cheating vector.
SUBJECT_HORIZONTAL_PENALTY = 8000
SUBJECT_VERTICAL_CONSECUTIVE_PENALTY = 4000
SUBJECT_VERTICAL_PENALTY = 2000
SUBJECT_DIAGONAL_PENALTY = 100
GROUP_HORIZONTAL_PENALTY = 100

# Same-group vertical/diagonal neighbours earn -10 per roll of gap beyond 1, capped at -50.
SEPARATION_BONUS_STEP = 10
SEPARATION_BONUS_MAX_STEPS = 5


def same_subject(a: Student, b: Student) -> bool:
    return a.subject is not None and b.subject is not None and a.subject == b.subject


def pair_penalty(student: Student, neighbour: Student, direction: Direction) -> int:
    """Penalty contributed by one occupied neighbour slot. Symmetric in its two students."""
    score = 0
    gap = abs(student.ordinal - neighbour.ordinal)

    if student.group == neighbour.group:
        if direction is Direction.HORIZONTAL:
            score += GROUP_HORIZONTAL_PENALTY
        elif gap > 1:
            score -= SEPARATION_BONUS_STEP * min(gap - 1, SEPARATION_BONUS_MAX_STEPS)

    if same_subject(student, neighbour):
        if direction is Direction.HORIZONTAL:
            score += SUBJECT_HORIZONTAL_PENALTY
        elif direction is Direction.VERTICAL:
            score += SUBJECT_VERTICAL_CONSECUTIVE_PENALTY if gap <= 1 else SUBJECT_VERTICAL_PENALTY
        else:
            score += SUBJECT_DIAGONAL_PENALTY

    return score


def conflict_score(grid: SeatGrid, row: int, col: int, student: Student) -> int:
    """Would-be score of `student` at (row, col); the cell itself may be empty or occupied."""
    score = 0
    for dr, dc, direction in ADJACENCY:
        r, c = row + dr, col + dc
        if 0 <= r < grid.rows and 0 <= c < grid.columns:
            neighbour = grid.get(r, c)
            if neighbour is not None:
                score += pair_penalty(student, neighbour, direction)
    return score


def cell_score(grid: SeatGrid, row: int, col: int) -> int:
    student = grid.get(row, col)
    if student is None:
        return 0
    return conflict_score(grid, row, col, student)


def grid_score(grid: SeatGrid) -> int:
    """Total conflict score; every adjacent pair is counted from both sides."""
    return sum(cell_score(grid, r, c) for r, c in grid.occupied_positions())
