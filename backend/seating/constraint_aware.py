from __future__ import annotations

import logging

from seating.errors import SeatingInvariantError
from seating.grid import Direction, Position, SeatGrid
from seating.models import Student
from seating.ordering import (
    ATTEMPT_SEED_STEP,
    bucket_by,
    derive_seed,
    group_then_roll_key,
    seeded_positions,
)
from seating.scoring import cell_score, conflict_score, grid_score, pair_penalty


logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 3
MAX_HILL_CLIMB_ITERATIONS = 100


def seed_round_robin(subject_groups: list[list[Student]], rows: int, columns: int, *, seed: int) -> SeatGrid:
    """Phase A: visit seeded-random positions, cycling subjects round-robin.

    Placement is unconditional so every student finds a seat; the per-cell score is
    only accumulated for the debug log.
    """
    grid = SeatGrid(rows, columns)
    cursors = [0] * len(subject_groups)
    remaining = sum(len(g) for g in subject_groups)
    current = 0
    seeding_score = 0

    for row, col in seeded_positions(rows, columns, seed):
        if remaining == 0:
            break
        for _ in range(len(subject_groups)):
            index = current
            current = (current + 1) % len(subject_groups)
            if cursors[index] < len(subject_groups[index]):
                student = subject_groups[index][cursors[index]]
                seeding_score += conflict_score(grid, row, col, student)
                grid.place(row, col, student)
                cursors[index] += 1
                remaining -= 1
                break

    logger.debug("Round-robin seeding placed %d students (seeding score %d)", grid.seated_count, seeding_score)
    return grid


def seed_by_group(students: list[Student], rows: int, columns: int) -> SeatGrid:
    """Phase A': single-subject fallback, round-robin over groups in row-major order.

    At each seat the next student of every group is scored and the lowest wins; ties go
    to the group whose turn it is.
    """
    grid = SeatGrid(rows, columns)
    by_group = bucket_by(sorted(students, key=group_then_roll_key), lambda s: s.group)
    queues = list(by_group.values())
    cursors = [0] * len(queues)
    remaining = len(students)
    current = 0

    for row, col in grid.positions():
        if remaining == 0:
            break
        best_index: int | None = None
        best_score = 0
        for step in range(len(queues)):
            index = (current + step) % len(queues)
            if cursors[index] >= len(queues[index]):
                continue
            score = conflict_score(grid, row, col, queues[index][cursors[index]])
            if best_index is None or score < best_score:
                best_index, best_score = index, score
        if best_index is None:
            break
        grid.place(row, col, queues[best_index][cursors[best_index]])
        cursors[best_index] += 1
        remaining -= 1
        current = (best_index + 1) % len(queues)
    return grid


def _swap_gain(grid: SeatGrid, a: Position, b: Position, before: int) -> int:
    """Drop in the two cells' scores if the students at `a` and `b` traded seats. Read-only."""
    sa, sb = grid.get(*a), grid.get(*b)
    after = conflict_score(grid, *a, sb) + conflict_score(grid, *b, sa)

    dr, dc = b[0] - a[0], b[1] - a[1]
    if max(abs(dr), abs(dc)) == 1:
        # Adjacent: each side above was scored against its own old seat-mate, not the other student.
        if dr == 0:
            direction = Direction.HORIZONTAL
        elif dc == 0:
            direction = Direction.VERTICAL
        else:
            direction = Direction.DIAGONAL
        after += 2 * pair_penalty(sa, sb, direction) - pair_penalty(sa, sa, direction) - pair_penalty(sb, sb, direction)

    return before - after


def hill_climb(grid: SeatGrid, *, max_iterations: int = MAX_HILL_CLIMB_ITERATIONS) -> SeatGrid:
    """Phase B: greedy best-swap local search; returns an improved copy.

    Each pass applies the single swap with the largest strictly positive gain and stops at
    the first pass without one. The scorer is symmetric, so a positive local gain always
    lowers the total score.
    """
    current = grid.copy()
    improvements = 0

    for _ in range(max_iterations):
        occupied = current.occupied_positions()
        local = {pos: cell_score(current, *pos) for pos in occupied}
        best_gain = 0
        best_swap: tuple[Position, Position] | None = None

        for i, a in enumerate(occupied):
            for b in occupied[i + 1 :]:
                gain = _swap_gain(current, a, b, local[a] + local[b])
                if gain > best_gain:
                    best_gain = gain
                    best_swap = (a, b)

        if best_swap is None:
            break
        current.swap(*best_swap)
        improvements += 1

    logger.debug("Hill-climbing applied %d swaps", improvements)
    return current


def _attempt(subject_groups: list[list[Student]], rows: int, columns: int, *, seed: int, max_iterations: int) -> SeatGrid:
    initial = seed_round_robin(subject_groups, rows, columns, seed=seed)
    return hill_climb(initial, max_iterations=max_iterations)


def arrange_constraint_aware(
    students: list[Student],
    rows: int,
    columns: int,
    *,
    seed: int,
    attempts: int = DEFAULT_ATTEMPTS,
    max_iterations: int = MAX_HILL_CLIMB_ITERATIONS,
) -> SeatGrid:
    """Anti-cheating arrangement: best of `attempts` seeded (Phase A + Phase B) runs."""
    if len(students) > rows * columns:
        raise SeatingInvariantError(
            f"{len(students)} students handed to a {rows}x{columns} room",
            code="ROOM_OVERFILLED",
            details={"students": len(students), "capacity": rows * columns},
        )
    if not students:
        return SeatGrid(rows, columns)

    by_subject = bucket_by(students, lambda s: s.subject)
    if len(by_subject) == 1:
        return seed_by_group(students, rows, columns)

    subject_groups = [sorted(members, key=group_then_roll_key) for members in by_subject.values()]

    best_grid: SeatGrid | None = None
    best_score = 0
    for attempt in range(max(1, attempts)):
        grid = _attempt(
            subject_groups,
            rows,
            columns,
            seed=derive_seed(seed, attempt * ATTEMPT_SEED_STEP),
            max_iterations=max_iterations,
        )
        score = grid_score(grid)
        if best_grid is None or score < best_score:
            best_grid, best_score = grid, score

    assert best_grid is not None
    logger.debug("Constraint-aware arrangement %dx%d: best score %d", rows, columns, best_score)
    return best_grid
