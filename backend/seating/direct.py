from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from seating.grid import SeatGrid
from seating.models import Student
from seating.ordering import ATTEMPT_SEED_STEP, bucket_by, derive_seed, student_sort_key
from seating.scoring import grid_score


logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 3


@dataclass
class DirectResult:
    grid: SeatGrid
    unplaced: list[Student] = field(default_factory=list)
    score: int = 0


def _find_column(grid: SeatGrid, owners: list[str | None], group: str, *, separate: bool) -> int | None:
    for col in range(grid.columns):
        owner = owners[col]
        if owner is None:
            if not separate:
                return col
            left = owners[col - 1] if col > 0 else None
            right = owners[col + 1] if col < grid.columns - 1 else None
            if left != group and right != group:
                return col
        elif owner == group and grid.column_has_space(col):
            return col
    return None


def fill_columns(
    groups: list[tuple[str, list[Student]]],
    rows: int,
    columns: int,
    *,
    limit: int,
) -> SeatGrid:
    """Column-wise fill, one group per column, top to bottom.

    A group never takes a fresh column next to one it already owns, unless it is the only
    group present. Students of a group left without an eligible column stay unplaced.
    """
    grid = SeatGrid(rows, columns)
    owners: list[str | None] = [None] * columns
    separate = len(groups) > 1
    placed = 0

    for group, members in groups:
        index = 0
        while index < len(members) and placed < limit:
            col = _find_column(grid, owners, group, separate=separate)
            if col is None:
                logger.debug("No eligible column left for group %s (%d unplaced)", group, len(members) - index)
                break
            owners[col] = group
            for row in range(rows):
                if index >= len(members) or placed >= limit:
                    break
                if grid.get(row, col) is None:
                    grid.place(row, col, members[index])
                    index += 1
                    placed += 1
        if placed >= limit:
            break
    return grid


def arrange_direct(
    students: list[Student],
    rows: int,
    columns: int,
    *,
    seed: int,
    limit: int | None = None,
    attempts: int = DEFAULT_ATTEMPTS,
) -> DirectResult:
    """Fast column-fill arrangement over `students`, seating at most `limit` of them.

    Attempt 0 keeps the groups in first-appearance order; later attempts shuffle the group
    order with a seeded RNG. The attempt seating the most students wins, then the lowest
    total conflict score.
    """
    capacity = rows * columns
    limit = capacity if limit is None else max(0, min(int(limit), capacity))
    if not students or limit == 0:
        return DirectResult(grid=SeatGrid(rows, columns), unplaced=list(students))

    by_group = bucket_by(students, lambda s: s.group)
    ordered = [(g, sorted(members, key=student_sort_key)) for g, members in by_group.items()]

    best: DirectResult | None = None
    for attempt in range(max(1, attempts)):
        groups = list(ordered)
        if attempt > 0:
            random.Random(derive_seed(seed, attempt * ATTEMPT_SEED_STEP)).shuffle(groups)
        grid = fill_columns(groups, rows, columns, limit=limit)
        score = grid_score(grid)
        if best is None or (grid.seated_count, -score) > (best.grid.seated_count, -best.score):
            best = DirectResult(grid=grid, score=score)

    assert best is not None
    best.unplaced = [s for s in students if best.grid.position_of(s.roll) is None]
    logger.debug(
        "Direct arrangement %dx%d: seated %d, unplaced %d, score %d",
        rows,
        columns,
        best.grid.seated_count,
        len(best.unplaced),
        best.score,
    )
    return best
