from __future__ import annotations

import math
from typing import Callable, Iterable, TypeVar

from seating.models import Student


T = TypeVar("T")
K = TypeVar("K")

_SEED_MASK = (1 << 64) - 1

ROOM_SEED_STEP = 1000
ATTEMPT_SEED_STEP = 100
CLEANUP_SEED_OFFSET = 999999


def derive_seed(base: int, offset: int = 0) -> int:
    """Base seed plus an offset, wrapped to 64 bits."""
    return (int(base) + int(offset)) & _SEED_MASK


def sine_random(seed: float) -> float:
    """Deterministic value in [0, 1) from frac(sin(seed) * 10000)."""
    x = math.sin(seed) * 10000
    return x - math.floor(x)


def seeded_positions(rows: int, columns: int, seed: int) -> list[tuple[int, int]]:
    """All grid positions, row-major, then Fisher-Yates shuffled by `sine_random`."""
    positions = [(r, c) for r in range(rows) for c in range(columns)]
    for i in range(len(positions) - 1, 0, -1):
        j = min(int(sine_random(seed + i) * (i + 1)), i)
        positions[i], positions[j] = positions[j], positions[i]
    return positions


def student_sort_key(student: Student) -> tuple[int, str]:
    return (student.ordinal, student.roll)


def group_then_roll_key(student: Student) -> tuple[str, int, str]:
    return (student.group, student.ordinal, student.roll)


def bucket_by(items: Iterable[T], key: Callable[[T], K]) -> dict[K, list[T]]:
    """Partition preserving first-appearance order of keys and input order within buckets."""
    buckets: dict[K, list[T]] = {}
    for item in items:
        buckets.setdefault(key(item), []).append(item)
    return buckets
