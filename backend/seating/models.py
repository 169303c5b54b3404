from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from seating.grid import SeatGrid


DEFAULT_SEAT_QUOTA = 24
UNRANKED_PRIORITY = 999

_NON_DIGITS = re.compile(r"\D")


class RoomKind(str, Enum):
    CLASSROOM = "CLASSROOM"
    SEMINAR_HALL = "SEMINAR_HALL"


class ArrangementMode(str, Enum):
    SIMPLE = "SIMPLE"
    COMPLEX = "COMPLEX"


class PolicyMode(str, Enum):
    EVEN = "EVEN"
    MANUAL = "MANUAL"


class EvenType(str, Enum):
    DEFAULT = "DEFAULT"
    MAX = "MAX"
    CUSTOM = "CUSTOM"


def roll_ordinal(roll: str) -> int:
    """Integer formed by every digit embedded in a roll ("22CS015" -> 22015)."""
    digits = _NON_DIGITS.sub("", roll or "")
    return int(digits) if digits else 0


@dataclass(frozen=True)
class Student:
    roll: str
    group: str
    subject: str | None = None
    sequence: int | None = None

    @cached_property
    def ordinal(self) -> int:
        if self.sequence is not None:
            return int(self.sequence)
        return roll_ordinal(self.roll)


@dataclass(frozen=True)
class Room:
    id: str
    name: str
    rows: int
    columns: int
    kind: RoomKind = RoomKind.CLASSROOM
    selected: bool = True
    seat_quota: int | None = None
    priority: int | None = None
    block: str | None = None

    @property
    def capacity(self) -> int:
        return self.rows * self.columns

    @property
    def rank(self) -> int:
        return self.priority if self.priority is not None else UNRANKED_PRIORITY


@dataclass(frozen=True)
class AllocationPolicy:
    mode: PolicyMode = PolicyMode.EVEN
    even_type: EvenType = EvenType.DEFAULT
    custom_count: int | None = None


@dataclass
class Arrangement:
    room: Room
    grid: "SeatGrid"
    seat_quota: int

    @property
    def group_counts(self) -> dict[str, int]:
        return dict(Counter(s.group for s in self.grid.students()))

    @property
    def seated_count(self) -> int:
        return self.grid.seated_count

    def students(self) -> list[Student]:
        return self.grid.students()


@dataclass
class GenerationResult:
    arrangements: list[Arrangement]
    unplaced: list[Student] = field(default_factory=list)
    seed: int = 0
    mode: ArrangementMode = ArrangementMode.COMPLEX

    @property
    def unplaced_count(self) -> int:
        return len(self.unplaced)

    @property
    def seated_count(self) -> int:
        return sum(a.seated_count for a in self.arrangements)

    def __iter__(self):
        return iter(self.arrangements)

    def __len__(self) -> int:
        return len(self.arrangements)


# (percent, label, students_seated, rooms_done)
ProgressCallback = Callable[[float, str, int, int], None]
