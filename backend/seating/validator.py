from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from seating.grid import Direction, Position, SeatGrid
from seating.scoring import same_subject


class ViolationType(str, Enum):
    HORIZONTAL_SAME_GROUP = "HORIZONTAL_SAME_GROUP"
    HORIZONTAL_SAME_SUBJECT = "HORIZONTAL_SAME_SUBJECT"
    CONSECUTIVE_ROLL = "CONSECUTIVE_ROLL"


@dataclass(frozen=True)
class Violation:
    violation_type: ViolationType
    first: Position
    second: Position
    first_roll: str
    second_roll: str
    message: str


@dataclass(frozen=True)
class ValidationReport:
    violations: list[Violation] = field(default_factory=list)

    @property
    def violation_count(self) -> int:
        return len(self.violations)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def details(self) -> list[str]:
        return [v.message for v in self.violations]

    def count(self, violation_type: ViolationType) -> int:
        return sum(1 for v in self.violations if v.violation_type is violation_type)


# Forward half of the neighbourhood, so each unordered pair is visited once.
_FORWARD = (
    (0, 1, Direction.HORIZONTAL),
    (1, 0, Direction.VERTICAL),
    (1, -1, Direction.DIAGONAL),
    (1, 1, Direction.DIAGONAL),
)


def validate_arrangement(grid: SeatGrid) -> ValidationReport:
    """Diagnostic check of a finished grid. Never used to reject a result."""
    violations: list[Violation] = []

    for row, col in grid.occupied_positions():
        student = grid.get(row, col)
        for dr, dc, direction in _FORWARD:
            r, c = row + dr, col + dc
            if not grid.in_bounds(r, c):
                continue
            other = grid.get(r, c)
            if other is None:
                continue

            def _add(vtype: ViolationType, text: str) -> None:
                violations.append(
                    Violation(
                        violation_type=vtype,
                        first=(row, col),
                        second=(r, c),
                        first_roll=student.roll,
                        second_roll=other.roll,
                        message=f"{text}: {student.roll} ({student.group}) at ({row},{col}) and {other.roll} ({other.group}) at ({r},{c})",
                    )
                )

            if direction is Direction.HORIZONTAL:
                if student.group == other.group:
                    _add(ViolationType.HORIZONTAL_SAME_GROUP, "Same group side by side")
                if same_subject(student, other):
                    _add(ViolationType.HORIZONTAL_SAME_SUBJECT, f"Same subject {student.subject} side by side")
            elif student.group == other.group and abs(student.ordinal - other.ordinal) <= 1:
                _add(ViolationType.CONSECUTIVE_ROLL, f"Consecutive rolls {direction.value.lower()}ly adjacent")

    return ValidationReport(violations=violations)


def summarize_report(report: ValidationReport) -> str:
    n = report.violation_count
    if n <= 0:
        return "No seating violations detected."
    if n == 1:
        return "1 seating violation detected."
    return f"{n} seating violations detected."
