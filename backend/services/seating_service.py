from __future__ import annotations

import logging
from collections import Counter
from typing import Any

from seating.models import AllocationPolicy, ArrangementMode, GenerationResult, ProgressCallback, Room, Student
from seating.orchestrator import SeatingOrchestrator
from seating.scoring import grid_score
from seating.validator import ValidationReport, validate_arrangement
from services.allocation_validation import AllocationConflict, ensure_allocation_valid


logger = logging.getLogger(__name__)


def run_seating(
    students: list[Student],
    rooms: list[Room],
    policy: AllocationPolicy,
    mode: ArrangementMode,
    *,
    seed: int,
    default_seat_quota: int,
    attempts: int,
    progress: ProgressCallback | None = None,
) -> tuple[GenerationResult, list[AllocationConflict]]:
    """Validate the request, then generate.

    Raises PolicyViolationError when the request has blocking conflicts. Returns the result
    together with any warnings raised during validation.
    """
    warnings = ensure_allocation_valid(students, rooms, policy, default_quota=default_seat_quota)
    for w in warnings:
        logger.warning("%s: %s", w.conflict_type, w.message)

    orchestrator = SeatingOrchestrator(rooms, default_seat_quota=default_seat_quota, attempts=attempts)
    logger.info(
        "Generating %s arrangement: %d students, %d rooms, seed=%d",
        mode.value,
        len(students),
        len(rooms),
        seed,
    )
    result = orchestrator.generate(students, policy, mode, seed, progress=progress)
    return result, warnings


def validation_reports(result: GenerationResult) -> list[ValidationReport]:
    """One report per arrangement, in arrangement order."""
    return [validate_arrangement(a.grid) for a in result.arrangements]


def summarize_result(
    result: GenerationResult,
    students: list[Student],
    reports: list[ValidationReport] | None = None,
) -> dict[str, Any]:
    if reports is None:
        reports = validation_reports(result)

    rooms: list[dict[str, Any]] = []
    total_score = 0
    for a, report in zip(result.arrangements, reports):
        score = grid_score(a.grid)
        total_score += score
        rooms.append(
            {
                "room_id": a.room.id,
                "room_name": a.room.name,
                "capacity": a.room.capacity,
                "seat_quota": a.seat_quota,
                "seated": a.seated_count,
                "utilisation": round(a.seated_count / a.room.capacity, 4) if a.room.capacity else 0.0,
                "group_counts": a.group_counts,
                "conflict_score": score,
                "violations": report.violation_count,
            }
        )

    seated_by_group: Counter[str] = Counter()
    for a in result.arrangements:
        seated_by_group.update(a.group_counts)
    total_by_group = Counter(s.group for s in students)

    return {
        "total_students": len(students),
        "seated": result.seated_count,
        "unplaced": result.unplaced_count,
        "rooms_used": sum(1 for a in result.arrangements if a.seated_count > 0),
        "rooms": rooms,
        "groups": {
            g: {"total": n, "seated": seated_by_group.get(g, 0)} for g, n in sorted(total_by_group.items())
        },
        "conflict_score": total_score,
        "violations": sum(r.violation_count for r in reports),
    }
