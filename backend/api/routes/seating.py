from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_catalog_rooms, resolve_request_rooms
from core.config import settings
from schemas.seating import (
    AllocationConflictOut,
    ArrangementOut,
    GenerateSeatingRequest,
    GenerateSeatingResponse,
    InvigilationOut,
    RoomInvigilatorsOut,
    SeatingRequest,
    UnplacedStudentOut,
    ValidateSeatingResponse,
    ViolationOut,
)
from seating.errors import PolicyViolationError, SeatingInvariantError
from seating.invigilation import InvigilatorAllotment, assign_invigilators
from seating.models import Room
from seating.policy import resolve_seat_quotas
from seating.validator import ValidationReport
from services.allocation_validation import AllocationConflict, blocking_conflicts, validate_allocation
from services.seating_service import run_seating, summarize_result, validation_reports


router = APIRouter()

logger = logging.getLogger(__name__)


def _conflict_out(c: AllocationConflict) -> AllocationConflictOut:
    return AllocationConflictOut(
        severity=c.severity,
        conflict_type=c.conflict_type,
        message=c.message,
        room_id=c.room_id,
        metadata=c.metadata or {},
    )


def _violations_out(report: ValidationReport | None) -> list[ViolationOut]:
    if report is None:
        return []
    return [
        ViolationOut(
            violation_type=v.violation_type.value,
            first=v.first,
            second=v.second,
            first_roll=v.first_roll,
            second_roll=v.second_roll,
            message=v.message,
        )
        for v in report.violations
    ]


def _invigilation_out(allotment: InvigilatorAllotment) -> InvigilationOut:
    return InvigilationOut(
        rooms=[
            RoomInvigilatorsOut(
                room_id=r.room.id,
                room_name=r.room.name,
                required=r.required,
                invigilators=r.invigilators,
                shortfall=r.shortfall,
            )
            for r in allotment.rooms
        ],
        unassigned=allotment.unassigned,
        shortfall=allotment.shortfall,
    )


@router.post("/validate", response_model=ValidateSeatingResponse)
def validate_seating(
    payload: SeatingRequest,
    catalog: list[Room] = Depends(get_catalog_rooms),
) -> ValidateSeatingResponse:
    students = [s.to_student() for s in payload.students]
    rooms = resolve_request_rooms(payload, catalog)
    policy = payload.policy.to_policy()

    conflicts = validate_allocation(students, rooms, policy, default_quota=settings.default_seat_quota)
    failed = bool(blocking_conflicts(conflicts))
    return ValidateSeatingResponse(
        status="FAILED_VALIDATION" if failed else "OK",
        conflicts=[_conflict_out(c) for c in conflicts],
        seat_quotas={} if failed else resolve_seat_quotas(rooms, policy, default_quota=settings.default_seat_quota),
    )


@router.post("/generate", response_model=GenerateSeatingResponse)
def generate_seating(
    payload: GenerateSeatingRequest,
    catalog: list[Room] = Depends(get_catalog_rooms),
) -> GenerateSeatingResponse:
    students = [s.to_student() for s in payload.students]
    rooms = resolve_request_rooms(payload, catalog)
    policy = payload.policy.to_policy()
    seed = payload.seed if payload.seed is not None else secrets.randbits(32)

    try:
        result, warnings = run_seating(
            students,
            rooms,
            policy,
            payload.mode,
            seed=seed,
            default_seat_quota=settings.default_seat_quota,
            attempts=settings.arrangement_attempts,
        )
    except PolicyViolationError as exc:
        logger.info("Seating request rejected: %s", ", ".join(exc.details.get("conflicts", [])))
        return GenerateSeatingResponse(
            status="FAILED_VALIDATION",
            mode=payload.mode,
            seed=seed,
            conflicts=[_conflict_out(c) for c in exc.conflicts],
        )
    except SeatingInvariantError as exc:
        logger.exception("Seating invariant broken (seed=%d)", seed)
        raise HTTPException(
            status_code=500,
            detail={
                "error": "SEATING_INTEGRITY_ERROR",
                "type": str(exc.code),
                "message": str(exc),
                "seed": seed,
                "details": exc.details,
            },
        )

    reports = validation_reports(result)
    arrangements = [
        ArrangementOut(
            room_id=a.room.id,
            room_name=a.room.name,
            rows=a.room.rows,
            columns=a.room.columns,
            seat_quota=a.seat_quota,
            seated=a.seated_count,
            seats=a.grid.roll_rows(),
            group_counts=a.group_counts,
            violations=_violations_out(report),
        )
        for a, report in zip(result.arrangements, reports)
    ]

    invigilation = None
    if payload.invigilators:
        occupied = [a.room for a in result.arrangements if a.seated_count > 0]
        invigilation = _invigilation_out(
            assign_invigilators(occupied, payload.invigilators, payload.invigilators_per_room, seed)
        )

    return GenerateSeatingResponse(
        status="PARTIAL" if result.unplaced else "COMPLETE",
        mode=result.mode,
        seed=result.seed,
        conflicts=[_conflict_out(c) for c in warnings],
        arrangements=arrangements,
        unplaced=[UnplacedStudentOut(roll=s.roll, group=s.group) for s in result.unplaced],
        summary=summarize_result(result, students, reports),
        invigilation=invigilation,
    )
