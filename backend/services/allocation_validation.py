from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any

from seating.errors import PolicyViolationError
from seating.models import DEFAULT_SEAT_QUOTA, AllocationPolicy, EvenType, PolicyMode, Room, RoomKind, Student
from seating.policy import resolve_seat_quota


@dataclass(frozen=True)
class AllocationConflict:
    conflict_type: str
    message: str
    severity: str = "ERROR"
    room_id: Any | None = None
    metadata: dict[str, Any] | None = None


def validate_allocation(
    students: list[Student],
    rooms: list[Room],
    policy: AllocationPolicy,
    *,
    default_quota: int = DEFAULT_SEAT_QUOTA,
) -> list[AllocationConflict]:
    """Check a request before any seating run.

    ERROR conflicts block the run; WARN conflicts are reported alongside the result.
    """
    conflicts: list[AllocationConflict] = []

    if not rooms:
        conflicts.append(
            AllocationConflict(
                conflict_type="NO_ROOMS_SELECTED",
                message="Please select at least one room.",
            )
        )

    if not students:
        conflicts.append(
            AllocationConflict(
                conflict_type="NO_STUDENTS",
                message="No students to arrange. Add at least one group of students.",
            )
        )

    duplicates = sorted(roll for roll, n in Counter(s.roll for s in students).items() if n > 1)
    if duplicates:
        conflicts.append(
            AllocationConflict(
                conflict_type="DUPLICATE_ROLL",
                message="Roll numbers must be unique across all groups.",
                metadata={"rolls": duplicates[:20], "count": len(duplicates)},
            )
        )

    duplicate_rooms = sorted(rid for rid, n in Counter(r.id for r in rooms).items() if n > 1)
    if duplicate_rooms:
        conflicts.append(
            AllocationConflict(
                conflict_type="DUPLICATE_ROOM_ID",
                message="Room ids must be unique within a run.",
                metadata={"room_ids": duplicate_rooms},
            )
        )

    for room in rooms:
        capacity = room.capacity
        meta = {"room_name": room.name, "capacity": capacity}

        if not room.selected:
            conflicts.append(
                AllocationConflict(
                    conflict_type="ROOM_NOT_SELECTED",
                    message=f"Room {room.name} is not selected for this run.",
                    room_id=room.id,
                    metadata=meta,
                )
            )

        if room.kind is RoomKind.SEMINAR_HALL:
            if not room.seat_quota:
                conflicts.append(
                    AllocationConflict(
                        conflict_type="SEMINAR_HALL_QUOTA_MISSING",
                        message=f"Please specify the number of students for {room.name}.",
                        room_id=room.id,
                        metadata=meta,
                    )
                )
            elif room.seat_quota > capacity:
                conflicts.append(
                    AllocationConflict(
                        conflict_type="SEMINAR_HALL_QUOTA_EXCEEDS_CAPACITY",
                        message=f"{room.name} cannot exceed its capacity of {capacity} students.",
                        room_id=room.id,
                        metadata={**meta, "seat_quota": room.seat_quota},
                    )
                )
            continue

        if policy.mode is PolicyMode.MANUAL:
            if room.seat_quota is None:
                conflicts.append(
                    AllocationConflict(
                        conflict_type="MANUAL_QUOTA_MISSING",
                        message=f"Please specify the number of students for {room.name}.",
                        room_id=room.id,
                        metadata=meta,
                    )
                )
            elif room.seat_quota > capacity:
                conflicts.append(
                    AllocationConflict(
                        conflict_type="MANUAL_QUOTA_EXCEEDS_CAPACITY",
                        message=f"Allotment for {room.name} cannot exceed its capacity of {capacity}.",
                        room_id=room.id,
                        metadata={**meta, "seat_quota": room.seat_quota},
                    )
                )
        elif policy.even_type is EvenType.CUSTOM and policy.custom_count is not None:
            if policy.custom_count > capacity:
                conflicts.append(
                    AllocationConflict(
                        conflict_type="CUSTOM_COUNT_EXCEEDS_CAPACITY",
                        message=f"Custom count ({policy.custom_count}) exceeds the capacity of {room.name} ({capacity}).",
                        room_id=room.id,
                        metadata={**meta, "custom_count": policy.custom_count},
                    )
                )

    if policy.mode is PolicyMode.EVEN and policy.even_type is EvenType.CUSTOM and not policy.custom_count:
        conflicts.append(
            AllocationConflict(
                conflict_type="CUSTOM_COUNT_MISSING",
                message="Please specify how many students to seat in each room.",
            )
        )

    if rooms and students:
        total_quota = sum(resolve_seat_quota(r, policy, default_quota=default_quota) for r in rooms)
        if len(students) > total_quota:
            conflicts.append(
                AllocationConflict(
                    conflict_type="CAPACITY_SHORTFALL",
                    severity="WARN",
                    message=(
                        f"Total students ({len(students)}) exceed the allotted seats ({total_quota}); "
                        "remaining students will be spread over spare seats where possible."
                    ),
                    metadata={"students": len(students), "allotted_seats": total_quota},
                )
            )

    return conflicts


def blocking_conflicts(conflicts: list[AllocationConflict]) -> list[AllocationConflict]:
    return [c for c in conflicts if c.severity == "ERROR"]


def ensure_allocation_valid(
    students: list[Student],
    rooms: list[Room],
    policy: AllocationPolicy,
    *,
    default_quota: int = DEFAULT_SEAT_QUOTA,
) -> list[AllocationConflict]:
    """Raise PolicyViolationError on any ERROR conflict; return the non-blocking ones otherwise."""
    conflicts = validate_allocation(students, rooms, policy, default_quota=default_quota)
    errors = blocking_conflicts(conflicts)
    if errors:
        raise PolicyViolationError(errors[0].message, conflicts=errors)
    return conflicts
