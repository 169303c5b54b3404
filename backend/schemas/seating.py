from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from schemas.room import RoomIn
from seating.models import AllocationPolicy, ArrangementMode, EvenType, PolicyMode, Student


class StudentIn(BaseModel):
    roll: str = Field(min_length=1)
    group: str = Field(min_length=1)
    subject: str | None = None
    sequence: int | None = None

    def to_student(self) -> Student:
        subject = (self.subject or "").strip() or None
        return Student(roll=self.roll.strip(), group=self.group.strip(), subject=subject, sequence=self.sequence)


class PolicyIn(BaseModel):
    mode: PolicyMode = PolicyMode.EVEN
    even_type: EvenType = EvenType.DEFAULT
    custom_count: int | None = Field(default=None, ge=1)

    def to_policy(self) -> AllocationPolicy:
        return AllocationPolicy(mode=self.mode, even_type=self.even_type, custom_count=self.custom_count)


class SeatingRequest(BaseModel):
    """Body shared by generate and validate.

    Rooms are either given inline or picked by id from the configured catalog; not both.
    """

    students: list[StudentIn] = Field(default_factory=list)
    rooms: list[RoomIn] | None = None
    room_ids: list[str] | None = None
    policy: PolicyIn = Field(default_factory=PolicyIn)

    @model_validator(mode="after")
    def _one_room_source(self) -> "SeatingRequest":
        if self.rooms is not None and self.room_ids is not None:
            raise ValueError("Provide either rooms or room_ids, not both")
        return self


class GenerateSeatingRequest(SeatingRequest):
    mode: ArrangementMode = ArrangementMode.COMPLEX
    seed: int | None = Field(default=None, ge=0)
    # Allotted after seating, to every room that ends up with students.
    invigilators: list[str] = Field(default_factory=list)
    invigilators_per_room: int = Field(default=1, ge=0)


class AllocationConflictOut(BaseModel):
    severity: Literal["INFO", "WARN", "ERROR"] = "ERROR"
    conflict_type: str
    message: str
    room_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ViolationOut(BaseModel):
    violation_type: str
    first: tuple[int, int]
    second: tuple[int, int]
    first_roll: str
    second_roll: str
    message: str


class ArrangementOut(BaseModel):
    room_id: str
    room_name: str
    rows: int
    columns: int
    seat_quota: int
    seated: int
    # Roll numbers row by row; None marks an empty seat.
    seats: list[list[str | None]]
    group_counts: dict[str, int] = Field(default_factory=dict)
    violations: list[ViolationOut] = Field(default_factory=list)


class UnplacedStudentOut(BaseModel):
    roll: str
    group: str


class RoomInvigilatorsOut(BaseModel):
    room_id: str
    room_name: str
    required: int
    invigilators: list[str] = Field(default_factory=list)
    shortfall: int = 0


class InvigilationOut(BaseModel):
    rooms: list[RoomInvigilatorsOut] = Field(default_factory=list)
    unassigned: list[str] = Field(default_factory=list)
    shortfall: int = 0


class GenerateSeatingResponse(BaseModel):
    status: Literal["FAILED_VALIDATION", "COMPLETE", "PARTIAL"]
    mode: ArrangementMode
    seed: int
    conflicts: list[AllocationConflictOut] = Field(default_factory=list)
    arrangements: list[ArrangementOut] = Field(default_factory=list)
    unplaced: list[UnplacedStudentOut] = Field(default_factory=list)
    summary: dict[str, Any] = Field(default_factory=dict)
    invigilation: InvigilationOut | None = None


class ValidateSeatingResponse(BaseModel):
    status: Literal["FAILED_VALIDATION", "OK"]
    conflicts: list[AllocationConflictOut] = Field(default_factory=list)
    seat_quotas: dict[str, int] = Field(default_factory=dict)
