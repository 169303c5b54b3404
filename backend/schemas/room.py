from __future__ import annotations

from pydantic import BaseModel, Field

from seating.models import Room, RoomKind


class RoomIn(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    rows: int = Field(ge=1)
    columns: int = Field(ge=1)
    kind: RoomKind = RoomKind.CLASSROOM
    selected: bool = True
    # Manual allotment; required for seminar halls and in MANUAL policy mode.
    seat_quota: int | None = Field(default=None, ge=0)
    priority: int | None = None
    block: str | None = None

    def to_room(self) -> Room:
        return Room(
            id=self.id,
            name=self.name,
            rows=self.rows,
            columns=self.columns,
            kind=self.kind,
            selected=self.selected,
            seat_quota=self.seat_quota,
            priority=self.priority,
            block=self.block,
        )


class RoomOut(RoomIn):
    capacity: int

    @classmethod
    def from_room(cls, room: Room) -> "RoomOut":
        return cls(
            id=room.id,
            name=room.name,
            rows=room.rows,
            columns=room.columns,
            kind=room.kind,
            selected=room.selected,
            seat_quota=room.seat_quota,
            priority=room.priority,
            block=room.block,
            capacity=room.capacity,
        )
