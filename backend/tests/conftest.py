"""
Shared fixtures for seating engine and API tests.
"""

from __future__ import annotations

import logging

import pytest

from seating.models import AllocationPolicy, EvenType, PolicyMode, Room, RoomKind, Student


logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def build_group(group: str, count: int, *, subject: str | None = None, start: int = 1) -> list[Student]:
    """Students `22<group><nnn>` with ordinals start..start+count-1."""
    return [
        Student(roll=f"22{group}{i:03d}", group=group, subject=subject, sequence=i)
        for i in range(start, start + count)
    ]


@pytest.fixture
def make_group():
    return build_group


@pytest.fixture
def make_room():
    def _make(
        room_id: str = "R1",
        rows: int = 5,
        columns: int = 6,
        *,
        kind: RoomKind = RoomKind.CLASSROOM,
        seat_quota: int | None = None,
        priority: int | None = None,
        selected: bool = True,
    ) -> Room:
        return Room(
            id=room_id,
            name=f"Room {room_id}",
            rows=rows,
            columns=columns,
            kind=kind,
            seat_quota=seat_quota,
            priority=priority,
            selected=selected,
        )

    return _make


@pytest.fixture
def max_policy() -> AllocationPolicy:
    return AllocationPolicy(mode=PolicyMode.EVEN, even_type=EvenType.MAX)


@pytest.fixture
def default_policy() -> AllocationPolicy:
    return AllocationPolicy()
