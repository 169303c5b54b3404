from __future__ import annotations

import logging

from seating.invigilation import assign_invigilators


STAFF = ["Dr. Rao", "Ms. Iyer", "Mr. Khan", "Dr. Das", "Ms. Paul"]


def test_allotment_is_reproducible_for_a_seed(make_room):
    rooms = [make_room("A"), make_room("B")]
    first = assign_invigilators(rooms, STAFF, 2, seed=42)
    assert first == assign_invigilators(rooms, STAFF, 2, seed=42)

    orders = {tuple(n for r in assign_invigilators(rooms, STAFF, 2, seed=s).rooms for n in r.invigilators) for s in range(10)}
    assert len(orders) > 1


def test_every_room_gets_its_share_and_the_rest_are_unassigned(make_room):
    rooms = [make_room("A"), make_room("B")]
    allotment = assign_invigilators(rooms, STAFF, 2, seed=7)

    assert [r.room.id for r in allotment.rooms] == ["A", "B"]
    assert [len(r.invigilators) for r in allotment.rooms] == [2, 2]
    assert len(allotment.unassigned) == 1
    handed_out = [n for r in allotment.rooms for n in r.invigilators] + allotment.unassigned
    assert sorted(handed_out) == sorted(STAFF)
    assert allotment.shortfall == 0


def test_shortfall_leaves_later_rooms_short(make_room, caplog):
    rooms = [make_room("A"), make_room("B"), make_room("C")]
    with caplog.at_level(logging.WARNING, logger="seating.invigilation"):
        allotment = assign_invigilators(rooms, STAFF[:4], 2, seed=3)

    assert [len(r.invigilators) for r in allotment.rooms] == [2, 2, 0]
    assert [r.shortfall for r in allotment.rooms] == [0, 0, 2]
    assert allotment.required == 6
    assert allotment.shortfall == 2
    assert allotment.unassigned == []
    assert "shortfall" in caplog.text


def test_per_room_counts_by_id(make_room):
    rooms = [make_room("A"), make_room("H"), make_room("B")]
    allotment = assign_invigilators(rooms, STAFF, {"A": 1, "H": 3}, seed=9)

    assert [r.required for r in allotment.rooms] == [1, 3, 0]
    assert [len(r.invigilators) for r in allotment.rooms] == [1, 3, 0]
    assert len(allotment.unassigned) == 1


def test_blank_and_repeated_names_are_dropped(make_room):
    allotment = assign_invigilators([make_room("A")], ["Dr. Rao", " ", "Dr. Rao ", "Ms. Iyer"], 5, seed=1)

    (room,) = allotment.rooms
    assert sorted(room.invigilators) == ["Dr. Rao", "Ms. Iyer"]
    assert room.shortfall == 3
