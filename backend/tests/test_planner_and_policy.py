from __future__ import annotations

import random

import pytest

from seating.models import AllocationPolicy, EvenType, PolicyMode, RoomKind
from seating.planner import GroupUsage, apportion_seats, group_priority, select_groups
from seating.policy import resolve_seat_quota, rooms_by_priority


# ---- apportionment ---------------------------------------------------------


def test_apportion_uses_largest_remainder():
    shares = apportion_seats({"CSE": 10, "ECE": 5, "MEC": 5}, 10)
    assert shares == {"CSE": 5, "ECE": 3, "MEC": 2}
    assert sum(shares.values()) == 10


def test_apportion_prefers_biggest_fraction():
    # 24 seats over 7/7/6: exact shares 8.4/8.4/7.2 -> floors 8/8/7, one leftover seat.
    shares = apportion_seats({"A": 7, "B": 7, "C": 6}, 24)
    assert sum(shares.values()) == 20
    assert shares == {"A": 7, "B": 7, "C": 6}

    shares = apportion_seats({"A": 13, "B": 11, "C": 6}, 24)
    assert sum(shares.values()) == 24
    assert shares == {"A": 10, "B": 9, "C": 5}


def test_apportion_degenerate_inputs():
    assert apportion_seats({}, 10) == {}
    assert apportion_seats({"A": 4}, 0) == {"A": 0}


# ---- group selection ---------------------------------------------------------


def test_small_groups_rank_first():
    usage = GroupUsage()
    small = group_priority("SMALL", 2, usage, room_index=0)
    large = group_priority("LARGE", 60, usage, room_index=0)
    assert small.score > large.score
    assert small.score == 10000 + 4 * 1000 + 50 + 300


def test_recently_used_groups_lose_priority():
    usage = GroupUsage()
    usage.record(["CSE"], room_index=3)
    fresh = group_priority("ECE", 40, usage, room_index=4)
    used = group_priority("CSE", 40, usage, room_index=4)
    assert fresh.score > used.score


def test_select_groups_picks_three_or_four_distinct():
    remaining = {g: 30 for g in ("A", "B", "C", "D", "E", "F", "G")}
    usage = GroupUsage()
    rng = random.Random(11)
    for room_index in range(5):
        chosen = select_groups(remaining, usage, room_index=room_index, rng=rng)
        assert 3 <= len(chosen) <= 4
        assert len(set(chosen)) == len(chosen)
    assert sum(usage.selection_count.values()) >= 15


def test_select_groups_with_few_groups_takes_all():
    usage = GroupUsage()
    chosen = select_groups({"A": 5, "B": 0, "C": 9}, usage, room_index=0, rng=random.Random(1))
    assert sorted(chosen) == ["A", "C"]
    assert usage.last_room == {"A": 0, "C": 0}


def test_select_groups_is_reproducible():
    remaining = {g: n for g, n in zip("ABCDEFGH", (40, 3, 25, 60, 8, 2, 33, 17))}
    runs = [select_groups(remaining, GroupUsage(), room_index=0, rng=random.Random(5)) for _ in range(2)]
    assert runs[0] == runs[1]


# ---- quota resolution ----------------------------------------------------------


@pytest.mark.parametrize(
    "policy,rows,columns,seat_quota,expected",
    [
        (AllocationPolicy(), 7, 9, None, 24),
        (AllocationPolicy(), 4, 5, None, 20),
        (AllocationPolicy(even_type=EvenType.MAX), 7, 9, None, 63),
        (AllocationPolicy(even_type=EvenType.CUSTOM, custom_count=10), 3, 4, None, 10),
        (AllocationPolicy(even_type=EvenType.CUSTOM, custom_count=50), 3, 4, None, 12),
        (AllocationPolicy(mode=PolicyMode.MANUAL), 7, 9, 30, 30),
        (AllocationPolicy(mode=PolicyMode.MANUAL), 7, 9, None, 63),
    ],
)
def test_resolve_seat_quota_classroom(make_room, policy, rows, columns, seat_quota, expected):
    room = make_room(rows=rows, columns=columns, seat_quota=seat_quota)
    assert resolve_seat_quota(room, policy) == expected


def test_seminar_hall_always_uses_its_allotment(make_room):
    hall = make_room("H1", 10, 12, kind=RoomKind.SEMINAR_HALL, seat_quota=80)
    assert resolve_seat_quota(hall, AllocationPolicy(even_type=EvenType.MAX)) == 80
    assert resolve_seat_quota(make_room("H2", 10, 12, kind=RoomKind.SEMINAR_HALL), AllocationPolicy()) == 0


def test_default_quota_is_configurable(make_room):
    assert resolve_seat_quota(make_room(rows=7, columns=9), AllocationPolicy(), default_quota=30) == 30


def test_rooms_by_priority_puts_unranked_last(make_room):
    rooms = [make_room("x"), make_room("b", priority=2), make_room("a", priority=1), make_room("y")]
    assert [r.id for r in rooms_by_priority(rooms)] == ["a", "b", "x", "y"]
