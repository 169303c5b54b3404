from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field


logger = logging.getLogger(__name__)

MIN_GROUPS_PER_ROOM = 3
MAX_GROUPS_PER_ROOM = 4
SMALL_GROUP_THRESHOLD = 5


@dataclass
class GroupUsage:
    """How often, and how recently, each group has been drawn into a room."""

    selection_count: dict[str, int] = field(default_factory=dict)
    last_room: dict[str, int] = field(default_factory=dict)

    def record(self, groups: list[str], room_index: int) -> None:
        for g in groups:
            self.selection_count[g] = self.selection_count.get(g, 0) + 1
            self.last_room[g] = room_index


@dataclass(frozen=True)
class GroupPriority:
    group: str
    remaining: int
    selection_count: int
    rooms_since_last: int
    score: int


def group_priority(group: str, remaining: int, usage: GroupUsage, room_index: int) -> GroupPriority:
    selection_count = usage.selection_count.get(group, 0)
    rooms_since_last = room_index - usage.last_room.get(group, -1)

    score = 0
    # Nearly exhausted groups first, to clear them out quickly.
    if remaining <= SMALL_GROUP_THRESHOLD:
        score += 10000 + (SMALL_GROUP_THRESHOLD + 1 - remaining) * 1000
    else:
        score += min(remaining * 10, 500)
    score += rooms_since_last * 50
    score += (10 - selection_count) * 30

    return GroupPriority(
        group=group,
        remaining=remaining,
        selection_count=selection_count,
        rooms_since_last=rooms_since_last,
        score=score,
    )


def select_groups(
    remaining_by_group: dict[str, int],
    usage: GroupUsage,
    *,
    room_index: int,
    rng: random.Random,
) -> list[str]:
    """Pick 3-4 groups for a room: rank by priority, shuffle the top 2n, keep n."""
    available = [g for g, n in remaining_by_group.items() if n > 0]
    if not available:
        return []

    wanted = min(rng.randint(MIN_GROUPS_PER_ROOM, MAX_GROUPS_PER_ROOM), len(available))
    ranked = sorted(
        (group_priority(g, remaining_by_group[g], usage, room_index) for g in available),
        key=lambda p: (-p.score, p.group),
    )
    candidates = ranked[: min(wanted * 2, len(ranked))]
    rng.shuffle(candidates)
    chosen = [p.group for p in candidates[:wanted]]

    usage.record(chosen, room_index)
    logger.debug("Room %d: selected groups %s from %d available", room_index, chosen, len(available))
    return chosen


def apportion_seats(counts: dict[str, int], seats: int) -> dict[str, int]:
    """Largest-remainder apportionment of `seats` proportional to `counts`.

    No group is given more seats than it has students; keys keep the input order.
    """
    total = sum(counts.values())
    allocation = {g: 0 for g in counts}
    if total <= 0 or seats <= 0:
        return allocation

    remainders: dict[str, float] = {}
    assigned = 0
    for g, n in counts.items():
        expected = n / total * seats
        base = math.floor(expected)
        allocation[g] = base
        remainders[g] = expected - base
        assigned += base

    leftover = seats - assigned
    by_remainder = sorted((g for g in counts if counts[g] > 0), key=lambda g: -remainders[g])
    for g in by_remainder[: max(0, leftover)]:
        allocation[g] += 1

    return {g: min(a, counts[g]) for g, a in allocation.items()}
