from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Mapping

from seating.models import Room
from seating.ordering import derive_seed


logger = logging.getLogger(__name__)

# Keeps the invigilator shuffle independent of the seating RNG streams.
INVIGILATOR_SEED_OFFSET = 777777


@dataclass(frozen=True)
class RoomInvigilators:
    room: Room
    required: int
    invigilators: list[str] = field(default_factory=list)

    @property
    def shortfall(self) -> int:
        return max(0, self.required - len(self.invigilators))


@dataclass(frozen=True)
class InvigilatorAllotment:
    rooms: list[RoomInvigilators]
    unassigned: list[str] = field(default_factory=list)

    @property
    def required(self) -> int:
        return sum(r.required for r in self.rooms)

    @property
    def shortfall(self) -> int:
        return sum(r.shortfall for r in self.rooms)


def assign_invigilators(
    rooms: list[Room],
    invigilators: list[str],
    per_room: int | Mapping[str, int],
    seed: int,
) -> InvigilatorAllotment:
    """Shuffle the invigilators with `seed` and hand them out room by room, in the given order.

    `per_room` is either one count for every room or a count per room id (missing ids need
    none). When there are too few invigilators the later rooms go short; anyone left over
    is returned as unassigned. Blank and repeated names are dropped.
    """
    names = [n.strip() for n in invigilators if n and n.strip()]
    pool = list(dict.fromkeys(names))
    random.Random(derive_seed(seed, INVIGILATOR_SEED_OFFSET)).shuffle(pool)

    assigned: list[RoomInvigilators] = []
    cursor = 0
    for room in rooms:
        required = per_room if isinstance(per_room, int) else per_room.get(room.id, 0)
        required = max(0, int(required))
        taken = pool[cursor : cursor + required]
        cursor += len(taken)
        assigned.append(RoomInvigilators(room=room, required=required, invigilators=taken))

    allotment = InvigilatorAllotment(rooms=assigned, unassigned=pool[cursor:])
    if allotment.shortfall:
        logger.warning(
            "Invigilator shortfall: %d required, %d available",
            allotment.required,
            len(pool),
        )
    return allotment
