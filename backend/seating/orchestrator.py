from __future__ import annotations

import logging
import random
from collections import deque

from seating.constraint_aware import DEFAULT_ATTEMPTS, MAX_HILL_CLIMB_ITERATIONS, arrange_constraint_aware
from seating.direct import arrange_direct
from seating.grid import SeatGrid
from seating.models import (
    DEFAULT_SEAT_QUOTA,
    AllocationPolicy,
    Arrangement,
    ArrangementMode,
    GenerationResult,
    ProgressCallback,
    Room,
    Student,
)
from seating.ordering import CLEANUP_SEED_OFFSET, ROOM_SEED_STEP, bucket_by, derive_seed, group_then_roll_key
from seating.planner import GroupUsage, apportion_seats, select_groups
from seating.policy import resolve_seat_quota, rooms_by_priority


logger = logging.getLogger(__name__)

# Share of the progress bar reserved for the per-room loop in complex mode; the rest is cleanup.
MAIN_LOOP_PROGRESS = 90.0
CLEANUP_PROGRESS = 95.0


class SeatingOrchestrator:
    """Runs a whole seating generation over a set of rooms.

    The orchestrator owns all student-pool bookkeeping; arrangers only ever see the slice
    of students and the room shape they are handed. `room_catalog` is the configured room
    list used when `generate` is called without explicit rooms.
    """

    def __init__(
        self,
        room_catalog: list[Room] | None = None,
        *,
        default_seat_quota: int = DEFAULT_SEAT_QUOTA,
        attempts: int = DEFAULT_ATTEMPTS,
        max_iterations: int = MAX_HILL_CLIMB_ITERATIONS,
    ):
        self.room_catalog = list(room_catalog or [])
        self.default_seat_quota = default_seat_quota
        self.attempts = attempts
        self.max_iterations = max_iterations

    def generate(
        self,
        students: list[Student],
        policy: AllocationPolicy,
        mode: ArrangementMode,
        seed: int,
        *,
        rooms: list[Room] | None = None,
        progress: ProgressCallback | None = None,
    ) -> GenerationResult:
        run = _Run(
            self,
            students=list(students),
            rooms=rooms_by_priority(list(self.room_catalog if rooms is None else rooms)),
            policy=policy,
            seed=int(seed),
            progress=progress,
        )
        if mode is ArrangementMode.SIMPLE:
            return run.simple()
        return run.complex()


class _Run:
    """State of one `generate` call; discarded when the call returns."""

    def __init__(
        self,
        orchestrator: SeatingOrchestrator,
        *,
        students: list[Student],
        rooms: list[Room],
        policy: AllocationPolicy,
        seed: int,
        progress: ProgressCallback | None,
    ):
        self.o = orchestrator
        self.students = students
        self.rooms = rooms
        self.seed = seed
        self.progress = progress
        # By position, so rooms sharing an id never share a quota.
        self.quotas = [resolve_seat_quota(r, policy, default_quota=orchestrator.default_seat_quota) for r in rooms]

    def _report(self, percent: float, label: str, seated: int, rooms_done: int) -> None:
        if self.progress is not None:
            self.progress(min(100.0, max(0.0, percent)), label, seated, rooms_done)

    def _room_seed(self, room_index: int) -> int:
        return derive_seed(self.seed, room_index * ROOM_SEED_STEP)

    def simple(self) -> GenerationResult:
        pool = list(self.students)
        arrangements: list[Arrangement] = []
        total_rooms = len(self.rooms)

        for index, room in enumerate(self.rooms):
            quota = self.quotas[index]
            result = arrange_direct(
                pool,
                room.rows,
                room.columns,
                seed=self._room_seed(index),
                limit=quota,
                attempts=self.o.attempts,
            )
            # Students the column rule could not seat go back into the pool for the next room.
            pool = result.unplaced
            arrangements.append(Arrangement(room=room, grid=result.grid, seat_quota=quota))
            logger.info(
                "Room %s: seated %d of quota %d, %d students back in pool",
                room.name,
                result.grid.seated_count,
                quota,
                len(pool),
            )
            self._report(
                (index + 1) / total_rooms * 100,
                f"Placed students in {room.name}",
                len(self.students) - len(pool),
                index + 1,
            )

        if pool:
            logger.error("%d students could not be seated in simple mode", len(pool))
        self._report(100, "Simple arrangement complete", len(self.students) - len(pool), total_rooms)
        return GenerationResult(arrangements=arrangements, unplaced=pool, seed=self.seed, mode=ArrangementMode.SIMPLE)

    def complex(self) -> GenerationResult:
        ordered = sorted(self.students, key=group_then_roll_key)
        queues = {g: deque(members) for g, members in bucket_by(ordered, lambda s: s.group).items()}
        usage = GroupUsage()
        rng = random.Random(self.seed)
        arrangements: list[Arrangement] = []
        total_rooms = len(self.rooms)

        def _seated() -> int:
            return len(self.students) - sum(len(q) for q in queues.values())

        self._report(0, "Initializing complex arrangement", 0, 0)

        for index, room in enumerate(self.rooms):
            quota = self.quotas[index]
            self._report(index / max(total_rooms, 1) * MAIN_LOOP_PROGRESS, f"Processing room {room.name}", _seated(), index)

            remaining = {g: len(q) for g, q in queues.items()}
            chosen = select_groups(remaining, usage, room_index=index, rng=rng) if quota > 0 else []
            shares = apportion_seats({g: remaining[g] for g in chosen}, quota)

            for_room: list[Student] = []
            for g in chosen:
                for _ in range(min(shares.get(g, 0), len(queues[g]))):
                    for_room.append(queues[g].popleft())

            logger.info("Room %s: %d students from groups %s", room.name, len(for_room), chosen)
            grid = arrange_constraint_aware(
                for_room,
                room.rows,
                room.columns,
                seed=self._room_seed(index),
                attempts=self.o.attempts,
                max_iterations=self.o.max_iterations,
            )
            arrangements.append(Arrangement(room=room, grid=grid, seat_quota=quota))
            self._report((index + 1) / total_rooms * MAIN_LOOP_PROGRESS, f"Completed room {room.name}", _seated(), index + 1)

        leftovers = [s for q in queues.values() for s in q]
        unplaced = self._cleanup(arrangements, leftovers) if leftovers else []

        if unplaced:
            logger.error(
                "%d students could not be seated: %s",
                len(unplaced),
                ", ".join(f"{s.group}-{s.roll}" for s in unplaced),
            )
        self._report(100, "Complex arrangement complete", len(self.students) - len(unplaced), total_rooms)
        return GenerationResult(arrangements=arrangements, unplaced=unplaced, seed=self.seed, mode=ArrangementMode.COMPLEX)

    def _cleanup(self, arrangements: list[Arrangement], leftovers: list[Student]) -> list[Student]:
        """Seat leftovers in the rooms with the most spare physical seats, re-arranging each from scratch."""
        logger.warning("%d students remaining after initial allocation", len(leftovers))
        self._report(
            CLEANUP_PROGRESS,
            f"Allocating remaining {len(leftovers)} students",
            len(self.students) - len(leftovers),
            len(self.rooms),
        )

        spare = [
            (a.room.capacity - a.seated_count, index)
            for index, a in enumerate(arrangements)
            if a.room.capacity - a.seated_count > 0
        ]
        spare.sort(key=lambda item: -item[0])

        pending = list(leftovers)
        for free, index in spare:
            if not pending:
                break
            newcomers, pending = pending[:free], pending[free:]
            current = arrangements[index]
            occupants = current.students() + newcomers
            grid: SeatGrid = arrange_constraint_aware(
                occupants,
                current.room.rows,
                current.room.columns,
                seed=derive_seed(self._room_seed(index), CLEANUP_SEED_OFFSET),
                attempts=self.o.attempts,
                max_iterations=self.o.max_iterations,
            )
            arrangements[index] = Arrangement(room=current.room, grid=grid, seat_quota=current.seat_quota)
            logger.info("Cleanup: added %d students to %s (%d total)", len(newcomers), current.room.name, len(occupants))

        return pending


def generate(
    students: list[Student],
    rooms: list[Room],
    policy: AllocationPolicy,
    mode: ArrangementMode,
    seed: int,
    progress: ProgressCallback | None = None,
    *,
    default_seat_quota: int = DEFAULT_SEAT_QUOTA,
    attempts: int = DEFAULT_ATTEMPTS,
) -> GenerationResult:
    """Seat `students` across `rooms`; one Arrangement per room, ordered by priority."""
    orchestrator = SeatingOrchestrator(rooms, default_seat_quota=default_seat_quota, attempts=attempts)
    return orchestrator.generate(students, policy, mode, seed, progress=progress)
