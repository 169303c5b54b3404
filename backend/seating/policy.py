from __future__ import annotations

from seating.models import DEFAULT_SEAT_QUOTA, AllocationPolicy, EvenType, PolicyMode, Room, RoomKind


def resolve_seat_quota(room: Room, policy: AllocationPolicy, *, default_quota: int = DEFAULT_SEAT_QUOTA) -> int:
    capacity = room.capacity
    if room.kind is RoomKind.SEMINAR_HALL:
        # Halls are always allotted by hand, whatever the policy.
        return min(room.seat_quota or 0, capacity)

    if policy.mode is PolicyMode.MANUAL:
        return min(room.seat_quota or capacity, capacity)

    if policy.even_type is EvenType.MAX:
        return capacity
    if policy.even_type is EvenType.CUSTOM and policy.custom_count:
        return min(int(policy.custom_count), capacity)
    return min(default_quota, capacity)


def resolve_seat_quotas(
    rooms: list[Room],
    policy: AllocationPolicy,
    *,
    default_quota: int = DEFAULT_SEAT_QUOTA,
) -> dict[str, int]:
    return {r.id: resolve_seat_quota(r, policy, default_quota=default_quota) for r in rooms}


def rooms_by_priority(rooms: list[Room]) -> list[Room]:
    """Ascending priority rank; unranked rooms last, input order kept for ties."""
    return sorted(rooms, key=lambda r: r.rank)
