from __future__ import annotations

from fastapi import HTTPException

from core.room_catalog import get_room_catalog
from schemas.seating import SeatingRequest
from seating.models import Room


def get_catalog_rooms() -> list[Room]:
    return list(get_room_catalog())


def resolve_request_rooms(payload: SeatingRequest, catalog: list[Room]) -> list[Room]:
    """Inline rooms win; otherwise pick `room_ids` from the catalog, in request order."""
    if payload.rooms is not None:
        return [r.to_room() for r in payload.rooms]
    if not payload.room_ids:
        return []

    by_id = {r.id: r for r in catalog}
    missing = [rid for rid in payload.room_ids if rid not in by_id]
    if missing:
        raise HTTPException(status_code=404, detail={"error": "ROOM_NOT_FOUND", "room_ids": missing})
    return [by_id[rid] for rid in dict.fromkeys(payload.room_ids)]
