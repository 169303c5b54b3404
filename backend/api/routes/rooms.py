from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_catalog_rooms
from schemas.room import RoomOut
from seating.models import Room
from seating.policy import rooms_by_priority


router = APIRouter()


@router.get("/", response_model=list[RoomOut])
def list_rooms(catalog: list[Room] = Depends(get_catalog_rooms)) -> list[RoomOut]:
    return [RoomOut.from_room(r) for r in rooms_by_priority(catalog)]


@router.get("/{room_id}", response_model=RoomOut)
def get_room(room_id: str, catalog: list[Room] = Depends(get_catalog_rooms)) -> RoomOut:
    for r in catalog:
        if r.id == room_id:
            return RoomOut.from_room(r)
    raise HTTPException(status_code=404, detail="ROOM_NOT_FOUND")
