from __future__ import annotations

from fastapi import APIRouter

from api.routes import rooms, seating


api_router = APIRouter()
api_router.include_router(rooms.router, prefix="/rooms", tags=["rooms"])
api_router.include_router(seating.router, prefix="/seating", tags=["seating"])
