from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from core.config import settings
from schemas.room import RoomIn
from seating.errors import SeatingError
from seating.models import Room


logger = logging.getLogger(__name__)

_ROOM_LIST = TypeAdapter(list[RoomIn])


class RoomCatalogError(SeatingError):
    pass


def load_room_catalog(path: Path) -> list[Room]:
    """Read a JSON list of rooms. A missing file yields an empty catalog."""
    if not path.exists():
        logger.warning("Room catalog %s not found; catalog is empty", path)
        return []
    try:
        rooms = _ROOM_LIST.validate_json(path.read_bytes())
    except ValidationError as exc:
        raise RoomCatalogError(
            f"Invalid room catalog: {path}",
            code="ROOM_CATALOG_INVALID",
            details={"path": str(path), "errors": exc.errors(include_url=False)},
        ) from exc

    ids = [r.id for r in rooms]
    if len(set(ids)) != len(ids):
        raise RoomCatalogError(
            f"Duplicate room ids in catalog: {path}",
            code="ROOM_CATALOG_INVALID",
            details={"path": str(path)},
        )

    logger.info("Loaded %d rooms from %s", len(rooms), path)
    return [r.to_room() for r in rooms]


@lru_cache(maxsize=1)
def get_room_catalog() -> tuple[Room, ...]:
    return tuple(load_room_catalog(settings.room_catalog_file))
