from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from api.router import api_router
from core.config import settings
from core.logging import setup_logging
from core.room_catalog import RoomCatalogError, get_room_catalog
from seating.errors import SeatingError


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    setup_logging(environment=settings.environment)
    is_production = settings.environment == "production"
    app = FastAPI(
        title="Exam Seating API",
        version="0.1.0",
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
    )

    @app.exception_handler(RoomCatalogError)
    def _room_catalog_error(_request, exc: RoomCatalogError):
        logger.error("Room catalog unavailable: %s", exc)
        return JSONResponse(
            status_code=503,
            content={
                "code": exc.code,
                "message": "Room catalog could not be loaded.",
            },
        )

    @app.exception_handler(SeatingError)
    def _seating_error(_request, exc: SeatingError):
        logger.error("Seating engine error (%s): %s", exc.code, exc)
        return JSONResponse(
            status_code=500,
            content={
                "code": exc.code,
                "message": str(exc),
                "details": exc.details,
            },
        )

    allow_origins = [settings.frontend_origin]
    allow_origin_regex = None
    if not is_production:
        # Dev-friendly: allow the configured origin and any localhost port.
        allow_origins.extend(["http://localhost:5173", "http://127.0.0.1:5173"])
        allow_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_origin_regex=allow_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict:
        # Always respond; reflect catalog availability without crashing.
        catalog_status = "ok"
        try:
            rooms = len(get_room_catalog())
        except RoomCatalogError:
            catalog_status = "down"
            rooms = 0

        return {"app": "ok", "room_catalog": catalog_status, "rooms": rooms}

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
