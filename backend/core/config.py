from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic.aliases import AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=BACKEND_DIR / ".env", env_file_encoding="utf-8", extra="ignore")

    # Runtime
    environment: str = Field(default="development", validation_alias=AliasChoices("environment", "ENVIRONMENT"))
    frontend_origin: str = Field(
        default="http://localhost:5173",
        validation_alias=AliasChoices("frontend_origin", "FRONTEND_ORIGIN"),
    )

    # Seating engine
    default_seat_quota: int = Field(
        default=24,
        ge=1,
        validation_alias=AliasChoices("default_seat_quota", "DEFAULT_SEAT_QUOTA"),
    )
    arrangement_attempts: int = Field(
        default=3,
        ge=1,
        validation_alias=AliasChoices("arrangement_attempts", "ARRANGEMENT_ATTEMPTS"),
    )

    # JSON list of rooms offered by GET /api/rooms and selectable by id in generate requests.
    room_catalog_file: Path = Field(
        default=BACKEND_DIR / "data" / "rooms.json",
        validation_alias=AliasChoices("room_catalog_file", "ROOM_CATALOG_FILE"),
    )

    @field_validator("environment")
    @classmethod
    def _normalize_environment(cls, v: str) -> str:
        return (v or "development").strip().lower()

    @field_validator("frontend_origin")
    @classmethod
    def _normalize_frontend_origin(cls, v: str) -> str:
        # Starlette CORS expects the Origin to match exactly (no trailing slash).
        return v.strip().rstrip("/")

    @field_validator("room_catalog_file")
    @classmethod
    def _resolve_room_catalog_file(cls, v: Path) -> Path:
        return v if v.is_absolute() else BACKEND_DIR / v


settings = Settings()
