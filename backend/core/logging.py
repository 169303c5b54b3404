from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from core.config import BACKEND_DIR


# Engine loggers that are chatty at DEBUG (per-room group picks, hill-climb passes).
_ENGINE_LOGGERS = ("seating.planner", "seating.constraint_aware", "seating.direct")


def setup_logging(*, environment: str, logs_dir: Path | None = None) -> None:
    """Configure application logging.

    - Dev: console logs, DEBUG level.
    - Prod: console + rotating `seating.log`, INFO level; engine internals capped at INFO.

    Safe to call multiple times (won't double-add handlers).
    """

    root = logging.getLogger()
    if root.handlers:
        return

    env = (environment or "development").lower().strip()
    production = env == "production"
    level = logging.INFO if production else logging.DEBUG

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    handlers: list[logging.Handler] = []

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    handlers.append(console)

    if production:
        target = Path(logs_dir or BACKEND_DIR / "logs")
        target.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            target / "seating.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers)

    for name in _ENGINE_LOGGERS:
        logging.getLogger(name).setLevel(level)

    # Keep common noisy loggers reasonable.
    logging.getLogger("uvicorn").setLevel(level)
    logging.getLogger("uvicorn.error").setLevel(level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING if production else level)
