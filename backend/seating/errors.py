from __future__ import annotations

from typing import Any


class SeatingError(RuntimeError):
    """Base class for seating engine failures.

    `code` is a stable machine-readable identifier; `details` carries structured context
    for API payloads and logs.
    """

    def __init__(self, message: str, *, code: str = "SEATING_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class SeatingInvariantError(SeatingError):
    """An internal invariant of the engine was broken (e.g. a roll seated twice)."""


class PolicyViolationError(SeatingError):
    """Caller-side allocation validation failed; the run must not start."""

    def __init__(self, message: str, *, conflicts: list[Any]):
        super().__init__(
            message,
            code="POLICY_VIOLATION",
            details={"conflicts": [getattr(c, "conflict_type", str(c)) for c in conflicts]},
        )
        self.conflicts = list(conflicts)
