"""Error taxonomy shared by the services and the HTTP layer.

Every failure the core reports is one of four kinds. The HTTP layer maps
``status_code`` and ``code`` straight onto the response, so services never
build framework-specific error shapes.
"""

from __future__ import annotations

from typing import Any


class TimeclockError(Exception):
    """Base class for all domain errors."""

    code = "TIMECLOCK_ERROR"
    status_code = 500

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)


class ValidationError(TimeclockError):
    """Illegal transition, malformed input or missing field."""

    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(TimeclockError):
    """Referenced employee, event or request does not exist."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found", {"id": str(entity_id)})


class ConflictError(TimeclockError):
    """Request conflicts with current state (balance, duplicate session)."""

    code = "CONFLICT"
    status_code = 409


class StoreError(TimeclockError):
    """Persistence failed. Never retried by the core."""

    code = "STORE_ERROR"
    status_code = 500


class TransitionRejectedError(ValidationError):
    """Raised when a punch is not a legal move from the current clock state."""

    code = "INVALID_TRANSITION"

    def __init__(self, current_state: str, proposed: str, reason: str):
        self.current_state = current_state
        self.proposed = proposed
        self.reason = reason
        super().__init__(
            reason,
            {"current_state": current_state, "proposed": proposed},
        )
