"""Domain exceptions shared by the store, services and API layer.

Each exception carries the HTTP status the API layer maps it to, so the
exception handlers in ``main.py`` can translate them without a lookup table.
"""

from typing import Any


class LightTowerError(Exception):
    """Base class for all expected, caller-facing failures.

    Args:
        message: Human-readable error description.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(LightTowerError):
    """Raised when input is malformed or violates a field rule.

    Args:
        message: Summary message.
        errors: Optional per-field errors as ``{"path": [...], "message": str}``.
    """

    status_code = 400

    def __init__(self, message: str = "Validation error", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class DuplicateTowerIdError(ValidationError):
    """Raised when a tower is registered with a tower code that already exists."""

    def __init__(self, tower_id: str) -> None:
        self.tower_id = tower_id
        super().__init__(
            f"Tower ID {tower_id} already exists",
            errors=[{"path": ["towerId"], "message": f"Tower ID {tower_id} already exists"}],
        )


class NotFoundError(LightTowerError):
    """Raised when a referenced entity does not exist."""

    status_code = 404


class TowerNotFoundError(NotFoundError):
    """Raised when a light tower cannot be found by id or tower code."""

    def __init__(self, tower_ref: int | str) -> None:
        self.tower_ref = tower_ref
        super().__init__("Light tower not found")


class TaskNotFoundError(NotFoundError):
    """Raised when a maintenance task id is unknown."""

    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(f"Maintenance task {task_id} not found")


class TaskTransitionError(LightTowerError):
    """Raised when a maintenance task cannot move to the requested status."""

    status_code = 409

    def __init__(self, task_id: int, current: str, target: str) -> None:
        self.task_id = task_id
        self.current = current
        self.target = target
        super().__init__(f"Maintenance task {task_id} cannot move from {current} to {target}")


class InternalError(LightTowerError):
    """Unexpected failure. The message is intentionally generic."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
