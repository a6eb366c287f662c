"""Entity store library: pluggable keyed storage for tower records.

Public API:
    - BaseStore: Abstract backend interface
    - MemoryStore: Volatile in-process backend (default)
    - DatabaseStore: SQLAlchemy async backend
    - get_store: Backend factory driven by settings
    - seed_store: Load the sample data set into an empty store
    - Record types: User, LightTower, MaintenanceReport, ActivityLog, MaintenanceTask
    - Enums: TowerStatus, VerificationStatus, ActivityType, TaskStatus, TaskPriority
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lighttower_api.lib.store.base import BaseStore
from lighttower_api.lib.store.database import DatabaseStore
from lighttower_api.lib.store.memory import MemoryStore
from lighttower_api.lib.store.seed import seed_store
from lighttower_api.lib.store.types import (
    OPEN_TASK_STATUSES,
    ActivityLog,
    ActivityType,
    LightTower,
    MaintenanceReport,
    MaintenanceTask,
    TaskPriority,
    TaskStatus,
    TowerStatus,
    User,
    VerificationStatus,
    format_tower_code,
)

if TYPE_CHECKING:
    from lighttower_api.core.config import Settings

_BACKENDS = ("memory", "database")


def get_available_backends() -> list[str]:
    """Return the names of all store backends."""
    return list(_BACKENDS)


def get_store(settings: Settings) -> BaseStore:
    """Build the store backend selected by ``settings.storage_backend``.

    The database backend requires ``init_engine()`` to have been called.

    Args:
        settings: Application settings.

    Returns:
        A ready-to-use store.

    Raises:
        ValueError: If the backend name is not registered.
    """
    if settings.storage_backend == "memory":
        return MemoryStore()
    if settings.storage_backend == "database":
        from lighttower_api.core.database import get_session_factory

        return DatabaseStore(get_session_factory())
    msg = f"Unknown storage backend: {settings.storage_backend!r}. Available: {list(_BACKENDS)}"
    raise ValueError(msg)


__all__ = [
    "OPEN_TASK_STATUSES",
    "ActivityLog",
    "ActivityType",
    "BaseStore",
    "DatabaseStore",
    "LightTower",
    "MaintenanceReport",
    "MaintenanceTask",
    "MemoryStore",
    "TaskPriority",
    "TaskStatus",
    "TowerStatus",
    "User",
    "VerificationStatus",
    "format_tower_code",
    "get_available_backends",
    "get_store",
    "seed_store",
]
