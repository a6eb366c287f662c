"""Abstract entity store interface for pluggable storage backends.

Every backend assigns monotonically increasing integer ids per entity type
(starting at 1, never reused), stamps creation timestamps, synthesizes tower
codes, and enforces tower code uniqueness. Callers above this layer never
touch backend-specific sessions or maps.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from lighttower_api.lib.store.types import (
    ActivityLog,
    LightTower,
    MaintenanceReport,
    MaintenanceTask,
    User,
)

Predicate = Callable[[Any], bool]


class BaseStore(ABC):
    """Keyed storage for users, towers, reports, activity logs and tasks.

    ``list_*`` methods return records in insertion (id) order, optionally
    filtered by a predicate. ``update_*`` methods shallow-merge the given
    fields and return ``None`` for unknown ids. Reports and activity logs
    are immutable and have no update method.
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Unique name identifying this backend."""

    async def close(self) -> None:  # noqa: B027
        """Release backend resources. No-op by default."""

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Group store calls into one unit of work.

        Every write made inside the block is kept only if the block exits
        normally; an exception discards all of them. Nested blocks join the
        outer one. Ids of discarded rows were never visible to callers, so a
        backend may hand them out again, except for a tower id whose
        synthesized code turned out to be taken.

        Usage::

            async with store.transaction():
                report = await store.create_report(...)
                await store.create_activity_log(...)
        """

    # Users

    @abstractmethod
    async def get_user(self, user_id: int) -> User | None:
        """Return the user with the given id, or None."""

    @abstractmethod
    async def get_user_by_username(self, username: str) -> User | None:
        """Return the user with the given username, or None."""

    @abstractmethod
    async def list_users(self, predicate: Predicate | None = None) -> list[User]:
        """Return users in insertion order."""

    @abstractmethod
    async def create_user(self, fields: dict[str, Any]) -> User:
        """Insert a user and return it with its assigned id."""

    # Light towers

    @abstractmethod
    async def get_tower(self, tower_pk: int) -> LightTower | None:
        """Return the tower with the given numeric id, or None."""

    @abstractmethod
    async def get_tower_by_code(self, tower_id: str) -> LightTower | None:
        """Return the tower with the given human-facing code (``LT-###``), or None."""

    @abstractmethod
    async def list_towers(self, predicate: Predicate | None = None) -> list[LightTower]:
        """Return towers in insertion order."""

    @abstractmethod
    async def create_tower(self, fields: dict[str, Any]) -> LightTower:
        """Insert a tower.

        Synthesizes ``tower_id`` as ``LT-{id:03d}`` when it is not supplied.

        Raises:
            DuplicateTowerIdError: If the tower code is already taken.
        """

    @abstractmethod
    async def update_tower(self, tower_pk: int, fields: dict[str, Any]) -> LightTower | None:
        """Shallow-merge fields onto a tower.

        Raises:
            DuplicateTowerIdError: If ``tower_id`` is changed to a taken code.
        """

    # Maintenance reports

    @abstractmethod
    async def get_report(self, report_id: int) -> MaintenanceReport | None:
        """Return the report with the given id, or None."""

    @abstractmethod
    async def list_reports(self, predicate: Predicate | None = None) -> list[MaintenanceReport]:
        """Return reports in insertion order."""

    @abstractmethod
    async def create_report(self, fields: dict[str, Any]) -> MaintenanceReport:
        """Insert a maintenance report. Does not touch the referenced tower."""

    # Activity logs

    @abstractmethod
    async def get_activity_log(self, log_id: int) -> ActivityLog | None:
        """Return the activity log with the given id, or None."""

    @abstractmethod
    async def list_activity_logs(self, predicate: Predicate | None = None) -> list[ActivityLog]:
        """Return activity logs in insertion order."""

    @abstractmethod
    async def create_activity_log(self, fields: dict[str, Any]) -> ActivityLog:
        """Append an activity log entry."""

    # Maintenance tasks

    @abstractmethod
    async def get_task(self, task_id: int) -> MaintenanceTask | None:
        """Return the task with the given id, or None."""

    @abstractmethod
    async def list_tasks(self, predicate: Predicate | None = None) -> list[MaintenanceTask]:
        """Return tasks in insertion order."""

    @abstractmethod
    async def create_task(self, fields: dict[str, Any]) -> MaintenanceTask:
        """Insert a maintenance task."""

    @abstractmethod
    async def update_task(self, task_id: int, fields: dict[str, Any]) -> MaintenanceTask | None:
        """Shallow-merge fields onto a task."""

    # Derived lookups. Backends may override these with native queries.

    async def list_towers_by_status(self, status: str) -> list[LightTower]:
        """Return towers currently in the given status."""
        return await self.list_towers(lambda t: t.status == status)

    async def list_towers_by_constituency(self, constituency: str) -> list[LightTower]:
        """Return towers in the given constituency."""
        return await self.list_towers(lambda t: t.constituency == constituency)

    async def list_towers_by_ward(self, ward: str) -> list[LightTower]:
        """Return towers in the given ward."""
        return await self.list_towers(lambda t: t.ward == ward)

    async def list_reports_for_tower(self, tower_pk: int) -> list[MaintenanceReport]:
        """Return all reports filed against one tower."""
        return await self.list_reports(lambda r: r.tower_id == tower_pk)

    async def list_activity_for_tower(self, tower_pk: int) -> list[ActivityLog]:
        """Return all activity logs referencing one tower."""
        return await self.list_activity_logs(lambda log: log.tower_id == tower_pk)

    async def recent_activity(self, limit: int) -> list[ActivityLog]:
        """Return the ``limit`` most recent logs, newest first.

        Entries with identical timestamps are ordered by descending id.
        """
        logs = await self.list_activity_logs()
        logs.sort(key=lambda log: (log.performed_at, log.id), reverse=True)
        return logs[:limit]
