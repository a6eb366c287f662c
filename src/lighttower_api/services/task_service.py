"""Maintenance task board: persisted work items with an audited workflow.

Task states move pending -> assigned -> in_progress -> completed, and any
open state may be cancelled. Each transition appends one activity log
against the task's tower in the same store transaction as the change.
Completing a task returns the tower to service.
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from loguru import logger

from lighttower_api.core.exceptions import TaskNotFoundError, TaskTransitionError, TowerNotFoundError
from lighttower_api.lib.store import (
    OPEN_TASK_STATUSES,
    ActivityType,
    BaseStore,
    MaintenanceTask,
    TaskPriority,
    TaskStatus,
    TowerStatus,
)

SYSTEM_ACTOR = "System"

# Allowed source states per target state.
_TRANSITIONS: dict[TaskStatus, frozenset[str]] = {
    TaskStatus.ASSIGNED: frozenset({TaskStatus.PENDING, TaskStatus.ASSIGNED}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.ASSIGNED}),
    TaskStatus.COMPLETED: frozenset({TaskStatus.ASSIGNED, TaskStatus.IN_PROGRESS}),
    TaskStatus.CANCELLED: OPEN_TASK_STATUSES,
}


class TaskBoard:
    """Creates and advances maintenance tasks.

    Args:
        store: The backing entity store.
        lock: Lock shared with the tower lifecycle engine.
        due_days: Days until a new task is due when no due date is given.
    """

    def __init__(self, store: BaseStore, lock: asyncio.Lock, due_days: int = 7) -> None:
        self.store = store
        self.lock = lock
        self.due_days = due_days

    async def list_tasks(self, status: str | None = None, priority: str | None = None) -> list[MaintenanceTask]:
        """List tasks in creation order, optionally filtered by status and priority."""
        return await self.store.list_tasks(
            lambda t: (status is None or t.status == status) and (priority is None or t.priority == priority)
        )

    async def create_task(self, data: dict[str, Any], created_by: str | None = None) -> MaintenanceTask:
        """Create a pending task for an existing tower.

        Args:
            data: Task fields (snake_case) including numeric ``tower_id``.
                ``title``, ``description``, ``priority`` and ``due_date``
                are optional.
            created_by: Name recorded on the ``task_created`` log.

        Returns:
            The created task.

        Raises:
            TowerNotFoundError: If the tower does not exist.
        """
        async with self.lock, self.store.transaction():
            return await self._create(data, created_by or SYSTEM_ACTOR)

    async def generate_tasks(self, created_by: str | None = None) -> list[MaintenanceTask]:
        """Open one task for every warning or critical tower without an open task.

        Returns:
            The newly created tasks, in tower order.
        """
        actor = created_by or SYSTEM_ACTOR
        created: list[MaintenanceTask] = []
        async with self.lock, self.store.transaction():
            open_towers = {t.tower_id for t in await self.store.list_tasks(lambda t: t.status in OPEN_TASK_STATUSES)}
            towers = await self.store.list_towers(
                lambda t: t.status in (TowerStatus.WARNING, TowerStatus.CRITICAL) and t.id not in open_towers
            )
            for tower in towers:
                if tower.status == TowerStatus.CRITICAL:
                    priority = TaskPriority.CRITICAL
                    description = f"Critical repair needed at {tower.location}"
                else:
                    priority = TaskPriority.MEDIUM
                    description = f"Inspection required at {tower.location}"
                created.append(
                    await self._create(
                        {"tower_id": tower.id, "priority": priority, "description": description},
                        actor,
                    )
                )
        logger.info(f"Generated {len(created)} maintenance tasks")
        return created

    async def assign_task(self, task_id: int, assigned_to: str, performed_by: str | None = None) -> MaintenanceTask:
        """Assign (or reassign) a task to a technician."""
        return await self._transition(
            task_id,
            TaskStatus.ASSIGNED,
            {"assigned_to": assigned_to},
            ActivityType.TASK_ASSIGNED,
            lambda task, code: f"Task {task.id} for tower {code} assigned to {assigned_to}",
            performed_by,
        )

    async def start_task(self, task_id: int, performed_by: str | None = None) -> MaintenanceTask:
        """Mark an assigned task as in progress."""
        return await self._transition(
            task_id,
            TaskStatus.IN_PROGRESS,
            {},
            ActivityType.TASK_STARTED,
            lambda task, code: f"Task {task.id} for tower {code} started",
            performed_by,
        )

    async def complete_task(
        self,
        task_id: int,
        notes: str | None = None,
        performed_by: str | None = None,
    ) -> MaintenanceTask:
        """Complete a task and return its tower to active service.

        The tower's status becomes ``active`` and its ``last_maintenance``
        is set to the completion time.

        Args:
            task_id: The task id.
            notes: Optional completion notes.
            performed_by: Name recorded on the ``task_completed`` log.

        Returns:
            The completed task.

        Raises:
            TaskNotFoundError: If the task does not exist.
            TaskTransitionError: If the task is not assigned or in progress.
        """
        now = datetime.now(UTC)
        return await self._transition(
            task_id,
            TaskStatus.COMPLETED,
            {"completed_at": now, "completion_notes": notes},
            ActivityType.TASK_COMPLETED,
            lambda task, code: f"Task {task.id} for tower {code} completed",
            performed_by,
            tower_changes={"status": TowerStatus.ACTIVE, "last_maintenance": now},
        )

    async def cancel_task(self, task_id: int, performed_by: str | None = None) -> MaintenanceTask:
        """Cancel any open task."""
        return await self._transition(
            task_id,
            TaskStatus.CANCELLED,
            {},
            ActivityType.TASK_CANCELLED,
            lambda task, code: f"Task {task.id} for tower {code} cancelled",
            performed_by,
        )

    async def _create(self, data: dict[str, Any], actor: str) -> MaintenanceTask:
        tower = await self.store.get_tower(data["tower_id"])
        if tower is None:
            raise TowerNotFoundError(data["tower_id"])
        fields = {
            "priority": TaskPriority.MEDIUM,
            "due_date": datetime.now(UTC) + timedelta(days=self.due_days),
            **{k: v for k, v in data.items() if v is not None},
            "status": TaskStatus.PENDING,
        }
        fields.setdefault("title", f"Maintenance for {tower.tower_id}")
        fields.setdefault("description", f"Scheduled maintenance at {tower.location}")
        task = await self.store.create_task(fields)
        await self.store.create_activity_log(
            {
                "tower_id": tower.id,
                "activity_type": ActivityType.TASK_CREATED,
                "description": f"Maintenance task {task.id} created for tower {tower.tower_id}: {task.title}",
                "performed_by": actor,
            }
        )
        logger.info(f"Created task {task.id} ({task.priority}) for tower {tower.tower_id}")
        return task

    async def _transition(
        self,
        task_id: int,
        target: TaskStatus,
        changes: dict[str, Any],
        activity_type: ActivityType,
        describe: Callable[[MaintenanceTask, str], str],
        performed_by: str | None,
        tower_changes: dict[str, Any] | None = None,
    ) -> MaintenanceTask:
        actor = performed_by or SYSTEM_ACTOR
        async with self.lock, self.store.transaction():
            task = await self.store.get_task(task_id)
            if task is None:
                raise TaskNotFoundError(task_id)
            if task.status not in _TRANSITIONS[target]:
                raise TaskTransitionError(task_id, task.status, target)

            updated = await self.store.update_task(task_id, {**changes, "status": target})
            if updated is None:
                raise TaskNotFoundError(task_id)

            tower = await self.store.get_tower(task.tower_id)
            code = tower.tower_id if tower is not None else str(task.tower_id)
            if tower is not None and tower_changes:
                await self.store.update_tower(tower.id, tower_changes)
            await self.store.create_activity_log(
                {
                    "tower_id": task.tower_id,
                    "activity_type": activity_type,
                    "description": describe(updated, code),
                    "performed_by": actor,
                }
            )
        logger.info(f"Task {task_id} {task.status} -> {target} by {actor}")
        return updated
