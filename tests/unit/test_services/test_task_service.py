"""Tests for the maintenance task board."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest

from lighttower_api.core.exceptions import TaskNotFoundError, TaskTransitionError, TowerNotFoundError
from lighttower_api.lib.store import ActivityType, TaskPriority, TaskStatus, TowerStatus
from lighttower_api.services.task_service import SYSTEM_ACTOR, TaskBoard


class TestCreateTask:
    @pytest.mark.asyncio
    async def test_defaults(self, task_board: TaskBoard) -> None:
        task = await task_board.create_task({"tower_id": 2})
        assert task.status == TaskStatus.PENDING
        assert task.priority == TaskPriority.MEDIUM
        assert task.title == "Maintenance for LT-002"
        assert task.due_date is not None
        expected_due = datetime.now(UTC) + timedelta(days=7)
        assert abs((task.due_date - expected_due).total_seconds()) < 60

    @pytest.mark.asyncio
    async def test_explicit_fields(self, task_board: TaskBoard) -> None:
        task = await task_board.create_task(
            {"tower_id": 3, "title": "Rewire panel", "description": "Electrical fault", "priority": "critical"},
            created_by="Admin",
        )
        assert task.title == "Rewire panel"
        assert task.priority == TaskPriority.CRITICAL

    @pytest.mark.asyncio
    async def test_logs_task_created(self, task_board: TaskBoard) -> None:
        task = await task_board.create_task({"tower_id": 2}, created_by="Admin")
        logs = await task_board.store.list_activity_logs(lambda log: log.activity_type == ActivityType.TASK_CREATED)
        assert len(logs) == 1
        assert logs[0].tower_id == 2
        assert logs[0].performed_by == "Admin"
        assert str(task.id) in logs[0].description

    @pytest.mark.asyncio
    async def test_unknown_tower(self, task_board: TaskBoard) -> None:
        with pytest.raises(TowerNotFoundError):
            await task_board.create_task({"tower_id": 999})
        assert await task_board.list_tasks() == []


class TestGenerateTasks:
    @pytest.mark.asyncio
    async def test_one_task_per_warning_or_critical_tower(self, task_board: TaskBoard) -> None:
        tasks = await task_board.generate_tasks()
        assert [(t.tower_id, t.priority) for t in tasks] == [(2, TaskPriority.MEDIUM), (3, TaskPriority.CRITICAL)]
        assert tasks[0].description == "Inspection required at Madaraka Estate, main junction"
        assert tasks[1].description == "Critical repair needed at Olympic Estate, main road"

    @pytest.mark.asyncio
    async def test_never_duplicates_open_tasks(self, task_board: TaskBoard) -> None:
        await task_board.generate_tasks()
        assert await task_board.generate_tasks() == []
        assert len(await task_board.list_tasks()) == 2

    @pytest.mark.asyncio
    async def test_closed_task_allows_new_one(self, task_board: TaskBoard) -> None:
        first, _ = await task_board.generate_tasks()
        await task_board.cancel_task(first.id)
        again = await task_board.generate_tasks()
        assert [t.tower_id for t in again] == [first.tower_id]

    @pytest.mark.asyncio
    async def test_system_actor(self, task_board: TaskBoard) -> None:
        await task_board.generate_tasks()
        logs = await task_board.store.list_activity_logs(lambda log: log.activity_type == ActivityType.TASK_CREATED)
        assert {log.performed_by for log in logs} == {SYSTEM_ACTOR}


class TestTransitions:
    @pytest.mark.asyncio
    async def test_full_workflow(self, task_board: TaskBoard) -> None:
        task = await task_board.create_task({"tower_id": 3})
        task = await task_board.assign_task(task.id, "Crew A", performed_by="Admin")
        assert (task.status, task.assigned_to) == (TaskStatus.ASSIGNED, "Crew A")
        task = await task_board.start_task(task.id, performed_by="Crew A")
        assert task.status == TaskStatus.IN_PROGRESS
        task = await task_board.complete_task(task.id, notes="Replaced fuse", performed_by="Crew A")
        assert task.status == TaskStatus.COMPLETED
        assert task.completed_at is not None
        assert task.completion_notes == "Replaced fuse"

    @pytest.mark.asyncio
    async def test_complete_restores_tower(self, task_board: TaskBoard) -> None:
        task = await task_board.create_task({"tower_id": 3})
        await task_board.assign_task(task.id, "Crew A")
        completed = await task_board.complete_task(task.id)
        tower = await task_board.store.get_tower(3)
        assert tower is not None
        assert tower.status == TowerStatus.ACTIVE
        assert tower.last_maintenance == completed.completed_at

    @pytest.mark.asyncio
    async def test_each_transition_logs_once(self, task_board: TaskBoard) -> None:
        task = await task_board.create_task({"tower_id": 2})
        await task_board.assign_task(task.id, "Crew B")
        await task_board.start_task(task.id)
        await task_board.complete_task(task.id)
        logs = await task_board.store.list_activity_for_tower(2)
        task_types = [log.activity_type for log in logs if log.activity_type.startswith("task_")]
        assert task_types == [
            ActivityType.TASK_CREATED,
            ActivityType.TASK_ASSIGNED,
            ActivityType.TASK_STARTED,
            ActivityType.TASK_COMPLETED,
        ]

    @pytest.mark.asyncio
    async def test_reassign_allowed(self, task_board: TaskBoard) -> None:
        task = await task_board.create_task({"tower_id": 2})
        await task_board.assign_task(task.id, "Crew A")
        task = await task_board.assign_task(task.id, "Crew B")
        assert task.assigned_to == "Crew B"

    @pytest.mark.asyncio
    async def test_start_requires_assignment(self, task_board: TaskBoard) -> None:
        task = await task_board.create_task({"tower_id": 2})
        with pytest.raises(TaskTransitionError):
            await task_board.start_task(task.id)

    @pytest.mark.asyncio
    async def test_complete_from_pending_rejected(self, task_board: TaskBoard) -> None:
        task = await task_board.create_task({"tower_id": 2})
        with pytest.raises(TaskTransitionError):
            await task_board.complete_task(task.id)
        tower = await task_board.store.get_tower(2)
        assert tower is not None
        assert tower.status == TowerStatus.WARNING

    @pytest.mark.asyncio
    async def test_closed_tasks_are_final(self, task_board: TaskBoard) -> None:
        task = await task_board.create_task({"tower_id": 2})
        await task_board.cancel_task(task.id)
        with pytest.raises(TaskTransitionError):
            await task_board.cancel_task(task.id)
        with pytest.raises(TaskTransitionError):
            await task_board.assign_task(task.id, "Crew A")

    @pytest.mark.asyncio
    async def test_failed_transition_writes_nothing(self, task_board: TaskBoard) -> None:
        task = await task_board.create_task({"tower_id": 2})
        before = len(await task_board.store.list_activity_logs())
        with pytest.raises(TaskTransitionError):
            await task_board.start_task(task.id)
        assert len(await task_board.store.list_activity_logs()) == before

    @pytest.mark.asyncio
    async def test_unknown_task(self, task_board: TaskBoard) -> None:
        with pytest.raises(TaskNotFoundError):
            await task_board.assign_task(404, "Crew A")


class TestListTasks:
    @pytest.mark.asyncio
    async def test_filters(self, task_board: TaskBoard) -> None:
        await task_board.generate_tasks()
        critical = await task_board.list_tasks(priority="critical")
        assert [t.tower_id for t in critical] == [3]
        pending = await task_board.list_tasks(status="pending")
        assert len(pending) == 2
        assert await task_board.list_tasks(status="completed") == []


class TestTaskAtomicity:
    @pytest.mark.asyncio
    async def test_failed_log_leaves_task_and_tower_unchanged(self, task_board: TaskBoard) -> None:
        task = await task_board.assign_task((await task_board.create_task({"tower_id": 3})).id, "Crew A")
        tower = await task_board.store.get_tower(3)

        with (
            patch.object(task_board.store, "create_activity_log", AsyncMock(side_effect=RuntimeError("disk full"))),
            pytest.raises(RuntimeError),
        ):
            await task_board.complete_task(task.id)

        assert await task_board.store.get_task(task.id) == task
        assert await task_board.store.get_tower(3) == tower

    @pytest.mark.asyncio
    async def test_failed_generation_creates_no_tasks(self, task_board: TaskBoard) -> None:
        with (
            patch.object(task_board.store, "create_activity_log", AsyncMock(side_effect=RuntimeError("disk full"))),
            pytest.raises(RuntimeError),
        ):
            await task_board.generate_tasks()
        assert await task_board.list_tasks() == []
