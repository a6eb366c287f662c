"""Pydantic v2 schemas for maintenance tasks."""

from datetime import datetime

from pydantic import Field

from lighttower_api.lib.store import TaskPriority, TaskStatus
from lighttower_api.schemas.common import CamelModel


class TaskResponse(CamelModel):
    """A maintenance task as returned by the API."""

    id: int
    tower_id: int
    title: str
    description: str
    assigned_to: str | None = None
    status: TaskStatus
    priority: TaskPriority
    created_at: datetime
    due_date: datetime | None = None
    completed_at: datetime | None = None
    completion_notes: str | None = None


class TaskCreateRequest(CamelModel):
    """Request body for creating a maintenance task."""

    tower_id: int
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    created_by: str | None = Field(default=None, max_length=200)

    def task_fields(self) -> dict:
        """Return the fields stored on the task (snake_case)."""
        return self.model_dump(exclude={"created_by"}, exclude_none=True)


class TaskGenerateRequest(CamelModel):
    """Optional body for generating tasks from tower status."""

    created_by: str | None = Field(default=None, max_length=200)


class TaskAssignRequest(CamelModel):
    """Request body for assigning a task."""

    assigned_to: str = Field(min_length=1, max_length=200)
    performed_by: str | None = Field(default=None, max_length=200)


class TaskActionRequest(CamelModel):
    """Optional body for start and cancel actions."""

    performed_by: str | None = Field(default=None, max_length=200)


class TaskCompleteRequest(CamelModel):
    """Optional body for completing a task."""

    notes: str | None = None
    performed_by: str | None = Field(default=None, max_length=200)
