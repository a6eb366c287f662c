"""Maintenance task board endpoints."""

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from loguru import logger

from lighttower_api.core.dependencies import get_task_board
from lighttower_api.core.exceptions import LightTowerError
from lighttower_api.lib.store import TaskPriority, TaskStatus
from lighttower_api.schemas.task import (
    TaskActionRequest,
    TaskAssignRequest,
    TaskCompleteRequest,
    TaskCreateRequest,
    TaskGenerateRequest,
    TaskResponse,
)
from lighttower_api.services.task_service import TaskBoard

tasks_router = APIRouter(prefix="/tasks", tags=["tasks"])


@tasks_router.get("", response_model=list[TaskResponse])
async def list_all_tasks(
    task_status: TaskStatus | None = Query(None, alias="status", description="Filter by task status"),
    priority: TaskPriority | None = Query(None, description="Filter by priority"),
    board: TaskBoard = Depends(get_task_board),
) -> list[TaskResponse]:
    """List maintenance tasks in creation order."""
    try:
        tasks = await board.list_tasks(status=task_status, priority=priority)
    except Exception as e:
        logger.error(f"Unexpected error listing tasks: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch maintenance tasks",
        ) from e
    return [TaskResponse.model_validate(t) for t in tasks]


@tasks_router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task_endpoint(
    body: TaskCreateRequest,
    board: TaskBoard = Depends(get_task_board),
) -> TaskResponse:
    """Create a pending maintenance task for a tower."""
    try:
        task = await board.create_task(body.task_fields(), created_by=body.created_by)
    except LightTowerError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error creating task: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create maintenance task",
        ) from e
    return TaskResponse.model_validate(task)


@tasks_router.post("/generate", response_model=list[TaskResponse], status_code=status.HTTP_201_CREATED)
async def generate_tasks_endpoint(
    body: TaskGenerateRequest | None = Body(None),
    board: TaskBoard = Depends(get_task_board),
) -> list[TaskResponse]:
    """Open a task for every warning or critical tower that has none open."""
    try:
        tasks = await board.generate_tasks(created_by=body.created_by if body else None)
    except Exception as e:
        logger.error(f"Unexpected error generating tasks: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate maintenance tasks",
        ) from e
    return [TaskResponse.model_validate(t) for t in tasks]


@tasks_router.post("/{task_id}/assign", response_model=TaskResponse)
async def assign_task_endpoint(
    task_id: int,
    body: TaskAssignRequest,
    board: TaskBoard = Depends(get_task_board),
) -> TaskResponse:
    """Assign a pending or assigned task to a technician."""
    try:
        task = await board.assign_task(task_id, body.assigned_to, performed_by=body.performed_by)
    except LightTowerError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error assigning task {task_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to assign maintenance task",
        ) from e
    return TaskResponse.model_validate(task)


@tasks_router.post("/{task_id}/start", response_model=TaskResponse)
async def start_task_endpoint(
    task_id: int,
    body: TaskActionRequest | None = Body(None),
    board: TaskBoard = Depends(get_task_board),
) -> TaskResponse:
    """Mark an assigned task as in progress."""
    try:
        task = await board.start_task(task_id, performed_by=body.performed_by if body else None)
    except LightTowerError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error starting task {task_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to start maintenance task",
        ) from e
    return TaskResponse.model_validate(task)


@tasks_router.post("/{task_id}/complete", response_model=TaskResponse)
async def complete_task_endpoint(
    task_id: int,
    body: TaskCompleteRequest | None = Body(None),
    board: TaskBoard = Depends(get_task_board),
) -> TaskResponse:
    """Complete a task and return its tower to active service."""
    try:
        task = await board.complete_task(
            task_id,
            notes=body.notes if body else None,
            performed_by=body.performed_by if body else None,
        )
    except LightTowerError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error completing task {task_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to complete maintenance task",
        ) from e
    return TaskResponse.model_validate(task)


@tasks_router.post("/{task_id}/cancel", response_model=TaskResponse)
async def cancel_task_endpoint(
    task_id: int,
    body: TaskActionRequest | None = Body(None),
    board: TaskBoard = Depends(get_task_board),
) -> TaskResponse:
    """Cancel an open task."""
    try:
        task = await board.cancel_task(task_id, performed_by=body.performed_by if body else None)
    except LightTowerError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error cancelling task {task_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to cancel maintenance task",
        ) from e
    return TaskResponse.model_validate(task)
