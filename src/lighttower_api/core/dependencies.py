"""FastAPI dependency injection for the entity store and domain services.

The store, lifecycle engine and task board are built once in the
application lifespan and kept on ``app.state``; these dependencies hand
them to route handlers so tests can swap them via
``app.dependency_overrides``.
"""

from fastapi import Request

from lighttower_api.lib.store import BaseStore
from lighttower_api.services.lifecycle_service import TowerLifecycle
from lighttower_api.services.task_service import TaskBoard


def get_store(request: Request) -> BaseStore:
    """Return the application's entity store."""
    return request.app.state.store


def get_lifecycle(request: Request) -> TowerLifecycle:
    """Return the application's tower lifecycle engine."""
    return request.app.state.lifecycle


def get_task_board(request: Request) -> TaskBoard:
    """Return the application's maintenance task board."""
    return request.app.state.task_board
