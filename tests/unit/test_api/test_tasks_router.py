"""Unit tests for maintenance task endpoints with a mocked task board."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from lighttower_api.api.v1.tasks import tasks_router
from lighttower_api.core.dependencies import get_task_board
from lighttower_api.core.exceptions import TaskNotFoundError

_ACTIONS = [
    ("assign", "assign_task", {"assignedTo": "Tech Team A"}, "Failed to assign maintenance task"),
    ("start", "start_task", None, "Failed to start maintenance task"),
    ("complete", "complete_task", {"notes": "Replaced fuse"}, "Failed to complete maintenance task"),
    ("cancel", "cancel_task", None, "Failed to cancel maintenance task"),
]


@pytest.fixture
def mock_board() -> MagicMock:
    return MagicMock()


def _app(board: MagicMock) -> FastAPI:
    app = FastAPI()
    app.include_router(tasks_router)
    app.dependency_overrides[get_task_board] = lambda: board
    return app


@pytest.fixture
async def router_client(mock_board: MagicMock) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=_app(mock_board), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestTaskActions:
    @pytest.mark.parametrize(("action", "method", "body", "detail"), _ACTIONS)
    async def test_unexpected_failure_returns_500(
        self,
        router_client: AsyncClient,
        mock_board: MagicMock,
        action: str,
        method: str,
        body: dict | None,
        detail: str,
    ) -> None:
        setattr(mock_board, method, AsyncMock(side_effect=RuntimeError("database is locked")))
        resp = await router_client.post(f"/tasks/7/{action}", json=body)
        assert resp.status_code == 500
        assert resp.json() == {"detail": detail}

    @pytest.mark.parametrize(("action", "method", "body"), [a[:3] for a in _ACTIONS])
    async def test_domain_errors_propagate(
        self, mock_board: MagicMock, action: str, method: str, body: dict | None
    ) -> None:
        setattr(mock_board, method, AsyncMock(side_effect=TaskNotFoundError(7)))
        transport = ASGITransport(app=_app(mock_board))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            with pytest.raises(TaskNotFoundError):
                await ac.post(f"/tasks/7/{action}", json=body)
