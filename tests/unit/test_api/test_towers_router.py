"""Unit tests for light tower API endpoints with mocked services."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from lighttower_api.api.v1.towers import towers_router
from lighttower_api.core.config import Settings, get_settings
from lighttower_api.core.dependencies import get_lifecycle, get_store
from lighttower_api.core.exceptions import ValidationError
from lighttower_api.lib.store import LightTower


def _tower(**overrides: object) -> LightTower:
    fields: dict = {
        "id": 1,
        "tower_id": "LT-001",
        "location": "Parklands Road",
        "constituency": "Westlands",
        "ward": "Parklands/Highridge",
        "created_at": datetime(2026, 1, 1, tzinfo=UTC),
    }
    fields.update(overrides)
    return LightTower(**fields)


@pytest.fixture
def mock_lifecycle() -> MagicMock:
    lifecycle = MagicMock()
    lifecycle.register_tower = AsyncMock(return_value=_tower(id=6, tower_id="LT-006"))
    lifecycle.update_tower = AsyncMock(return_value=_tower(status="critical"))
    lifecycle.store = MagicMock()
    return lifecycle


@pytest.fixture
async def router_client(settings: Settings, mock_lifecycle: MagicMock) -> AsyncGenerator[AsyncClient]:
    app = FastAPI()
    app.include_router(towers_router)
    app.dependency_overrides[get_store] = lambda: MagicMock()
    app.dependency_overrides[get_lifecycle] = lambda: mock_lifecycle
    app.dependency_overrides[get_settings] = lambda: settings
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestListTowers:
    async def test_passes_filters(self, router_client: AsyncClient) -> None:
        with patch(
            "lighttower_api.api.v1.towers.list_towers",
            new_callable=AsyncMock,
            return_value=[_tower()],
        ) as mock_list:
            resp = await router_client.get("/towers", params={"status": "active", "ward": "Parklands/Highridge"})
        assert resp.status_code == 200
        assert resp.json()[0]["towerId"] == "LT-001"
        kwargs = mock_list.call_args.kwargs
        assert kwargs["status"] == "active"
        assert kwargs["ward"] == "Parklands/Highridge"
        assert kwargs["constituency"] is None

    async def test_unexpected_failure_returns_500(self, router_client: AsyncClient) -> None:
        with patch(
            "lighttower_api.api.v1.towers.list_towers",
            new_callable=AsyncMock,
            side_effect=RuntimeError("disk gone"),
        ):
            resp = await router_client.get("/towers")
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to fetch light towers"


class TestRegisterTower:
    async def test_forwards_fields_and_registrant(
        self, router_client: AsyncClient, mock_lifecycle: MagicMock
    ) -> None:
        resp = await router_client.post(
            "/towers",
            json={
                "location": "Karura Forest gate",
                "constituency": "Westlands",
                "ward": "Karura",
                "registeredBy": "Alice",
            },
        )
        assert resp.status_code == 201
        assert resp.json()["towerId"] == "LT-006"
        args, kwargs = mock_lifecycle.register_tower.call_args
        assert args[0]["ward"] == "Karura"
        assert "registered_by" not in args[0]
        assert kwargs["registered_by"] == "Alice"

    async def test_unexpected_failure_returns_500(
        self, router_client: AsyncClient, mock_lifecycle: MagicMock
    ) -> None:
        mock_lifecycle.register_tower.side_effect = RuntimeError("boom")
        resp = await router_client.post(
            "/towers",
            json={"location": "Karura Forest gate", "constituency": "Westlands", "ward": "Karura"},
        )
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to create light tower"


class TestUpdateTower:
    async def test_forwards_changes(self, router_client: AsyncClient, mock_lifecycle: MagicMock) -> None:
        resp = await router_client.patch("/towers/1", json={"status": "critical", "updatedBy": "Bob"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "critical"
        mock_lifecycle.update_tower.assert_awaited_once_with(
            1, {"status": "critical"}, updated_by="Bob", validate=None
        )

    async def test_location_change_validated_against_current_tower(
        self, router_client: AsyncClient, mock_lifecycle: MagicMock
    ) -> None:
        resp = await router_client.patch("/towers/1", json={"ward": "Kangemi"})
        assert resp.status_code == 200
        validate = mock_lifecycle.update_tower.await_args.kwargs["validate"]

        validate(_tower(), {"ward": "Kangemi"})
        with pytest.raises(ValidationError) as exc_info:
            validate(_tower(), {"ward": "Kilimani"})
        assert exc_info.value.errors[0]["message"] == "Ward Kilimani is not in constituency Westlands"

    async def test_location_check_skipped_when_not_enforced(
        self, router_client: AsyncClient, mock_lifecycle: MagicMock, settings: Settings
    ) -> None:
        settings.enforce_reference_locations = False
        await router_client.patch("/towers/1", json={"ward": "Kilimani"})
        validate = mock_lifecycle.update_tower.await_args.kwargs["validate"]
        validate(_tower(), {"ward": "Kilimani"})


class TestTowerQr:
    async def test_uses_default_size(self, router_client: AsyncClient, settings: Settings) -> None:
        with patch(
            "lighttower_api.api.v1.towers.get_tower_by_ref",
            new_callable=AsyncMock,
            return_value=_tower(),
        ):
            resp = await router_client.get("/towers/LT-001/qr")
        assert resp.status_code == 200
        data = resp.json()
        assert data["towerId"] == "LT-001"
        assert f"size={settings.qr_default_size}x{settings.qr_default_size}" in data["imageUrl"]

    async def test_size_out_of_range(self, router_client: AsyncClient) -> None:
        resp = await router_client.get("/towers/LT-001/qr", params={"size": 10})
        assert resp.status_code == 422
