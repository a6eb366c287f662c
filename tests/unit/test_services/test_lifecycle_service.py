"""Tests for the tower lifecycle engine: state changes and their audit trail."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from lighttower_api.core.exceptions import DuplicateTowerIdError, TowerNotFoundError, ValidationError
from lighttower_api.lib.store import ActivityType, MemoryStore, TowerStatus, VerificationStatus, seed_store
from lighttower_api.services.lifecycle_service import ANONYMOUS, TowerLifecycle

KARURA = {"location": "Limuru Road, Karura Forest gate", "constituency": "Westlands", "ward": "Karura"}


async def _logs_of_type(store, activity_type: str) -> list:
    return await store.list_activity_logs(lambda log: log.activity_type == activity_type)


class TestRegisterTower:
    """Registration creates a pending tower and exactly one registration log."""

    @pytest.mark.asyncio
    async def test_register_assigns_next_code(self, lifecycle: TowerLifecycle) -> None:
        tower = await lifecycle.register_tower(KARURA, registered_by="Alice")
        assert tower.id == 6
        assert tower.tower_id == "LT-006"
        assert tower.status == TowerStatus.ACTIVE
        assert tower.verification_status == VerificationStatus.PENDING

    @pytest.mark.asyncio
    async def test_register_logs_once(self, lifecycle: TowerLifecycle) -> None:
        tower = await lifecycle.register_tower(KARURA, registered_by="Alice")
        logs = await lifecycle.store.list_activity_for_tower(tower.id)
        assert len(logs) == 1
        assert logs[0].activity_type == ActivityType.REGISTRATION
        assert logs[0].description == "New tower LT-006 registered in Westlands"
        assert logs[0].performed_by == "Alice"

    @pytest.mark.asyncio
    async def test_register_anonymous(self, lifecycle: TowerLifecycle) -> None:
        tower = await lifecycle.register_tower(KARURA)
        logs = await lifecycle.store.list_activity_for_tower(tower.id)
        assert logs[0].performed_by == ANONYMOUS

    @pytest.mark.asyncio
    async def test_register_forces_pending_verification(self, lifecycle: TowerLifecycle) -> None:
        tower = await lifecycle.register_tower({**KARURA, "verification_status": "verified"})
        assert tower.verification_status == VerificationStatus.PENDING

    @pytest.mark.asyncio
    async def test_duplicate_code_writes_nothing(self, lifecycle: TowerLifecycle) -> None:
        before = len(await lifecycle.store.list_activity_logs())
        with pytest.raises(DuplicateTowerIdError):
            await lifecycle.register_tower({**KARURA, "tower_id": "LT-001"})
        assert len(await lifecycle.store.list_activity_logs()) == before


class TestUpdateTower:
    """Updates log status and verification transitions, never no-op changes."""

    @pytest.mark.asyncio
    async def test_status_change_logs_transition(self, lifecycle: TowerLifecycle) -> None:
        tower = await lifecycle.update_tower(1, {"status": "critical"}, updated_by="Bob")
        assert tower.status == TowerStatus.CRITICAL
        logs = await _logs_of_type(lifecycle.store, ActivityType.STATUS_UPDATE)
        latest = logs[-1]
        assert latest.tower_id == 1
        assert latest.description == "Tower LT-001 status updated from active to critical"
        assert latest.performed_by == "Bob"

    @pytest.mark.asyncio
    async def test_same_status_logs_nothing(self, lifecycle: TowerLifecycle) -> None:
        before = len(await lifecycle.store.list_activity_logs())
        await lifecycle.update_tower(1, {"status": "active", "notes": "checked"})
        assert len(await lifecycle.store.list_activity_logs()) == before

    @pytest.mark.asyncio
    async def test_notes_only_logs_nothing(self, lifecycle: TowerLifecycle) -> None:
        before = len(await lifecycle.store.list_activity_logs())
        tower = await lifecycle.update_tower(2, {"notes": "bulb ordered"})
        assert tower.notes == "bulb ordered"
        assert len(await lifecycle.store.list_activity_logs()) == before

    @pytest.mark.asyncio
    async def test_verification_change_logs_verification_only(self, lifecycle: TowerLifecycle) -> None:
        new = await lifecycle.register_tower(KARURA)
        before_status_logs = len(await _logs_of_type(lifecycle.store, ActivityType.STATUS_UPDATE))
        tower = await lifecycle.update_tower(new.id, {"verification_status": "verified"}, updated_by="Admin")
        assert tower.verification_status == VerificationStatus.VERIFIED
        verification_logs = await _logs_of_type(lifecycle.store, ActivityType.VERIFICATION)
        assert len(verification_logs) == 1
        assert verification_logs[0].description == "Tower LT-006 verification changed from pending to verified"
        assert len(await _logs_of_type(lifecycle.store, ActivityType.STATUS_UPDATE)) == before_status_logs

    @pytest.mark.asyncio
    async def test_status_and_verification_change_logs_both(self, lifecycle: TowerLifecycle) -> None:
        new = await lifecycle.register_tower(KARURA)
        before = len(await lifecycle.store.list_activity_logs())
        await lifecycle.update_tower(new.id, {"status": "warning", "verification_status": "rejected"})
        assert len(await lifecycle.store.list_activity_logs()) == before + 2

    @pytest.mark.asyncio
    async def test_unknown_tower_raises(self, lifecycle: TowerLifecycle) -> None:
        with pytest.raises(TowerNotFoundError):
            await lifecycle.update_tower(999, {"status": "warning"})

    @pytest.mark.asyncio
    async def test_empty_changes_return_current(self, lifecycle: TowerLifecycle) -> None:
        current = await lifecycle.store.get_tower(3)
        assert await lifecycle.update_tower(3, {}) == current


class TestSubmitReport:
    """Reports propagate their status onto the tower with one maintenance log."""

    @pytest.mark.asyncio
    async def test_report_sets_tower_status(self, lifecycle: TowerLifecycle) -> None:
        report = await lifecycle.submit_report({"tower_id": 1, "status": "warning", "reported_by": "Carol"})
        assert report.id == 1
        tower = await lifecycle.store.get_tower(1)
        assert tower is not None
        assert tower.status == TowerStatus.WARNING

    @pytest.mark.asyncio
    async def test_report_logs_maintenance_not_status_update(self, lifecycle: TowerLifecycle) -> None:
        status_before = len(await _logs_of_type(lifecycle.store, ActivityType.STATUS_UPDATE))
        await lifecycle.submit_report({"tower_id": 1, "status": "warning", "reported_by": "Carol"})
        maintenance = await _logs_of_type(lifecycle.store, ActivityType.MAINTENANCE)
        assert maintenance[-1].description == "New maintenance report submitted for tower LT-001 - Status: warning"
        assert maintenance[-1].performed_by == "Carol"
        assert len(await _logs_of_type(lifecycle.store, ActivityType.STATUS_UPDATE)) == status_before

    @pytest.mark.asyncio
    async def test_report_with_unchanged_status_still_logs(self, lifecycle: TowerLifecycle) -> None:
        before = len(await lifecycle.store.list_activity_logs())
        await lifecycle.submit_report({"tower_id": 3, "status": "critical", "reported_by": "Dan"})
        assert len(await lifecycle.store.list_activity_logs()) == before + 1

    @pytest.mark.asyncio
    async def test_report_for_missing_tower_writes_nothing(self, lifecycle: TowerLifecycle) -> None:
        logs_before = len(await lifecycle.store.list_activity_logs())
        with pytest.raises(TowerNotFoundError):
            await lifecycle.submit_report({"tower_id": 999, "status": "warning", "reported_by": "Eve"})
        assert await lifecycle.store.list_reports() == []
        assert len(await lifecycle.store.list_activity_logs()) == logs_before


class TestConcurrency:
    """Concurrent transitions are serialised by the engine lock."""

    @pytest.mark.asyncio
    async def test_concurrent_registrations_get_unique_codes(self, memory_store: MemoryStore) -> None:
        lifecycle = TowerLifecycle(memory_store)
        towers = await asyncio.gather(*(lifecycle.register_tower(KARURA) for _ in range(20)))
        codes = [t.tower_id for t in towers]
        assert len(set(codes)) == 20
        assert len(await memory_store.list_activity_logs()) == 20

    @pytest.mark.asyncio
    async def test_concurrent_identical_updates_log_once(self, memory_store: MemoryStore) -> None:
        lifecycle = TowerLifecycle(memory_store)
        tower = await lifecycle.register_tower(KARURA)
        await asyncio.gather(*(lifecycle.update_tower(tower.id, {"status": "critical"}) for _ in range(5)))
        logs = await _logs_of_type(memory_store, ActivityType.STATUS_UPDATE)
        assert len(logs) == 1


@pytest.fixture(params=["memory", "database"])
def any_store(request: pytest.FixtureRequest):
    """An empty store of each backend."""
    return request.getfixturevalue(f"{request.param}_store")


class TestAtomicity:
    """A failure part way through a lifecycle step leaves the store untouched."""

    @pytest.mark.asyncio
    async def test_failed_log_discards_report_and_status(self, any_store) -> None:
        await seed_store(any_store)
        lifecycle = TowerLifecycle(any_store)
        tower = await any_store.get_tower(1)
        logs_before = await any_store.list_activity_logs()

        with (
            patch.object(any_store, "create_activity_log", AsyncMock(side_effect=RuntimeError("disk full"))),
            pytest.raises(RuntimeError),
        ):
            await lifecycle.submit_report({"tower_id": 1, "status": "critical", "reported_by": "Carol"})

        assert await any_store.get_tower(1) == tower
        assert await any_store.list_reports() == []
        assert await any_store.list_activity_logs() == logs_before

    @pytest.mark.asyncio
    async def test_failed_log_discards_registration(self, any_store) -> None:
        await seed_store(any_store)
        lifecycle = TowerLifecycle(any_store)
        with (
            patch.object(any_store, "create_activity_log", AsyncMock(side_effect=RuntimeError("disk full"))),
            pytest.raises(RuntimeError),
        ):
            await lifecycle.register_tower(KARURA)
        assert len(await any_store.list_towers()) == 5

    @pytest.mark.asyncio
    async def test_failed_log_discards_status_change(self, any_store) -> None:
        await seed_store(any_store)
        lifecycle = TowerLifecycle(any_store)
        with (
            patch.object(any_store, "create_activity_log", AsyncMock(side_effect=RuntimeError("disk full"))),
            pytest.raises(RuntimeError),
        ):
            await lifecycle.update_tower(1, {"status": "critical"}, updated_by="Bob")
        tower = await any_store.get_tower(1)
        assert tower.status == TowerStatus.ACTIVE


class TestUpdateValidation:
    """A validation hook sees the tower as it is when the update is applied."""

    @pytest.mark.asyncio
    async def test_validate_receives_current_tower_and_changes(self, lifecycle: TowerLifecycle) -> None:
        seen = []
        await lifecycle.update_tower(
            1, {"ward": "Kangemi"}, validate=lambda current, changes: seen.append((current.ward, changes))
        )
        assert seen == [("Parklands/Highridge", {"ward": "Kangemi"})]

    @pytest.mark.asyncio
    async def test_rejected_update_writes_nothing(self, lifecycle: TowerLifecycle) -> None:
        def reject(current, changes) -> None:
            raise ValidationError(errors=[{"path": ["ward"], "message": f"Ward {changes['ward']} is not allowed"}])

        before = await lifecycle.store.get_tower(1)
        logs_before = await lifecycle.store.list_activity_logs()
        with pytest.raises(ValidationError):
            await lifecycle.update_tower(1, {"ward": "Kilimani", "status": "critical"}, validate=reject)
        assert await lifecycle.store.get_tower(1) == before
        assert await lifecycle.store.list_activity_logs() == logs_before
