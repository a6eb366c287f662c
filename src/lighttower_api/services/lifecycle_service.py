"""Tower lifecycle engine: state changes paired with activity log entries.

Every externally visible change to a tower's operational state is written
together with exactly one activity log describing it:

* registration appends a ``registration`` log;
* an update that changes ``status`` appends a ``status_update`` log;
* an update that changes ``verification_status`` appends a ``verification`` log;
* a maintenance report sets the tower's status to the reported condition
  and appends a single ``maintenance`` log (never a ``status_update`` log).

Each read-decide-write sequence runs under one lock so concurrent requests
cannot lose an update or double-log a transition, and inside one store
transaction so a failed step leaves neither the change nor its log behind.
"""

import asyncio
from collections.abc import Callable
from typing import Any

from loguru import logger

from lighttower_api.core.exceptions import TowerNotFoundError
from lighttower_api.lib.store import (
    ActivityType,
    BaseStore,
    LightTower,
    MaintenanceReport,
    VerificationStatus,
)

ANONYMOUS = "Anonymous"

UpdateValidator = Callable[[LightTower, dict[str, Any]], None]


class TowerLifecycle:
    """Applies lifecycle rules on top of an entity store.

    Args:
        store: The backing entity store.
    """

    def __init__(self, store: BaseStore) -> None:
        self.store = store
        self._lock = asyncio.Lock()

    @property
    def lock(self) -> asyncio.Lock:
        """The lock guarding tower read-decide-write sequences."""
        return self._lock

    async def register_tower(self, data: dict[str, Any], registered_by: str | None = None) -> LightTower:
        """Create a tower in ``pending`` verification and log its registration.

        Args:
            data: Tower fields (snake_case). ``tower_id`` is optional.
            registered_by: Name of the registrant.

        Returns:
            The created tower.

        Raises:
            DuplicateTowerIdError: If an explicit tower code is already taken.
        """
        fields = {**data, "verification_status": VerificationStatus.PENDING}
        async with self._lock, self.store.transaction():
            tower = await self.store.create_tower(fields)
            await self.store.create_activity_log(
                {
                    "tower_id": tower.id,
                    "activity_type": ActivityType.REGISTRATION,
                    "description": f"New tower {tower.tower_id} registered in {tower.constituency}",
                    "performed_by": registered_by or ANONYMOUS,
                }
            )
        logger.info(f"Registered tower {tower.tower_id} (id={tower.id}) in {tower.constituency}/{tower.ward}")
        return tower

    async def update_tower(
        self,
        tower_pk: int,
        changes: dict[str, Any],
        updated_by: str | None = None,
        validate: UpdateValidator | None = None,
    ) -> LightTower:
        """Apply a partial update and log status and verification transitions.

        Args:
            tower_pk: Numeric tower id.
            changes: Fields to merge (snake_case). Only supplied fields change.
            updated_by: Name of the person making the change.
            validate: Called with the current tower and ``changes`` before
                anything is written; raise to reject the update. It sees the
                same state the update is applied to.

        Returns:
            The updated tower.

        Raises:
            TowerNotFoundError: If the tower does not exist.
        """
        performer = updated_by or ANONYMOUS
        async with self._lock, self.store.transaction():
            current = await self.store.get_tower(tower_pk)
            if current is None:
                raise TowerNotFoundError(tower_pk)
            if validate is not None:
                validate(current, changes)
            if not changes:
                return current

            updated = await self.store.update_tower(tower_pk, changes)
            if updated is None:
                raise TowerNotFoundError(tower_pk)

            transitions: list[str] = []
            new_status = changes.get("status")
            if new_status and new_status != current.status:
                await self.store.create_activity_log(
                    {
                        "tower_id": current.id,
                        "activity_type": ActivityType.STATUS_UPDATE,
                        "description": (
                            f"Tower {current.tower_id} status updated from {current.status} to {new_status}"
                        ),
                        "performed_by": performer,
                    }
                )
                transitions.append(f"status {current.status} -> {new_status}")

            new_verification = changes.get("verification_status")
            if new_verification and new_verification != current.verification_status:
                await self.store.create_activity_log(
                    {
                        "tower_id": current.id,
                        "activity_type": ActivityType.VERIFICATION,
                        "description": (
                            f"Tower {current.tower_id} verification changed from "
                            f"{current.verification_status} to {new_verification}"
                        ),
                        "performed_by": performer,
                    }
                )
                transitions.append(f"verification {current.verification_status} -> {new_verification}")

        for transition in transitions:
            logger.info(f"Tower {current.tower_id} {transition} by {performer}")
        return updated

    async def submit_report(self, data: dict[str, Any]) -> MaintenanceReport:
        """Persist a maintenance report and propagate its condition onto the tower.

        The tower's status is set to the reported status even when unchanged.

        Args:
            data: Report fields (snake_case) including ``tower_id`` (numeric),
                ``status`` and ``reported_by``.

        Returns:
            The created report.

        Raises:
            TowerNotFoundError: If the referenced tower does not exist. Nothing
                is written in that case.
        """
        tower_pk = data["tower_id"]
        async with self._lock, self.store.transaction():
            tower = await self.store.get_tower(tower_pk)
            if tower is None:
                raise TowerNotFoundError(tower_pk)

            report = await self.store.create_report(data)
            await self.store.update_tower(tower.id, {"status": report.status})
            await self.store.create_activity_log(
                {
                    "tower_id": tower.id,
                    "activity_type": ActivityType.MAINTENANCE,
                    "description": (
                        f"New maintenance report submitted for tower {tower.tower_id} - Status: {report.status}"
                    ),
                    "performed_by": report.reported_by,
                }
            )
        logger.info(f"Report {report.id} filed for tower {tower.tower_id}: {report.status} by {report.reported_by}")
        return report
