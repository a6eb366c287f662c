"""Tower read operations: lookups by id or code, filtered listings, history."""

from loguru import logger

from lighttower_api.core.exceptions import TowerNotFoundError, ValidationError
from lighttower_api.lib.store import ActivityLog, BaseStore, LightTower, MaintenanceReport

TOWER_CODE_PREFIX = "LT-"


def parse_tower_pk(raw: str, message: str = "Invalid tower ID format") -> int:
    """Parse a numeric tower id from a path segment.

    The whole segment must be an integer; ``"12abc"`` is rejected.

    Args:
        raw: The path segment.
        message: Error message used when parsing fails.

    Returns:
        The integer id.

    Raises:
        ValidationError: If the segment is not an integer.
    """
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(message) from None


async def get_tower_by_ref(store: BaseStore, ref: str) -> LightTower:
    """Fetch a tower by numeric id or by ``LT-`` code.

    Args:
        store: The entity store.
        ref: A numeric id (``"3"``) or a tower code (``"LT-003"``).

    Returns:
        The tower.

    Raises:
        ValidationError: If ``ref`` is neither a tower code nor an integer.
        TowerNotFoundError: If no tower matches.
    """
    if ref.startswith(TOWER_CODE_PREFIX):
        tower = await store.get_tower_by_code(ref)
    else:
        tower = await store.get_tower(parse_tower_pk(ref))
    if tower is None:
        raise TowerNotFoundError(ref)
    return tower


async def list_towers(
    store: BaseStore,
    *,
    status: str | None = None,
    constituency: str | None = None,
    ward: str | None = None,
) -> list[LightTower]:
    """List towers in registration order with optional exact-match filters.

    Args:
        store: The entity store.
        status: Filter by operational status.
        constituency: Filter by constituency.
        ward: Filter by ward.

    Returns:
        Matching towers.
    """
    if status is not None and constituency is None and ward is None:
        towers = await store.list_towers_by_status(status)
    else:

        def matches(tower: LightTower) -> bool:
            return (
                (status is None or tower.status == status)
                and (constituency is None or tower.constituency == constituency)
                and (ward is None or tower.ward == ward)
            )

        towers = await store.list_towers(matches)
    logger.debug(f"Listed {len(towers)} towers (status={status}, constituency={constituency}, ward={ward})")
    return towers


async def list_reports_for_tower(store: BaseStore, tower_pk: int) -> list[MaintenanceReport]:
    """Return the maintenance reports filed against a tower (empty for unknown ids)."""
    return await store.list_reports_for_tower(tower_pk)


async def list_activity_for_tower(store: BaseStore, tower_pk: int) -> list[ActivityLog]:
    """Return the activity logs referencing a tower (empty for unknown ids)."""
    return await store.list_activity_for_tower(tower_pk)


async def recent_activity(store: BaseStore, limit: int) -> list[ActivityLog]:
    """Return the ``limit`` most recent activity logs, newest first."""
    return await store.recent_activity(limit)
