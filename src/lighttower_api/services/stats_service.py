"""Aggregate views over stored towers.

All projections are recomputed from a full scan on every call; nothing is
cached, so results always reflect the latest writes.
"""

from loguru import logger

from lighttower_api.lib.store import BaseStore, TowerStatus, VerificationStatus


async def tower_stats(store: BaseStore) -> dict[str, int]:
    """Count towers by operational status.

    Returns:
        ``{"active", "warning", "critical", "total"}`` counts.
    """
    towers = await store.list_towers()
    counts = {status.value: 0 for status in TowerStatus}
    for tower in towers:
        if tower.status in counts:
            counts[tower.status] += 1
    counts["total"] = len(towers)
    return counts


async def verification_stats(store: BaseStore) -> dict[str, int]:
    """Count towers by verification status.

    Returns:
        ``{"pending", "verified", "rejected", "total"}`` counts.
    """
    towers = await store.list_towers()
    counts = {status.value: 0 for status in VerificationStatus}
    for tower in towers:
        if tower.verification_status in counts:
            counts[tower.verification_status] += 1
    counts["total"] = len(towers)
    return counts


async def constituency_breakdown(store: BaseStore) -> list[dict[str, int | str]]:
    """Status counts per constituency, in first-seen order.

    Returns:
        One ``{"name", "active", "warning", "critical", "total"}`` row per
        constituency that has at least one tower.
    """
    rows: dict[str, dict[str, int | str]] = {}
    for tower in await store.list_towers():
        row = rows.get(tower.constituency)
        if row is None:
            row = {"name": tower.constituency, **{s.value: 0 for s in TowerStatus}, "total": 0}
            rows[tower.constituency] = row
        if tower.status in TowerStatus:
            row[tower.status] = int(row[tower.status]) + 1
        row["total"] = int(row["total"]) + 1
    logger.debug(f"Computed status breakdown for {len(rows)} constituencies")
    return list(rows.values())


async def filter_options(store: BaseStore) -> dict[str, list[str]]:
    """Distinct constituencies and wards of stored towers, in first-seen order.

    Derived from towers only, not from the static reference list.

    Returns:
        ``{"constituencies": [...], "wards": [...]}``.
    """
    towers = await store.list_towers()
    constituencies = list(dict.fromkeys(t.constituency for t in towers))
    wards = list(dict.fromkeys(t.ward for t in towers))
    return {"constituencies": constituencies, "wards": wards}
