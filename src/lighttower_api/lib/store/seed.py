"""Sample data loaded into an empty store on startup.

One admin user, five towers spread over distinct constituencies and wards,
and four activity logs describing their history.
"""

from typing import Any

from loguru import logger

from lighttower_api.core.security import hash_password
from lighttower_api.lib.store.base import BaseStore

SEED_ADMIN: dict[str, Any] = {
    "username": "admin",
    "password": "admin123",
    "name": "Admin User",
    "role": "admin",
}

SEED_TOWERS: list[dict[str, Any]] = [
    {
        "tower_id": "LT-001",
        "location": "Parklands Road, near Westlands Mall",
        "constituency": "Westlands",
        "ward": "Parklands/Highridge",
        "latitude": "-1.2644",
        "longitude": "36.8066",
        "status": "active",
        "verification_status": "verified",
        "notes": "Near Westlands Mall entrance",
    },
    {
        "tower_id": "LT-002",
        "location": "Madaraka Estate, main junction",
        "constituency": "Langata",
        "ward": "South C",
        "latitude": "-1.3075",
        "longitude": "36.8219",
        "status": "warning",
        "verification_status": "verified",
        "notes": "Street light on main junction. Bulb is flickering and needs replacement.",
    },
    {
        "tower_id": "LT-003",
        "location": "Olympic Estate, main road",
        "constituency": "Kibra",
        "ward": "Sarangombe",
        "latitude": "-1.3106",
        "longitude": "36.7809",
        "status": "critical",
        "verification_status": "verified",
        "notes": "No working lights, electrical issue",
    },
    {
        "tower_id": "LT-004",
        "location": "Mirema Drive, near TRM Mall",
        "constituency": "Roysambu",
        "ward": "Roysambu",
        "latitude": "-1.2188",
        "longitude": "36.8871",
        "status": "active",
        "verification_status": "verified",
        "notes": "Recently installed",
    },
    {
        "tower_id": "LT-005",
        "location": "Kawangware, Congo junction",
        "constituency": "Dagoretti North",
        "ward": "Kawangware",
        "latitude": "-1.2856",
        "longitude": "36.7488",
        "status": "active",
        "verification_status": "verified",
        "notes": "Working properly",
    },
]

# tower_id here is the tower's numeric id (position in SEED_TOWERS, 1-based).
SEED_ACTIVITY: list[dict[str, Any]] = [
    {
        "tower_id": 2,
        "activity_type": "status_update",
        "description": "Tower LT-002 reported as needing maintenance",
        "performed_by": "John Doe",
    },
    {
        "tower_id": 3,
        "activity_type": "status_update",
        "description": "Tower LT-003 marked as critical - no working lights",
        "performed_by": "Jane Smith",
    },
    {
        "tower_id": 5,
        "activity_type": "maintenance",
        "description": "Tower LT-005 maintenance completed",
        "performed_by": "Maintenance Team",
    },
    {
        "tower_id": 4,
        "activity_type": "registration",
        "description": "New tower LT-004 registered in Roysambu",
        "performed_by": "Community Admin",
    },
]


async def is_empty(store: BaseStore) -> bool:
    """Return True when the store holds no users and no towers."""
    return not await store.list_users() and not await store.list_towers()


async def seed_store(store: BaseStore) -> bool:
    """Load the sample data set into an empty store.

    Writes go straight to the store in one transaction, bypassing the
    lifecycle engine, so the seeded history is exactly the four logs above.

    Args:
        store: The store to populate.

    Returns:
        True if data was loaded, False if the store already had data.
    """
    if not await is_empty(store):
        logger.info(f"Store ({store.backend_name}) already populated, skipping seed")
        return False

    async with store.transaction():
        await store.create_user({**SEED_ADMIN, "password": hash_password(SEED_ADMIN["password"])})
        for tower in SEED_TOWERS:
            await store.create_tower(tower)
        for log in SEED_ACTIVITY:
            await store.create_activity_log(log)

    logger.info(
        f"Seeded {store.backend_name} store: 1 user, {len(SEED_TOWERS)} towers, {len(SEED_ACTIVITY)} activity logs"
    )
    return True
