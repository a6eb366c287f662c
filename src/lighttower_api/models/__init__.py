"""ORM model registry: import all models so Alembic autogenerate discovers them."""

from lighttower_api.models.activity_log import ActivityLog
from lighttower_api.models.light_tower import LightTower
from lighttower_api.models.maintenance_report import MaintenanceReport
from lighttower_api.models.maintenance_task import MaintenanceTask
from lighttower_api.models.user import User

__all__ = [
    "ActivityLog",
    "LightTower",
    "MaintenanceReport",
    "MaintenanceTask",
    "User",
]
