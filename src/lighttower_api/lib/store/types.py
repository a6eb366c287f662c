"""Entity store record types.

Plain dataclasses shared by every store backend. Records reference each
other by integer id only; nothing holds another record.
"""

import enum
from dataclasses import dataclass
from datetime import datetime


class TowerStatus(enum.StrEnum):
    """Operational condition of a light tower."""

    ACTIVE = "active"
    WARNING = "warning"
    CRITICAL = "critical"


class VerificationStatus(enum.StrEnum):
    """Admin review state of a registered tower."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class ActivityType(enum.StrEnum):
    """Known activity log types. Stored as plain strings, so the set is open."""

    REGISTRATION = "registration"
    MAINTENANCE = "maintenance"
    STATUS_UPDATE = "status_update"
    VERIFICATION = "verification"
    TASK_CREATED = "task_created"
    TASK_ASSIGNED = "task_assigned"
    TASK_STARTED = "task_started"
    TASK_COMPLETED = "task_completed"
    TASK_CANCELLED = "task_cancelled"


class TaskStatus(enum.StrEnum):
    """Maintenance task workflow state."""

    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


OPEN_TASK_STATUSES: frozenset[str] = frozenset({TaskStatus.PENDING, TaskStatus.ASSIGNED, TaskStatus.IN_PROGRESS})


class TaskPriority(enum.StrEnum):
    """Maintenance task urgency."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class User:
    """An account. ``password`` holds a bcrypt hash."""

    id: int
    username: str
    password: str
    name: str
    role: str = "user"


@dataclass
class LightTower:
    """A registered light tower."""

    id: int
    tower_id: str
    location: str
    constituency: str
    ward: str
    created_at: datetime
    latitude: str | None = None
    longitude: str | None = None
    status: str = TowerStatus.ACTIVE
    last_maintenance: datetime | None = None
    verification_status: str = VerificationStatus.PENDING
    notes: str | None = None


@dataclass
class MaintenanceReport:
    """A field report on a tower's condition. Immutable once stored."""

    id: int
    tower_id: int
    status: str
    reported_by: str
    reported_at: datetime
    notes: str | None = None
    image_url: str | None = None


@dataclass
class ActivityLog:
    """One append-only audit trail entry."""

    id: int
    tower_id: int
    activity_type: str
    description: str
    performed_by: str
    performed_at: datetime


@dataclass
class MaintenanceTask:
    """A persisted maintenance work item for one tower."""

    id: int
    tower_id: int
    title: str
    description: str
    created_at: datetime
    status: str = TaskStatus.PENDING
    priority: str = TaskPriority.MEDIUM
    assigned_to: str | None = None
    due_date: datetime | None = None
    completed_at: datetime | None = None
    completion_notes: str | None = None


# Fields set by the store on creation; update() never overwrites them.
IMMUTABLE_FIELDS: dict[type, frozenset[str]] = {
    User: frozenset({"id"}),
    LightTower: frozenset({"id", "created_at"}),
    MaintenanceReport: frozenset({"id", "reported_at"}),
    ActivityLog: frozenset({"id", "performed_at"}),
    MaintenanceTask: frozenset({"id", "created_at"}),
}


def format_tower_code(tower_pk: int) -> str:
    """Build the default human-facing tower code for a tower id.

    >>> format_tower_code(7)
    'LT-007'
    """
    return f"LT-{tower_pk:03d}"
