"""MaintenanceTask model: persisted work item on the admin task board."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from lighttower_api.models.base import Base, IntegerIDMixin


class MaintenanceTask(Base, IntegerIDMixin):
    """A maintenance task for one tower.

    Attributes:
        tower_id: FK to the tower being serviced.
        title: Short label (defaults to ``Maintenance for LT-###``).
        description: What needs doing.
        assigned_to: Crew or person responsible.
        status: Workflow state (pending, assigned, in_progress, completed, cancelled).
        priority: Urgency (low, medium, high, critical).
        created_at: When the task was created.
        due_date: When the task should be done.
        completed_at: When the task was completed.
        completion_notes: Notes recorded on completion.
    """

    __tablename__ = "maintenance_tasks"

    tower_id: Mapped[int] = mapped_column(Integer, ForeignKey("light_towers.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    assigned_to: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending", server_default="pending")
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="medium", server_default="medium")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completion_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'assigned', 'in_progress', 'completed', 'cancelled')",
            name="ck_maintenance_task_status",
        ),
        CheckConstraint("priority IN ('low', 'medium', 'high', 'critical')", name="ck_maintenance_task_priority"),
        Index("ix_maintenance_tasks_tower_id", "tower_id"),
        Index("ix_maintenance_tasks_status_priority", "status", "priority"),
        {"sqlite_autoincrement": True},
    )
