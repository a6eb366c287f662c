"""MaintenanceReport model: immutable field report on a tower's condition."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from lighttower_api.models.base import Base, IntegerIDMixin


class MaintenanceReport(Base, IntegerIDMixin):
    """A maintenance report. Write-only (no updates or deletes)."""

    __tablename__ = "maintenance_reports"

    tower_id: Mapped[int] = mapped_column(Integer, ForeignKey("light_towers.id"), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    reported_by: Mapped[str] = mapped_column(String(200), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    reported_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("status IN ('active', 'warning', 'critical')", name="ck_report_status"),
        {"sqlite_autoincrement": True},
    )
