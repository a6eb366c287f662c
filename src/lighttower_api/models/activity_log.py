"""ActivityLog model: append-only audit trail of tower lifecycle events."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from lighttower_api.models.base import Base, IntegerIDMixin


class ActivityLog(Base, IntegerIDMixin):
    """Immutable record of a tower event. Write-only (no updates or deletes).

    ``tower_id`` is deliberately not a foreign key; logs may outlive or
    predate the tower they describe.
    """

    __tablename__ = "activity_logs"
    __table_args__ = {"sqlite_autoincrement": True}

    tower_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    activity_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    performed_by: Mapped[str] = mapped_column(String(200), nullable=False)
    performed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
