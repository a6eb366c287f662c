"""LightTower model: a registered municipal light tower.

``tower_id`` is the human-facing ``LT-###`` code printed on QR labels and is
unique across all towers.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from lighttower_api.models.base import Base, IntegerIDMixin


class LightTower(Base, IntegerIDMixin):
    """A light tower asset.

    Attributes:
        tower_id: Unique human-facing code (e.g. ``LT-001``).
        location: Free-text street location.
        constituency: Nairobi constituency name.
        ward: Ward within the constituency.
        latitude: Optional decimal latitude string.
        longitude: Optional decimal longitude string.
        status: Operational condition (active, warning, critical).
        last_maintenance: When maintenance last completed.
        verification_status: Admin review state (pending, verified, rejected).
        notes: Optional free text.
        created_at: When the tower was registered.
    """

    __tablename__ = "light_towers"

    tower_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    location: Mapped[str] = mapped_column(String(500), nullable=False)
    constituency: Mapped[str] = mapped_column(String(100), nullable=False)
    ward: Mapped[str] = mapped_column(String(100), nullable=False)
    latitude: Mapped[str | None] = mapped_column(String(32), nullable=True)
    longitude: Mapped[str | None] = mapped_column(String(32), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active", server_default="active")
    last_maintenance: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    verification_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        server_default="pending",
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("status IN ('active', 'warning', 'critical')", name="ck_light_tower_status"),
        CheckConstraint(
            "verification_status IN ('pending', 'verified', 'rejected')",
            name="ck_light_tower_verification_status",
        ),
        Index("ix_light_towers_status", "status"),
        Index("ix_light_towers_constituency_ward", "constituency", "ward"),
        {"sqlite_autoincrement": True},
    )
