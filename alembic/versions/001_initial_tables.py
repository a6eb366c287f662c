"""Initial migration: users, light towers, reports, activity logs and tasks.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "light_towers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("tower_id", sa.String(50), nullable=False, unique=True),
        sa.Column("location", sa.String(500), nullable=False),
        sa.Column("constituency", sa.String(100), nullable=False),
        sa.Column("ward", sa.String(100), nullable=False),
        sa.Column("latitude", sa.String(32), nullable=True),
        sa.Column("longitude", sa.String(32), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("last_maintenance", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verification_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("status IN ('active', 'warning', 'critical')", name="ck_light_tower_status"),
        sa.CheckConstraint(
            "verification_status IN ('pending', 'verified', 'rejected')",
            name="ck_light_tower_verification_status",
        ),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_light_towers_status", "light_towers", ["status"])
    op.create_index("ix_light_towers_constituency_ward", "light_towers", ["constituency", "ward"])

    op.create_table(
        "maintenance_reports",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("tower_id", sa.Integer, sa.ForeignKey("light_towers.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("reported_by", sa.String(200), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("image_url", sa.Text, nullable=True),
        sa.Column("reported_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("status IN ('active', 'warning', 'critical')", name="ck_report_status"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_maintenance_reports_tower_id", "maintenance_reports", ["tower_id"])

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("tower_id", sa.Integer, nullable=False),
        sa.Column("activity_type", sa.String(50), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("performed_by", sa.String(200), nullable=False),
        sa.Column("performed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_activity_logs_tower_id", "activity_logs", ["tower_id"])
    op.create_index("ix_activity_logs_activity_type", "activity_logs", ["activity_type"])
    op.create_index("ix_activity_logs_performed_at", "activity_logs", ["performed_at"])

    op.create_table(
        "maintenance_tasks",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("tower_id", sa.Integer, sa.ForeignKey("light_towers.id"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("assigned_to", sa.String(200), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("priority", sa.String(20), nullable=False, server_default="medium"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completion_notes", sa.Text, nullable=True),
        sa.CheckConstraint(
            "status IN ('pending', 'assigned', 'in_progress', 'completed', 'cancelled')",
            name="ck_maintenance_task_status",
        ),
        sa.CheckConstraint("priority IN ('low', 'medium', 'high', 'critical')", name="ck_maintenance_task_priority"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_maintenance_tasks_tower_id", "maintenance_tasks", ["tower_id"])
    op.create_index("ix_maintenance_tasks_status_priority", "maintenance_tasks", ["status", "priority"])


def downgrade() -> None:
    op.drop_table("maintenance_tasks")
    op.drop_table("activity_logs")
    op.drop_table("maintenance_reports")
    op.drop_table("light_towers")
    op.drop_table("users")
