"""Pydantic v2 schemas for activity logs."""

from datetime import datetime

from lighttower_api.schemas.common import CamelModel


class ActivityLogResponse(CamelModel):
    """One audit trail entry."""

    id: int
    tower_id: int
    activity_type: str
    description: str
    performed_by: str
    performed_at: datetime
