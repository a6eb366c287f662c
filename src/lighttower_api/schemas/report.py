"""Pydantic v2 schemas for maintenance reports."""

from datetime import datetime

from pydantic import Field

from lighttower_api.lib.store import TowerStatus
from lighttower_api.schemas.common import CamelModel


class ReportResponse(CamelModel):
    """A maintenance report as returned by the API."""

    id: int
    tower_id: int
    status: TowerStatus
    reported_by: str
    notes: str | None = None
    image_url: str | None = None
    reported_at: datetime


class ReportCreateRequest(CamelModel):
    """Request body for submitting a maintenance report.

    ``imageUrl`` is stored as an opaque string (typically a data URI).
    """

    tower_id: int
    status: TowerStatus
    reported_by: str = Field(min_length=1, max_length=200)
    notes: str | None = None
    image_url: str | None = None
