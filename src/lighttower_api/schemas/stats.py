"""Pydantic v2 schemas for aggregate views."""

from pydantic import BaseModel, Field


class TowerStatsResponse(BaseModel):
    """Tower counts by operational status."""

    active: int
    warning: int
    critical: int
    total: int


class VerificationStatsResponse(BaseModel):
    """Tower counts by verification status."""

    pending: int
    verified: int
    rejected: int
    total: int


class ConstituencyStatsResponse(TowerStatsResponse):
    """Status counts for one constituency."""

    name: str


class FilterOptionsResponse(BaseModel):
    """Distinct locations present in stored towers, in first-seen order."""

    constituencies: list[str] = Field(default_factory=list)
    wards: list[str] = Field(default_factory=list)
