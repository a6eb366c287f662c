"""Pydantic v2 schemas for the static location reference list."""

from pydantic import BaseModel


class ConstituencyListResponse(BaseModel):
    """All known constituencies."""

    constituencies: list[str]


class WardListResponse(BaseModel):
    """Wards of one constituency."""

    constituency: str
    wards: list[str]
