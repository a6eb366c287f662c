"""Pydantic v2 schemas for light tower operations."""

from datetime import datetime

from pydantic import Field, field_validator

from lighttower_api.lib.store import TowerStatus, VerificationStatus
from lighttower_api.schemas.common import CamelModel

_REQUIRED_TOWER_FIELDS = frozenset({"location", "constituency", "ward", "status", "verification_status"})


def _check_coordinate(value: str | None, bound: float) -> str | None:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except ValueError:
        msg = "must be a decimal number"
        raise ValueError(msg) from None
    if not -bound <= number <= bound:
        msg = f"must be between -{bound:g} and {bound:g}"
        raise ValueError(msg)
    return value


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TowerResponse(CamelModel):
    """A light tower as returned by the API."""

    id: int
    tower_id: str
    location: str
    constituency: str
    ward: str
    latitude: str | None = None
    longitude: str | None = None
    status: TowerStatus
    last_maintenance: datetime | None = None
    verification_status: VerificationStatus
    notes: str | None = None
    created_at: datetime


class QRCodeResponse(CamelModel):
    """Payload for printing a tower's QR label."""

    tower_id: str
    data: str
    image_url: str


# ---------------------------------------------------------------------------
# Write schemas
# ---------------------------------------------------------------------------


class TowerCreateRequest(CamelModel):
    """Request body for registering a tower.

    ``towerId`` may be omitted, in which case the code ``LT-###`` is
    derived from the assigned numeric id. ``registeredBy`` is recorded on
    the registration activity log and is not stored on the tower.
    """

    tower_id: str | None = Field(default=None, min_length=1, max_length=50)
    location: str = Field(min_length=1, max_length=500)
    constituency: str = Field(min_length=1, max_length=100)
    ward: str = Field(min_length=1, max_length=100)
    latitude: str | None = Field(default=None, max_length=32)
    longitude: str | None = Field(default=None, max_length=32)
    status: TowerStatus = TowerStatus.ACTIVE
    last_maintenance: datetime | None = None
    notes: str | None = None
    registered_by: str | None = Field(default=None, max_length=200)

    @field_validator("latitude")
    @classmethod
    def validate_latitude(cls, v: str | None) -> str | None:
        return _check_coordinate(v, 90)

    @field_validator("longitude")
    @classmethod
    def validate_longitude(cls, v: str | None) -> str | None:
        return _check_coordinate(v, 180)

    def tower_fields(self) -> dict:
        """Return the fields stored on the tower (snake_case)."""
        return self.model_dump(exclude={"registered_by"}, exclude_none=True)


class TowerUpdateRequest(CamelModel):
    """Request body for a partial tower update. Only supplied fields change.

    ``updatedBy`` is recorded on any status or verification activity log.
    """

    location: str | None = Field(default=None, min_length=1, max_length=500)
    constituency: str | None = Field(default=None, min_length=1, max_length=100)
    ward: str | None = Field(default=None, min_length=1, max_length=100)
    latitude: str | None = Field(default=None, max_length=32)
    longitude: str | None = Field(default=None, max_length=32)
    status: TowerStatus | None = None
    last_maintenance: datetime | None = None
    verification_status: VerificationStatus | None = None
    notes: str | None = None
    updated_by: str | None = Field(default=None, max_length=200)

    @field_validator("latitude")
    @classmethod
    def validate_latitude(cls, v: str | None) -> str | None:
        return _check_coordinate(v, 90)

    @field_validator("longitude")
    @classmethod
    def validate_longitude(cls, v: str | None) -> str | None:
        return _check_coordinate(v, 180)

    def changes(self) -> dict:
        """Return only the tower fields the client actually sent (snake_case).

        An explicit null clears an optional field; it is ignored for fields
        a tower must always have.
        """
        fields = self.model_dump(exclude={"updated_by"}, exclude_unset=True)
        return {k: v for k, v in fields.items() if v is not None or k not in _REQUIRED_TOWER_FIELDS}
