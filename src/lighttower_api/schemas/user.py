"""Pydantic v2 schemas for user accounts."""

from lighttower_api.schemas.common import CamelModel


class UserResponse(CamelModel):
    """Public view of a user. The password hash is never included."""

    id: int
    username: str
    name: str
    role: str
