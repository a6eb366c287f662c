"""Static reference data for Nairobi administrative divisions."""

from lighttower_api.lib.reference.nairobi import (
    CONSTITUENCIES,
    WARD_TO_CONSTITUENCY,
    WARDS_BY_CONSTITUENCY,
    is_valid_location,
    location_errors,
    wards_for_constituency,
)

__all__ = [
    "CONSTITUENCIES",
    "WARDS_BY_CONSTITUENCY",
    "WARD_TO_CONSTITUENCY",
    "is_valid_location",
    "location_errors",
    "wards_for_constituency",
]
