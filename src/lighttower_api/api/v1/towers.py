"""Light tower API endpoints: registration, lookup, updates and per-tower history."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger

from lighttower_api.core.config import Settings, get_settings
from lighttower_api.core.dependencies import get_lifecycle, get_store
from lighttower_api.core.exceptions import LightTowerError, ValidationError
from lighttower_api.lib.reference import location_errors
from lighttower_api.lib.store import BaseStore, LightTower, TowerStatus
from lighttower_api.schemas.activity import ActivityLogResponse
from lighttower_api.schemas.report import ReportResponse
from lighttower_api.schemas.tower import (
    QRCodeResponse,
    TowerCreateRequest,
    TowerResponse,
    TowerUpdateRequest,
)
from lighttower_api.services.lifecycle_service import TowerLifecycle, UpdateValidator
from lighttower_api.services.qr_service import qr_payload
from lighttower_api.services.tower_service import (
    get_tower_by_ref,
    list_activity_for_tower,
    list_reports_for_tower,
    list_towers,
    parse_tower_pk,
)

towers_router = APIRouter(prefix="/towers", tags=["towers"])

_INVALID_ID = "Invalid tower ID"


def _check_location(constituency: str, ward: str, settings: Settings) -> None:
    if not settings.enforce_reference_locations:
        return
    errors = location_errors(constituency, ward)
    if errors:
        raise ValidationError(errors=errors)


def _location_validator(changes: dict, settings: Settings) -> UpdateValidator | None:
    """Check the constituency/ward pair the update would leave on the tower."""
    if "constituency" not in changes and "ward" not in changes:
        return None

    def validate(current: LightTower, proposed: dict) -> None:
        _check_location(
            proposed.get("constituency", current.constituency),
            proposed.get("ward", current.ward),
            settings,
        )

    return validate


@towers_router.get("", response_model=list[TowerResponse])
async def list_all_towers(
    tower_status: TowerStatus | None = Query(None, alias="status", description="Filter by operational status"),
    constituency: str | None = Query(None, description="Filter by constituency"),
    ward: str | None = Query(None, description="Filter by ward"),
    store: BaseStore = Depends(get_store),
) -> list[TowerResponse]:
    """List towers in registration order."""
    try:
        towers = await list_towers(store, status=tower_status, constituency=constituency, ward=ward)
    except Exception as e:
        logger.error(f"Unexpected error listing towers: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch light towers",
        ) from e
    return [TowerResponse.model_validate(t) for t in towers]


@towers_router.post("", response_model=TowerResponse, status_code=status.HTTP_201_CREATED)
async def register_tower_endpoint(
    body: TowerCreateRequest,
    lifecycle: TowerLifecycle = Depends(get_lifecycle),
    settings: Settings = Depends(get_settings),
) -> TowerResponse:
    """Register a new tower in ``pending`` verification.

    The tower code is derived from the numeric id when ``towerId`` is omitted.
    """
    _check_location(body.constituency, body.ward, settings)
    try:
        tower = await lifecycle.register_tower(body.tower_fields(), registered_by=body.registered_by)
    except LightTowerError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error registering tower: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create light tower",
        ) from e
    return TowerResponse.model_validate(tower)


@towers_router.get("/{tower_ref}", response_model=TowerResponse)
async def get_tower_endpoint(
    tower_ref: str,
    store: BaseStore = Depends(get_store),
) -> TowerResponse:
    """Fetch a tower by numeric id (``3``) or tower code (``LT-003``)."""
    try:
        tower = await get_tower_by_ref(store, tower_ref)
    except LightTowerError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error fetching tower {tower_ref}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch light tower",
        ) from e
    return TowerResponse.model_validate(tower)


@towers_router.patch("/{tower_id}", response_model=TowerResponse)
async def update_tower_endpoint(
    tower_id: str,
    body: TowerUpdateRequest,
    lifecycle: TowerLifecycle = Depends(get_lifecycle),
    settings: Settings = Depends(get_settings),
) -> TowerResponse:
    """Partially update a tower.

    Status and verification changes are recorded in the activity log with
    ``updatedBy`` (or ``Anonymous``) as the performer.
    """
    tower_pk = parse_tower_pk(tower_id, _INVALID_ID)
    changes = body.changes()
    try:
        tower = await lifecycle.update_tower(
            tower_pk,
            changes,
            updated_by=body.updated_by,
            validate=_location_validator(changes, settings),
        )
    except LightTowerError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error updating tower {tower_pk}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update light tower",
        ) from e
    return TowerResponse.model_validate(tower)


@towers_router.get("/{tower_id}/reports", response_model=list[ReportResponse])
async def list_tower_reports(
    tower_id: str,
    store: BaseStore = Depends(get_store),
) -> list[ReportResponse]:
    """List maintenance reports filed against a tower (empty for unknown ids)."""
    tower_pk = parse_tower_pk(tower_id, _INVALID_ID)
    try:
        reports = await list_reports_for_tower(store, tower_pk)
    except Exception as e:
        logger.error(f"Unexpected error listing reports for tower {tower_pk}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch maintenance reports",
        ) from e
    return [ReportResponse.model_validate(r) for r in reports]


@towers_router.get("/{tower_id}/activity", response_model=list[ActivityLogResponse])
async def list_tower_activity(
    tower_id: str,
    store: BaseStore = Depends(get_store),
) -> list[ActivityLogResponse]:
    """List activity logs referencing a tower (empty for unknown ids)."""
    tower_pk = parse_tower_pk(tower_id, _INVALID_ID)
    try:
        logs = await list_activity_for_tower(store, tower_pk)
    except Exception as e:
        logger.error(f"Unexpected error listing activity for tower {tower_pk}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch activity logs",
        ) from e
    return [ActivityLogResponse.model_validate(log) for log in logs]


@towers_router.get("/{tower_ref}/qr", response_model=QRCodeResponse)
async def get_tower_qr(
    tower_ref: str,
    size: int | None = Query(None, ge=50, le=1000, description="Image edge length in pixels"),
    store: BaseStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> QRCodeResponse:
    """Return the QR label payload for a tower, by numeric id or tower code."""
    try:
        tower = await get_tower_by_ref(store, tower_ref)
    except LightTowerError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error building QR code for tower {tower_ref}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate QR code",
        ) from e
    payload = qr_payload(tower, size or settings.qr_default_size, settings.qr_service_url)
    return QRCodeResponse.model_validate(payload)
