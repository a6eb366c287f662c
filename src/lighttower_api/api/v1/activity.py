"""Recent activity feed endpoint."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger

from lighttower_api.core.config import Settings, get_settings
from lighttower_api.core.dependencies import get_store
from lighttower_api.lib.store import BaseStore
from lighttower_api.schemas.activity import ActivityLogResponse
from lighttower_api.services.tower_service import recent_activity

activity_router = APIRouter(prefix="/activity", tags=["activity"])


def _parse_limit(raw: str | None, default: int) -> int:
    """Parse the ``limit`` query value, falling back to ``default`` when unusable."""
    try:
        limit = int(raw) if raw is not None else default
    except ValueError:
        return default
    return limit if limit > 0 else default


@activity_router.get("", response_model=list[ActivityLogResponse])
async def list_recent_activity(
    limit: str | None = Query(None, description="Number of entries to return"),
    store: BaseStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> list[ActivityLogResponse]:
    """Return the most recent activity logs, newest first."""
    count = _parse_limit(limit, settings.activity_default_limit)
    try:
        logs = await recent_activity(store, count)
    except Exception as e:
        logger.error(f"Unexpected error fetching activity logs: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch activity logs",
        ) from e
    return [ActivityLogResponse.model_validate(log) for log in logs]
