"""Maintenance report submission endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from lighttower_api.core.dependencies import get_lifecycle
from lighttower_api.core.exceptions import LightTowerError
from lighttower_api.schemas.report import ReportCreateRequest, ReportResponse
from lighttower_api.services.lifecycle_service import TowerLifecycle

reports_router = APIRouter(prefix="/reports", tags=["reports"])


@reports_router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def submit_report_endpoint(
    body: ReportCreateRequest,
    lifecycle: TowerLifecycle = Depends(get_lifecycle),
) -> ReportResponse:
    """Submit a field report. The tower's status becomes the reported status."""
    try:
        report = await lifecycle.submit_report(body.model_dump(exclude_none=True))
    except LightTowerError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error creating maintenance report: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create maintenance report",
        ) from e
    return ReportResponse.model_validate(report)
