"""Aggregate statistics and filter option endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from lighttower_api.core.dependencies import get_store
from lighttower_api.lib.store import BaseStore
from lighttower_api.schemas.stats import (
    ConstituencyStatsResponse,
    FilterOptionsResponse,
    TowerStatsResponse,
    VerificationStatsResponse,
)
from lighttower_api.services import stats_service

stats_router = APIRouter(prefix="/stats", tags=["stats"])
filters_router = APIRouter(prefix="/filters", tags=["stats"])


@stats_router.get("", response_model=TowerStatsResponse)
async def get_tower_stats(store: BaseStore = Depends(get_store)) -> TowerStatsResponse:
    """Tower counts by operational status."""
    try:
        counts = await stats_service.tower_stats(store)
    except Exception as e:
        logger.error(f"Unexpected error computing tower stats: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch stats",
        ) from e
    return TowerStatsResponse(**counts)


@stats_router.get("/constituencies", response_model=list[ConstituencyStatsResponse])
async def get_constituency_stats(store: BaseStore = Depends(get_store)) -> list[ConstituencyStatsResponse]:
    """Status counts per constituency, in first-seen order."""
    try:
        rows = await stats_service.constituency_breakdown(store)
    except Exception as e:
        logger.error(f"Unexpected error computing constituency breakdown: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch constituency stats",
        ) from e
    return [ConstituencyStatsResponse.model_validate(row) for row in rows]


@stats_router.get("/verification", response_model=VerificationStatsResponse)
async def get_verification_stats(store: BaseStore = Depends(get_store)) -> VerificationStatsResponse:
    """Tower counts by verification status."""
    try:
        counts = await stats_service.verification_stats(store)
    except Exception as e:
        logger.error(f"Unexpected error computing verification stats: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch verification stats",
        ) from e
    return VerificationStatsResponse(**counts)


@filters_router.get("", response_model=FilterOptionsResponse)
async def get_filter_options(store: BaseStore = Depends(get_store)) -> FilterOptionsResponse:
    """Distinct constituencies and wards present in stored towers."""
    try:
        options = await stats_service.filter_options(store)
    except Exception as e:
        logger.error(f"Unexpected error computing filter options: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch filters data",
        ) from e
    return FilterOptionsResponse(**options)
