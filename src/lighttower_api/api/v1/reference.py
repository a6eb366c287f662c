"""Static Nairobi location reference endpoints."""

from fastapi import APIRouter, HTTPException, status

from lighttower_api.lib.reference import CONSTITUENCIES, WARDS_BY_CONSTITUENCY
from lighttower_api.schemas.reference import ConstituencyListResponse, WardListResponse

reference_router = APIRouter(prefix="/reference", tags=["reference"])


@reference_router.get("/constituencies", response_model=ConstituencyListResponse)
async def list_constituencies() -> ConstituencyListResponse:
    """List every constituency in the reference data set."""
    return ConstituencyListResponse(constituencies=list(CONSTITUENCIES))


@reference_router.get("/constituencies/{name}/wards", response_model=WardListResponse)
async def list_constituency_wards(name: str) -> WardListResponse:
    """List the wards of one constituency."""
    wards = WARDS_BY_CONSTITUENCY.get(name)
    if wards is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown constituency: {name}")
    return WardListResponse(constituency=name, wards=list(wards))
