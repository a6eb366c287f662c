"""Root API router with the configured prefix and middleware registration."""

from fastapi import APIRouter, FastAPI

from lighttower_api.api.middleware import RateLimitMiddleware, SecurityHeadersMiddleware, setup_cors
from lighttower_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from lighttower_api.api.v1.activity import activity_router
    from lighttower_api.api.v1.reference import reference_router
    from lighttower_api.api.v1.reports import reports_router
    from lighttower_api.api.v1.stats import filters_router, stats_router
    from lighttower_api.api.v1.tasks import tasks_router
    from lighttower_api.api.v1.towers import towers_router

    root_router = APIRouter(prefix=settings.api_prefix)
    root_router.include_router(towers_router)
    root_router.include_router(reports_router)
    root_router.include_router(activity_router)
    root_router.include_router(stats_router)
    root_router.include_router(filters_router)
    root_router.include_router(tasks_router)
    root_router.include_router(reference_router)

    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    setup_cors(app, settings)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_minute=settings.rate_limit_per_minute,
        trusted_proxy_headers=settings.trusted_proxy_header_list,
    )
