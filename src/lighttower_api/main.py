"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from lighttower_api.core.config import get_settings
from lighttower_api.core.database import create_tables, dispose_engine, init_engine
from lighttower_api.core.exceptions import InternalError, LightTowerError, ValidationError
from lighttower_api.core.logging import setup_logging
from lighttower_api.lib.store import get_store, seed_store
from lighttower_api.services.lifecycle_service import TowerLifecycle
from lighttower_api.services.task_service import TaskBoard


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: build the store on startup, release it on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_dir, json_logs=settings.log_json)

    if settings.storage_backend == "database":
        init_engine(settings.database_url, echo=False)
        await create_tables()

    store = get_store(settings)
    if settings.seed_on_startup:
        await seed_store(store)

    lifecycle = TowerLifecycle(store)
    app.state.store = store
    app.state.lifecycle = lifecycle
    app.state.task_board = TaskBoard(store, lifecycle.lock, due_days=settings.task_due_days)
    logger.info(f"Light tower API started ({settings.environment}, {store.backend_name} store)")

    yield

    await store.close()
    if settings.storage_backend == "database":
        await dispose_engine()


def _validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Convert FastAPI validation errors to ``{"path", "message"}`` entries.

    The leading location segment (``body``, ``query``, ``path``) is dropped
    so paths name the offending field directly.
    """
    errors = []
    for err in exc.errors():
        loc = list(err.get("loc", ()))
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        errors.append({"path": loc, "message": err.get("msg", "Invalid value")})
    return errors


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Light Tower API",
        description="Nairobi light tower asset tracking: registration, maintenance status and activity history",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Register exception handlers
    @app.exception_handler(LightTowerError)
    async def domain_error_handler(request: Request, exc: LightTowerError) -> JSONResponse:
        content: dict[str, Any] = {"message": exc.message}
        if isinstance(exc, ValidationError) and exc.errors:
            content["errors"] = exc.errors
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"message": "Validation error", "errors": _validation_errors(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        error = InternalError()
        return JSONResponse(status_code=error.status_code, content={"message": error.message})

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok"}

    # Register middleware and routers
    from lighttower_api.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
