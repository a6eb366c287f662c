"""Shared test fixtures for settings, stores, services and the HTTP client."""

from collections.abc import AsyncGenerator
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from lighttower_api.core.config import Settings, get_settings
from lighttower_api.lib.store import DatabaseStore, MemoryStore, seed_store
from lighttower_api.models.base import Base
from lighttower_api.services.lifecycle_service import TowerLifecycle
from lighttower_api.services.task_service import TaskBoard


@pytest.fixture
def settings() -> Settings:
    """Test application settings (memory backend, no env file)."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        storage_backend="memory",
        database_url="sqlite+aiosqlite:///:memory:",
        seed_on_startup=False,
        rate_limit_per_minute=10_000,
    )


@pytest.fixture
def memory_store() -> MemoryStore:
    """An empty in-memory store."""
    return MemoryStore()


@pytest.fixture
async def seeded_store() -> MemoryStore:
    """An in-memory store holding the sample data set."""
    store = MemoryStore()
    await seed_store(store)
    return store


@pytest.fixture
def lifecycle(seeded_store: MemoryStore) -> TowerLifecycle:
    """Lifecycle engine over the seeded store."""
    return TowerLifecycle(seeded_store)


@pytest.fixture
def task_board(lifecycle: TowerLifecycle) -> TaskBoard:
    """Task board sharing the lifecycle engine's store and lock."""
    return TaskBoard(lifecycle.store, lifecycle.lock, due_days=7)


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def database_store(async_engine: AsyncEngine) -> DatabaseStore:
    """A database store over the in-memory SQLite engine."""
    return DatabaseStore(async_sessionmaker(async_engine, expire_on_commit=False))


@pytest.fixture
async def client(settings: Settings, lifecycle: TowerLifecycle, task_board: TaskBoard) -> AsyncGenerator[AsyncClient]:
    """HTTP client for the full application over the seeded memory store.

    The lifespan is not run; application state is wired directly.
    """
    from lighttower_api.main import create_app

    with patch("lighttower_api.main.get_settings", return_value=settings):
        app = create_app()
    app.dependency_overrides[get_settings] = lambda: settings
    app.state.store = lifecycle.store
    app.state.lifecycle = lifecycle
    app.state.task_board = task_board

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
