"""CLI command for loading the sample data set into the database backend.

The API seeds on startup as well; this command exists so a freshly
migrated database can be populated without starting the server.
"""

import asyncio

import typer


def seed() -> None:
    """Seed the configured database with the sample admin, towers and activity logs."""
    asyncio.run(_seed_impl())


async def _seed_impl() -> None:
    """Async implementation of the seed command."""
    from lighttower_api.core.config import get_settings
    from lighttower_api.core.database import dispose_engine, get_session_factory, init_engine
    from lighttower_api.lib.store import DatabaseStore, seed_store

    settings = get_settings()
    if settings.storage_backend != "database":
        typer.echo("Seeding only applies to STORAGE_BACKEND=database; the memory store seeds on startup.")
        raise typer.Exit(code=1)

    init_engine(settings.database_url, echo=False)
    try:
        loaded = await seed_store(DatabaseStore(get_session_factory()))
    finally:
        await dispose_engine()

    if loaded:
        typer.echo("Sample data loaded.")
    else:
        typer.echo("Database already contains data; nothing seeded.")
