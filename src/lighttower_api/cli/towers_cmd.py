"""Read-only CLI views over the configured store."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import typer

if TYPE_CHECKING:
    from lighttower_api.lib.store import BaseStore

towers_app = typer.Typer()


@asynccontextmanager
async def _open_store() -> AsyncGenerator[BaseStore]:
    """Open the configured store for a single command.

    A memory store starts empty in every process, so it is seeded when
    ``seed_on_startup`` is enabled, matching what the server would show.
    """
    from lighttower_api.core.config import get_settings
    from lighttower_api.core.database import dispose_engine, init_engine
    from lighttower_api.lib.store import get_store, seed_store

    settings = get_settings()
    if settings.storage_backend == "database":
        init_engine(settings.database_url, echo=False)
    try:
        store = get_store(settings)
        if settings.storage_backend == "memory" and settings.seed_on_startup:
            await seed_store(store)
        yield store
        await store.close()
    finally:
        if settings.storage_backend == "database":
            await dispose_engine()


@towers_app.command("list")
def list_towers(
    status: str | None = typer.Option(None, "--status", help="Filter by status (active, warning, critical)"),
    constituency: str | None = typer.Option(None, "--constituency", help="Filter by constituency"),
) -> None:
    """List towers with their status and location."""
    asyncio.run(_list_impl(status, constituency))


async def _list_impl(status: str | None, constituency: str | None) -> None:
    from lighttower_api.services.tower_service import list_towers as list_towers_service

    async with _open_store() as store:
        towers = await list_towers_service(store, status=status, constituency=constituency)

    if not towers:
        typer.echo("No towers found.")
        return
    for tower in towers:
        typer.echo(
            f"{tower.tower_id:<8s} {tower.status:<9s} {tower.verification_status:<9s} "
            f"{tower.constituency} / {tower.ward}: {tower.location}"
        )
    typer.echo(f"\n{len(towers)} tower(s)")


def stats() -> None:
    """Show tower counts by status and per constituency."""
    asyncio.run(_stats_impl())


async def _stats_impl() -> None:
    from lighttower_api.services import stats_service

    async with _open_store() as store:
        counts = await stats_service.tower_stats(store)
        breakdown = await stats_service.constituency_breakdown(store)

    typer.echo(
        f"Total: {counts['total']}  Active: {counts['active']}  "
        f"Warning: {counts['warning']}  Critical: {counts['critical']}"
    )
    for row in breakdown:
        typer.echo(
            f"  {row['name']:<20s} active={row['active']} warning={row['warning']} "
            f"critical={row['critical']} total={row['total']}"
        )
