# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Database management commands."""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer

app = typer.Typer()


@app.command()
def init() -> None:
    """Create the SQLite database and apply every migration."""
    asyncio.run(_init_db())


async def _init_db() -> None:
    from repwatch.core.config import get_settings
    from repwatch.storage.database import close_db, init_db
    from repwatch.storage.migrations import get_current_version

    settings = get_settings()
    typer.echo(f"Initializing database at {settings.db_path}...")
    db = await init_db(settings.db_path)
    try:
        version = await get_current_version(db)
    finally:
        await close_db()
    typer.echo(f"Database initialized (schema version {version}).")


@app.command()
def migrate(
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="List pending migrations without applying them")
    ] = False,
) -> None:
    """Apply pending schema migrations."""
    asyncio.run(_migrate_db(dry_run))


async def _migrate_db(dry_run: bool) -> None:
    from repwatch.core.config import get_settings
    from repwatch.storage.database import close_db, init_db
    from repwatch.storage.migrations import get_pending_migrations, run_migrations

    settings = get_settings()
    db = await init_db(settings.db_path, auto_migrate=False)
    try:
        pending = await get_pending_migrations(db)
        if not pending:
            typer.echo("No pending migrations.")
            return
        if dry_run:
            for m in pending:
                typer.echo(f"Pending migration {m.version:03d}: {m.name}")
            return
        for m in await run_migrations(db):
            typer.echo(f"Applied migration {m.version:03d}: {m.name}")
    finally:
        await close_db()


@app.command()
def stats() -> None:
    """Show how many domains are tracked and blacklisted."""
    from rich.console import Console
    from rich.table import Table

    total, blacklisted, backend = asyncio.run(_collect_stats())

    table = Table(title="repwatch storage")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("backend", backend)
    table.add_row("domain records", str(total))
    table.add_row("blacklisted", str(blacklisted))
    Console().print(table)


async def _collect_stats() -> tuple[int, int, str]:
    from repwatch.core.config import get_settings
    from repwatch.storage.database import close_db, init_repository

    settings = get_settings()
    repository = await init_repository(
        backend=settings.db_backend, db_path=settings.db_path
    )
    try:
        return (
            await repository.count(),
            len(await repository.list_blacklisted()),
            repository.backend_name,
        )
    finally:
        await close_db()
