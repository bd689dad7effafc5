# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Typer CLI application root."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Annotated, TypeVar

import typer

from repwatch.cli.commands import db
from repwatch.core.exceptions import RepwatchError
from repwatch.models.record import BlacklistStatus
from repwatch.orchestrator import AggregationOrchestrator

T = TypeVar("T")

app = typer.Typer(
    name="repwatch",
    help="Domain reputation aggregation service",
    no_args_is_help=True,
)

app.add_typer(db.app, name="db", help="Database management")


@app.callback()
def main(
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="Override REPWATCH_LOG_LEVEL")
    ] = None,
) -> None:
    """Configure logging before any command runs."""
    from repwatch.core.config import get_settings
    from repwatch.core.logging import setup_logging

    settings = get_settings()
    setup_logging(log_level or settings.log_level, settings.log_format)


@asynccontextmanager
async def _orchestrator() -> AsyncIterator[AggregationOrchestrator]:
    from repwatch.core.config import get_settings
    from repwatch.storage.database import close_db, init_repository

    settings = get_settings()
    repository = await init_repository(
        backend=settings.db_backend,
        db_path=settings.db_path,
        auto_migrate=settings.auto_migrate,
    )
    try:
        yield AggregationOrchestrator.from_settings(settings, repository)
    finally:
        await close_db()


def _run(factory: Callable[[AggregationOrchestrator], Awaitable[T]]) -> T:
    """Run *factory* against a fresh orchestrator, turning errors into exit code 1."""

    async def runner() -> T:
        async with _orchestrator() as orchestrator:
            return await factory(orchestrator)

    try:
        return asyncio.run(runner())
    except RepwatchError as exc:
        typer.echo(f"Error ({type(exc).__name__}): {exc}", err=True)
        raise typer.Exit(1) from exc


@app.command()
def check(
    source: Annotated[str, typer.Argument(help="Source name, e.g. IPQS, vt, google, crt, ssl")],
    url: Annotated[str, typer.Argument(help="URL or domain to check")],
    strictness: Annotated[
        int | None, typer.Option("--strictness", "-s", help="IPQS strictness 0-2")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the record as JSON")] = False,
) -> None:
    """Query one reputation source and store its verdict."""
    options = {"strictness": strictness} if strictness is not None else {}
    record = _run(lambda o: o.check(source, url, **options))

    if as_json:
        typer.echo(record.model_dump_json(indent=2, by_alias=True))
        return
    from repwatch.cli.formatters.console import format_record

    format_record(record)


@app.command(name="check-all")
def check_all(
    url: Annotated[str, typer.Argument(help="URL or domain to check")],
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON")] = False,
) -> None:
    """Query every configured source and store each verdict."""
    result = _run(lambda o: o.check_all(url))

    if as_json:
        typer.echo(
            json.dumps(
                {
                    "domain": result.domain,
                    "succeeded": result.succeeded,
                    "errors": result.errors,
                    "skipped": result.skipped,
                    "record": (
                        result.record.model_dump(mode="json", by_alias=True)
                        if result.record
                        else None
                    ),
                },
                indent=2,
            )
        )
        return

    from repwatch.cli.formatters.console import format_record

    if result.record is not None:
        format_record(result.record)
    for name, message in result.errors.items():
        typer.echo(f"{name}: {message}", err=True)
    if result.skipped:
        typer.echo(f"Skipped (no credentials): {', '.join(result.skipped)}")


@app.command()
def status(url: Annotated[str, typer.Argument(help="URL or domain")]) -> None:
    """Show whether a domain is blacklisted."""
    from repwatch.cli.formatters.console import format_status

    async def query(o: AggregationOrchestrator) -> tuple[str, BlacklistStatus]:
        domain = o.domain_for(url)
        return domain, await o.store.get_blacklist_status(domain)

    domain, result = _run(query)
    format_status(domain, result)


@app.command()
def toggle(url: Annotated[str, typer.Argument(help="URL or domain")]) -> None:
    """Flip the blacklist flag for a domain."""
    result = _run(lambda o: o.toggle_blacklist(url))
    state = "blacklisted" if result.is_blacklisted else "removed from blacklist"
    typer.echo(f"{url}: {state}")


@app.command()
def show(url: Annotated[str, typer.Argument(help="URL or domain")]) -> None:
    """Show the stored record for a domain."""
    record = _run(lambda o: o.lookup(url))
    if record is None:
        typer.echo(f"No record for {url}", err=True)
        raise typer.Exit(1)

    from repwatch.cli.formatters.console import format_record

    format_record(record)


@app.command()
def blacklisted() -> None:
    """List blacklisted domains."""
    domains = _run(lambda o: o.store.list_blacklisted())
    if not domains:
        typer.echo("No blacklisted domains.")
        return
    for domain in domains:
        typer.echo(domain)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
    workers: int | None = typer.Option(None, "--workers", "-w", help="Worker count"),
) -> None:
    """Start the repwatch API server."""
    import uvicorn

    from repwatch.core.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "repwatch.api.app:create_app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        workers=workers or settings.api_workers,
        factory=True,
    )
