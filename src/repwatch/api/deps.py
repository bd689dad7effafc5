# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Shared route dependencies."""

from __future__ import annotations

from fastapi import HTTPException, Request

from repwatch.orchestrator import AggregationOrchestrator


async def get_orchestrator(request: Request) -> AggregationOrchestrator:
    """Return the app-wide orchestrator, building it on first use.

    One instance per app keeps a single per-domain lock table for all
    requests.
    """
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        from repwatch.core.config import get_settings
        from repwatch.storage.database import get_repository

        repository = await get_repository()
        orchestrator = AggregationOrchestrator.from_settings(get_settings(), repository)
        request.app.state.orchestrator = orchestrator
    return orchestrator


def require_url(url: str | None) -> str:
    """Reject a missing or blank ``url`` query parameter with 400."""
    if not url or not url.strip():
        raise HTTPException(
            status_code=400,
            detail="Missing 'url' query parameter. Usage: ?url=http://example.com",
        )
    return url
