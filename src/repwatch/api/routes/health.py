# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Liveness and readiness probes."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, Field

from repwatch import __version__
from repwatch.core.exceptions import PersistenceError

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str


class ReadyResponse(BaseModel):
    status: str
    backend: str | None = None
    records: int | None = None
    sources: dict[str, bool] = Field(default_factory=dict)
    detail: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", service="repwatch", version=__version__)


@router.get("/ready", response_model=ReadyResponse)
async def ready() -> ReadyResponse:
    """Report storage reachability and which sources have credentials."""
    from repwatch.storage.database import get_repository

    try:
        repository = await get_repository()
        records = await repository.count()
    except PersistenceError as exc:
        return ReadyResponse(status="not_ready", detail=str(exc))

    from repwatch.adapters.registry import build_adapters
    from repwatch.core.config import get_settings

    sources = {name: a.is_configured() for name, a in build_adapters(get_settings()).items()}
    return ReadyResponse(
        status="ready", backend=repository.backend_name, records=records, sources=sources
    )
