# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Blacklist endpoints consumed by the browser extension."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from repwatch.api.auth import require_api_key
from repwatch.api.deps import get_orchestrator, require_url
from repwatch.orchestrator import AggregationOrchestrator

router = APIRouter()


class BlacklistResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    domain: str
    is_blacklisted: bool = Field(alias="isBlacklisted")
    current_score: float | None = Field(default=None, alias="currentScore")
    in_database: bool = Field(alias="inDatabase")


class ToggleResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    domain: str
    is_blacklisted: bool = Field(alias="isBlacklisted")


@router.get("/blacklist", response_model=BlacklistResponse)
async def blacklist_status(
    url: str | None = None,
    orchestrator: AggregationOrchestrator = Depends(get_orchestrator),
) -> BlacklistResponse:
    """Report whether a URL's domain is blacklisted.

    Domains that were never scanned are answered with
    ``inDatabase: false`` and ``isBlacklisted: false``.
    """
    target = require_url(url)
    domain = orchestrator.domain_for(target)
    status = await orchestrator.store.get_blacklist_status(domain)
    return BlacklistResponse(
        domain=domain,
        is_blacklisted=status.is_blacklisted,
        current_score=status.current_score,
        in_database=status.exists,
    )


@router.post("/blacklist/toggle", response_model=ToggleResponse)
async def toggle_blacklist(
    url: str | None = None,
    orchestrator: AggregationOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(require_api_key),
) -> ToggleResponse:
    """Flip the blacklist flag for a URL's domain."""
    target = require_url(url)
    domain = orchestrator.domain_for(target)
    result = await orchestrator.store.toggle_blacklist(domain)
    return ToggleResponse(domain=domain, is_blacklisted=result.is_blacklisted)
