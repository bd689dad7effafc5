# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Reputation check endpoints: query a source and store its verdict."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from repwatch.api.auth import require_api_key
from repwatch.api.deps import get_orchestrator, require_url
from repwatch.core.constants import Source
from repwatch.models.record import DomainRecord, Report
from repwatch.orchestrator import AggregationOrchestrator

logger = logging.getLogger("repwatch.api.checks")

router = APIRouter()


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class CheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    domain: str
    source: str
    report: Report | None
    current_score: float | None = Field(default=None, alias="currentScore")
    is_blacklisted: bool = Field(default=False, alias="isBlacklisted")


class CheckAllResponse(BaseModel):
    success: bool = True
    domain: str
    succeeded: list[str]
    errors: dict[str, str]
    skipped: list[str]
    record: DomainRecord | None


def _to_response(record: DomainRecord, source: str) -> CheckResponse:
    return CheckResponse(
        domain=record.domain,
        source=source,
        report=record.report_for(source),
        current_score=record.current_score,
        is_blacklisted=record.is_blacklisted,
    )


async def _run_check(
    orchestrator: AggregationOrchestrator,
    source: str,
    url: str | None,
    strictness: int | None = None,
) -> CheckResponse:
    target = require_url(url)
    key = orchestrator.resolve_source(source)
    options = {"strictness": strictness} if strictness is not None else {}
    logger.info("Scanning URL: %s with %s", target, key)
    record = await orchestrator.check(key, target, **options)
    return _to_response(record, key)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/check-all", response_model=CheckAllResponse)
async def check_all(
    url: str | None = None,
    orchestrator: AggregationOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(require_api_key),
) -> CheckAllResponse:
    """Query every configured source for a URL."""
    result = await orchestrator.check_all(require_url(url))
    return CheckAllResponse(
        success=bool(result.succeeded),
        domain=result.domain,
        succeeded=result.succeeded,
        errors=result.errors,
        skipped=result.skipped,
        record=result.record,
    )


@router.get("/check/{source}", response_model=CheckResponse)
async def check_source(
    source: str,
    url: str | None = None,
    strictness: int | None = None,
    orchestrator: AggregationOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(require_api_key),
) -> CheckResponse:
    """Query one reputation source for a URL and store the verdict."""
    return await _run_check(orchestrator, source, url, strictness)


@router.get("/check-ipqs", response_model=CheckResponse)
async def check_ipqs(
    url: str | None = None,
    strictness: int | None = None,
    orchestrator: AggregationOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(require_api_key),
) -> CheckResponse:
    return await _run_check(orchestrator, Source.IPQS, url, strictness)


@router.get("/check-vt", response_model=CheckResponse)
async def check_virustotal(
    url: str | None = None,
    orchestrator: AggregationOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(require_api_key),
) -> CheckResponse:
    return await _run_check(orchestrator, Source.VIRUSTOTAL, url)


@router.get("/check-google", response_model=CheckResponse)
async def check_google(
    url: str | None = None,
    orchestrator: AggregationOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(require_api_key),
) -> CheckResponse:
    return await _run_check(orchestrator, Source.GOOGLE, url)


@router.get("/check-crt", response_model=CheckResponse)
async def check_crt(
    url: str | None = None,
    orchestrator: AggregationOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(require_api_key),
) -> CheckResponse:
    return await _run_check(orchestrator, Source.CRT, url)


@router.get("/check-ssl", response_model=CheckResponse)
async def check_ssl(
    url: str | None = None,
    orchestrator: AggregationOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(require_api_key),
) -> CheckResponse:
    return await _run_check(orchestrator, Source.SSLLABS, url)
