# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Domain record detail endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from repwatch.api.auth import require_api_key
from repwatch.api.deps import get_orchestrator
from repwatch.models.record import DomainRecord
from repwatch.orchestrator import AggregationOrchestrator

router = APIRouter()


@router.get("/domains/{domain}", response_model=DomainRecord)
async def get_domain(
    domain: str,
    orchestrator: AggregationOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(require_api_key),
) -> DomainRecord:
    """Return the stored record with every source's latest report."""
    record = await orchestrator.lookup(domain)
    if record is None:
        raise HTTPException(status_code=404, detail=f"No record for {domain}")
    return record
