# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""repwatch - Domain reputation aggregation service."""

__version__ = "0.1.0"

from repwatch.domain.normalizer import normalize, try_normalize
from repwatch.models.record import BlacklistStatus, DomainRecord, Report, ToggleResult
from repwatch.orchestrator import AggregateResult, AggregationOrchestrator
from repwatch.store.reputation import ReputationStore

__all__ = [
    "AggregateResult",
    "AggregationOrchestrator",
    "BlacklistStatus",
    "DomainRecord",
    "Report",
    "ReputationStore",
    "ToggleResult",
    "__version__",
    "normalize",
    "try_normalize",
]
