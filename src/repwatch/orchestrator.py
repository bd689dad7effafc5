# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Coordinate one reputation lookup: normalize, query, format, store.

The orchestrator is what the HTTP routes and the CLI call.  It turns raw
input into a domain key, sends the *original* URL to the chosen source
(some providers want the full URL, not just the host), and hands the
formatted verdict to the :class:`~repwatch.store.reputation.ReputationStore`.
Nothing is persisted when a source fails.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import pydantic

from repwatch.adapters.base import (
    AdapterError,
    MissingCredentialError,
    UpstreamHTTPError,
    VerdictAdapter,
)
from repwatch.core.config import Settings
from repwatch.core.constants import DEFAULT_ADAPTER_TIMEOUT, SOURCE_ALIASES
from repwatch.core.exceptions import (
    AuthConfigError,
    NormalizationError,
    PersistenceError,
    UpstreamError,
    ValidationError,
)
from repwatch.domain.normalizer import normalize
from repwatch.formatters.reports import extract_score, format_report
from repwatch.models.record import BlacklistStatus, DomainRecord, ToggleResult
from repwatch.storage.backend import RecordRepository
from repwatch.store.reputation import ReputationStore
from repwatch.store.scoring import get_score_policy

logger = logging.getLogger("repwatch.orchestrator")


@dataclass
class AggregateResult:
    """Outcome of querying every configured source for one URL."""

    domain: str
    record: DomainRecord | None = None
    succeeded: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)


class AggregationOrchestrator:
    """Route reputation requests to adapters and the reputation store.

    Args:
        store: Reputation store that owns the domain records.
        adapters: Source name to adapter.
        timeout: Upper bound in seconds for a single adapter call.
    """

    def __init__(
        self,
        store: ReputationStore,
        adapters: dict[str, VerdictAdapter],
        timeout: float = DEFAULT_ADAPTER_TIMEOUT,
    ) -> None:
        self.store = store
        self.adapters = adapters
        self.timeout = timeout

    @classmethod
    def from_settings(
        cls, settings: Settings, repository: RecordRepository
    ) -> AggregationOrchestrator:
        from repwatch.adapters.registry import build_adapters

        store = ReputationStore(repository, get_score_policy(settings.score_policy))
        return cls(store, build_adapters(settings), timeout=settings.adapter_timeout)

    # ------------------------------------------------------------------
    # Input resolution
    # ------------------------------------------------------------------

    @staticmethod
    def domain_for(url: str) -> str:
        """Normalize *url*, raising :class:`ValidationError` on bad input."""
        try:
            return normalize(url)
        except NormalizationError as exc:
            raise ValidationError(str(exc)) from exc

    def resolve_source(self, name: str) -> str:
        """Map a user-supplied source name to a registered adapter key."""
        if name in self.adapters:
            return name
        candidate = SOURCE_ALIASES.get(name.lower(), name)
        for key in self.adapters:
            if key.lower() == candidate.lower():
                return key
        valid = ", ".join(sorted(self.adapters)) or "none"
        raise ValidationError(f"Unknown reputation source {name!r}. Available: {valid}")

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def check(self, source: str, url: str, **options: Any) -> DomainRecord:
        """Query one source for *url* and store its verdict."""
        domain = self.domain_for(url)
        key = self.resolve_source(source)
        return await self._check_domain(domain, key, url, **options)

    async def check_all(self, url: str) -> AggregateResult:
        """Query every configured source concurrently and store each verdict.

        Individual source failures are collected in ``errors``; sources
        without credentials are listed in ``skipped``.
        """
        domain = self.domain_for(url)
        result = AggregateResult(domain=domain)

        names = [n for n, a in self.adapters.items() if a.is_configured()]
        result.skipped = [n for n in self.adapters if n not in names]

        outcomes = await asyncio.gather(
            *(self._check_domain(domain, name, url) for name in names),
            return_exceptions=True,
        )

        for name, outcome in zip(names, outcomes, strict=True):
            if isinstance(outcome, PersistenceError):
                raise outcome
            if isinstance(outcome, (AuthConfigError, UpstreamError)):
                result.errors[name] = str(outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.succeeded.append(name)

        result.record = await self.store.get_record(domain)
        return result

    async def blacklist_status(self, url: str) -> BlacklistStatus:
        return await self.store.get_blacklist_status(self.domain_for(url))

    async def toggle_blacklist(self, url: str) -> ToggleResult:
        return await self.store.toggle_blacklist(self.domain_for(url))

    async def lookup(self, url: str) -> DomainRecord | None:
        return await self.store.get_record(self.domain_for(url))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _check_domain(
        self, domain: str, source: str, url: str, **options: Any
    ) -> DomainRecord:
        raw = await self._fetch(self.adapters[source], url, options)
        try:
            data = format_report(source, raw)
        except pydantic.ValidationError as exc:
            logger.warning("%s returned a malformed payload: %s", source, exc)
            raise UpstreamError(
                f"{source} returned a malformed payload",
                source=source,
                detail=[
                    {"field": ".".join(map(str, err["loc"])), "message": err["msg"]}
                    for err in exc.errors()
                ],
            ) from exc
        return await self.store.upsert_report(
            domain, source, data, extract_score(source, data)
        )

    async def _fetch(
        self, adapter: VerdictAdapter, url: str, options: dict[str, Any]
    ) -> Any:
        """Call *adapter* under the timeout and translate its errors."""
        logger.info("Querying %s for %s", adapter.source, url)
        try:
            async with asyncio.timeout(self.timeout):
                return await adapter.fetch_verdict(url, **options)
        except TimeoutError as exc:
            raise UpstreamError(
                f"{adapter.source} did not answer within {self.timeout}s",
                source=adapter.source,
            ) from exc
        except MissingCredentialError as exc:
            logger.warning("%s credential problem: %s", adapter.source, exc)
            raise AuthConfigError(str(exc), source=adapter.source) from exc
        except UpstreamHTTPError as exc:
            logger.warning("%s upstream error: %s", adapter.source, exc)
            raise UpstreamError(
                str(exc), source=adapter.source, status=exc.status, detail=exc.body
            ) from exc
        except AdapterError as exc:
            logger.warning("%s request failed: %s", adapter.source, exc)
            raise UpstreamError(str(exc), source=adapter.source, detail=str(exc)) from exc
