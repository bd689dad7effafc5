# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Reputation store: the per-domain record and its write rules.

Every operation takes a canonical domain key (see
:func:`repwatch.domain.normalizer.normalize`).  Writes for one key are
serialised with a per-key lock held across the whole read-modify-write
span, so two reports arriving together can never both survive for the
same source.  The repository is the only source of truth; nothing is
cached between calls.
"""

from __future__ import annotations

import logging

from repwatch.models.record import (
    BlacklistStatus,
    DomainRecord,
    Report,
    ToggleResult,
    utcnow,
)
from repwatch.models.report import ReportData
from repwatch.storage.backend import RecordRepository
from repwatch.store.locks import KeyedLock
from repwatch.store.scoring import ScorePolicy, last_writer_wins

logger = logging.getLogger("repwatch.store.reputation")


class ReputationStore:
    """Apply reports and blacklist changes to domain records.

    Args:
        repository: Persistence collaborator.
        score_policy: Combines the stored score with an incoming one.
            Defaults to last-writer-wins across all sources.
    """

    def __init__(
        self,
        repository: RecordRepository,
        score_policy: ScorePolicy = last_writer_wins,
    ) -> None:
        self._repository = repository
        self._score_policy = score_policy
        self._locks = KeyedLock()

    async def upsert_report(
        self,
        domain: str,
        source: str,
        data: ReportData,
        score: float | None = None,
    ) -> DomainRecord:
        """Record *source*'s latest verdict for *domain*.

        Any earlier report from the same source is replaced.  When *score*
        is given the record's ``current_score`` is updated through the
        configured score policy.
        """
        async with self._locks.hold(domain):
            report = Report(source=source, date=utcnow(), data=data)
            record = await self._repository.find_by_key(domain)

            if record is None:
                record = DomainRecord(domain=domain, reports=[report])
                if score is not None:
                    record.current_score = self._score_policy(None, score)
                logger.info("Created record for %s from %s", domain, source)
                return await self._repository.create(record)

            record.reports = [r for r in record.reports if r.source != source]
            record.reports.append(report)
            if score is not None:
                record.current_score = self._score_policy(record.current_score, score)
            logger.info("Updated %s report for %s", source, domain)
            return await self._repository.save(record)

    async def get_blacklist_status(self, domain: str) -> BlacklistStatus:
        """Return blacklist state; unknown domains are reported as not listed."""
        record = await self._repository.find_by_key(domain)
        if record is None:
            return BlacklistStatus(exists=False, is_blacklisted=False)
        return BlacklistStatus(
            exists=True,
            is_blacklisted=record.is_blacklisted,
            current_score=record.current_score,
        )

    async def toggle_blacklist(self, domain: str) -> ToggleResult:
        """Flip the blacklist flag.  The first toggle of an unknown domain lists it."""
        async with self._locks.hold(domain):
            record = await self._repository.find_by_key(domain)

            if record is None:
                record = DomainRecord(
                    domain=domain, is_blacklisted=True, blacklisted_at=utcnow()
                )
                await self._repository.create(record)
            else:
                record.is_blacklisted = not record.is_blacklisted
                record.blacklisted_at = utcnow() if record.is_blacklisted else None
                await self._repository.save(record)

        logger.info(
            "%s %s", "Blacklisted" if record.is_blacklisted else "Unblacklisted", domain
        )
        return ToggleResult(is_blacklisted=record.is_blacklisted)

    async def get_record(self, domain: str) -> DomainRecord | None:
        """Return the full record for *domain* without creating one."""
        return await self._repository.find_by_key(domain)

    async def list_blacklisted(self) -> list[str]:
        """Return blacklisted domain keys, most recently listed first."""
        return await self._repository.list_blacklisted()
