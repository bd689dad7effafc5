# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""In-memory record repository.

Records are kept as serialised JSON so callers never share a live object
with the repository; every read hands back a fresh copy, the same as a
round-trip through a real database.
"""

from __future__ import annotations

from repwatch.core.exceptions import PersistenceError
from repwatch.models.record import DomainRecord
from repwatch.storage.backend import RecordRepository


class MemoryRecordRepository(RecordRepository):
    """Dict-backed :class:`RecordRepository` for tests and ephemeral runs."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    async def find_by_key(self, domain: str) -> DomainRecord | None:
        raw = self._store.get(domain)
        if raw is None:
            return None
        return DomainRecord.model_validate_json(raw)

    async def create(self, record: DomainRecord) -> DomainRecord:
        if record.domain in self._store:
            raise PersistenceError(f"Record for {record.domain!r} already exists")
        self._store[record.domain] = record.model_dump_json()
        return record

    async def save(self, record: DomainRecord) -> DomainRecord:
        if record.domain not in self._store:
            raise PersistenceError(f"No record for {record.domain!r} to save")
        self._store[record.domain] = record.model_dump_json()
        return record

    async def count(self) -> int:
        return len(self._store)

    async def list_blacklisted(self) -> list[str]:
        records = [DomainRecord.model_validate_json(raw) for raw in self._store.values()]
        listed = [r for r in records if r.is_blacklisted and r.blacklisted_at is not None]
        listed.sort(key=lambda r: r.blacklisted_at, reverse=True)
        return [r.domain for r in listed]

    async def close(self) -> None:
        self._store.clear()

    @property
    def backend_name(self) -> str:
        return "memory"
