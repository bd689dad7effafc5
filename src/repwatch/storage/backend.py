# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract persistence interface for domain reputation records.

The reputation store only needs three document-style operations: look a
record up by its domain key, create a new one, and save an existing one.
Both the SQLite (aiosqlite) and in-memory repositories implement this
interface so the store can stay backend-agnostic.
"""

from __future__ import annotations

import abc

from repwatch.models.record import DomainRecord


class RecordRepository(abc.ABC):
    """Abstract base class for async domain record repositories.

    Every method raises :class:`~repwatch.core.exceptions.PersistenceError`
    when the underlying storage is unreachable or rejects the operation.
    """

    @abc.abstractmethod
    async def find_by_key(self, domain: str) -> DomainRecord | None:
        """Return the record stored under *domain*, or ``None``."""

    @abc.abstractmethod
    async def create(self, record: DomainRecord) -> DomainRecord:
        """Insert a new record.  Fails if the domain key is already taken."""

    @abc.abstractmethod
    async def save(self, record: DomainRecord) -> DomainRecord:
        """Overwrite an existing record.  Fails if the key does not exist."""

    @abc.abstractmethod
    async def count(self) -> int:
        """Return the number of stored records."""

    @abc.abstractmethod
    async def list_blacklisted(self) -> list[str]:
        """Return every blacklisted domain key, most recently listed first."""

    async def close(self) -> None:
        """Release any resources held by the repository."""

    @property
    @abc.abstractmethod
    def backend_name(self) -> str:
        """Return ``'sqlite'`` or ``'memory'``."""
