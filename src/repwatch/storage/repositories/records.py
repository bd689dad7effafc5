# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Repository for domain reputation records."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import aiosqlite
import pydantic

from repwatch.core.exceptions import PersistenceError
from repwatch.models.record import DomainRecord, Report
from repwatch.storage.backend import RecordRepository


class SQLiteRecordRepository(RecordRepository):
    """CRUD operations for the domain_records table.

    Reports and tags are stored as JSON documents alongside the scalar
    columns, so one row holds the whole record.
    """

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def find_by_key(self, domain: str) -> DomainRecord | None:
        """Retrieve a record by domain key."""
        try:
            cursor = await self._db.execute(
                "SELECT * FROM domain_records WHERE domain = ?", (domain,)
            )
            row = await cursor.fetchone()
        except (aiosqlite.Error, ValueError) as exc:
            raise PersistenceError(f"Failed to load record for {domain!r}: {exc}") from exc
        if row is None:
            return None
        return self._row_to_record(row)

    async def create(self, record: DomainRecord) -> DomainRecord:
        """Insert a new record; the domain key must be unused."""
        now = datetime.now(UTC).isoformat()
        try:
            await self._db.execute(
                """
                INSERT INTO domain_records (
                    domain, current_score, is_blacklisted, blacklisted_at,
                    tags, reports, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (*self._record_to_params(record), now, now),
            )
            await self._db.commit()
        except aiosqlite.IntegrityError as exc:
            raise PersistenceError(f"Record for {record.domain!r} already exists") from exc
        except (aiosqlite.Error, ValueError) as exc:
            raise PersistenceError(f"Failed to create record for {record.domain!r}: {exc}") from exc
        return record

    async def save(self, record: DomainRecord) -> DomainRecord:
        """Overwrite the stored state of an existing record."""
        domain, score, blacklisted, blacklisted_at, tags, reports = self._record_to_params(record)
        try:
            cursor = await self._db.execute(
                """
                UPDATE domain_records
                SET current_score = ?, is_blacklisted = ?, blacklisted_at = ?,
                    tags = ?, reports = ?, updated_at = ?
                WHERE domain = ?
                """,
                (
                    score,
                    blacklisted,
                    blacklisted_at,
                    tags,
                    reports,
                    datetime.now(UTC).isoformat(),
                    domain,
                ),
            )
            await self._db.commit()
        except (aiosqlite.Error, ValueError) as exc:
            raise PersistenceError(f"Failed to save record for {domain!r}: {exc}") from exc
        if cursor.rowcount == 0:
            raise PersistenceError(f"No record for {domain!r} to save")
        return record

    async def count(self) -> int:
        try:
            cursor = await self._db.execute("SELECT COUNT(*) FROM domain_records")
            row = await cursor.fetchone()
        except (aiosqlite.Error, ValueError) as exc:
            raise PersistenceError(f"Failed to count records: {exc}") from exc
        return int(row[0]) if row else 0

    async def list_blacklisted(self) -> list[str]:
        """Return every blacklisted domain key, most recently listed first."""
        try:
            cursor = await self._db.execute(
                "SELECT domain FROM domain_records WHERE is_blacklisted = 1 "
                "ORDER BY blacklisted_at DESC"
            )
            rows = await cursor.fetchall()
        except (aiosqlite.Error, ValueError) as exc:
            raise PersistenceError(f"Failed to list blacklisted domains: {exc}") from exc
        return [row[0] for row in rows]

    @property
    def backend_name(self) -> str:
        return "sqlite"

    @staticmethod
    def _record_to_params(record: DomainRecord) -> tuple[Any, ...]:
        return (
            record.domain,
            record.current_score,
            int(record.is_blacklisted),
            record.blacklisted_at.isoformat() if record.blacklisted_at else None,
            json.dumps(record.tags),
            json.dumps([r.model_dump(mode="json") for r in record.reports]),
        )

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> DomainRecord:
        """Convert a database row to a DomainRecord model."""
        data = dict(row)
        try:
            return SQLiteRecordRepository._decode(data)
        except (ValueError, TypeError, pydantic.ValidationError) as exc:
            raise PersistenceError(
                f"Stored record for {data.get('domain')!r} is corrupt: {exc}"
            ) from exc

    @staticmethod
    def _decode(data: dict[str, Any]) -> DomainRecord:
        return DomainRecord(
            domain=data["domain"],
            current_score=data.get("current_score"),
            is_blacklisted=bool(data.get("is_blacklisted")),
            blacklisted_at=(
                datetime.fromisoformat(data["blacklisted_at"])
                if data.get("blacklisted_at")
                else None
            ),
            tags=json.loads(data.get("tags") or "[]"),
            reports=[Report.model_validate(r) for r in json.loads(data.get("reports") or "[]")],
        )
