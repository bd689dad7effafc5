# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Versioned schema migrations for the repwatch SQLite database.

Each migration is a list of DDL statements applied inside one
transaction together with its ``schema_migrations`` bookkeeping row, so a
failed migration leaves the schema at the previous version.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

import aiosqlite

from repwatch.core.exceptions import PersistenceError

logger = logging.getLogger("repwatch.storage.migrations")


@dataclass(frozen=True, slots=True)
class Migration:
    version: int
    name: str
    statements: tuple[str, ...]


_MIGRATIONS: list[Migration] = []


def _register(
    version: int, name: str
) -> Callable[[Callable[[], list[str]]], Callable[[], list[str]]]:
    """Register the statements returned by the decorated function."""

    def decorator(build: Callable[[], list[str]]) -> Callable[[], list[str]]:
        if any(m.version == version for m in _MIGRATIONS):
            raise ValueError(f"Duplicate migration version {version}")
        _MIGRATIONS.append(Migration(version, name, tuple(build())))
        _MIGRATIONS.sort(key=lambda m: m.version)
        return build

    return decorator


async def get_current_version(db: aiosqlite.Connection) -> int:
    """Return the highest applied migration version, or 0 if none."""
    await db.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            applied_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
        """
    )
    await db.commit()
    cursor = await db.execute("SELECT COALESCE(MAX(version), 0) FROM schema_migrations")
    row = await cursor.fetchone()
    return int(row[0]) if row else 0


async def get_pending_migrations(db: aiosqlite.Connection) -> list[Migration]:
    current = await get_current_version(db)
    return [m for m in _MIGRATIONS if m.version > current]


async def run_migrations(db: aiosqlite.Connection) -> list[Migration]:
    """Apply pending migrations in version order and return those applied.

    Raises:
        PersistenceError: if a migration fails; it is rolled back and no
            later migration is attempted.
    """
    applied: list[Migration] = []
    for migration in await get_pending_migrations(db):
        logger.info("Applying migration %03d: %s", migration.version, migration.name)
        try:
            await db.execute("BEGIN")
            for statement in migration.statements:
                await db.execute(statement)
            await db.execute(
                "INSERT INTO schema_migrations (version, name) VALUES (?, ?)",
                (migration.version, migration.name),
            )
            await db.commit()
        except aiosqlite.Error as exc:
            await db.rollback()
            raise PersistenceError(
                f"Migration {migration.version:03d} ({migration.name}) failed: {exc}"
            ) from exc
        applied.append(migration)
    return applied


# ---------------------------------------------------------------------------
# 001: one row per canonical domain; reports and tags are JSON documents
# ---------------------------------------------------------------------------


@_register(1, "domain_records")
def _domain_records() -> list[str]:
    return [
        """
        CREATE TABLE IF NOT EXISTS domain_records (
            domain TEXT PRIMARY KEY,
            current_score REAL,
            is_blacklisted INTEGER NOT NULL DEFAULT 0,
            blacklisted_at TEXT,
            tags TEXT NOT NULL DEFAULT '[]',
            reports TEXT NOT NULL DEFAULT '[]',
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
        """,
        """
        CREATE INDEX IF NOT EXISTS idx_domain_records_blacklisted
        ON domain_records(is_blacklisted, blacklisted_at)
        """,
    ]
