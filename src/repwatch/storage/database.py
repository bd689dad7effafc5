# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Database connection management and repository selection.

SQLite (aiosqlite) is the default backend.  ``memory`` keeps records in
the process only, which is useful for tests and throwaway runs.  The
active backend is controlled by ``REPWATCH_DB_BACKEND``.
"""

from __future__ import annotations

from pathlib import Path

import aiosqlite

from repwatch.core.exceptions import ConfigurationError, PersistenceError
from repwatch.storage.backend import RecordRepository
from repwatch.storage.migrations import run_migrations

_db: aiosqlite.Connection | None = None
_repository: RecordRepository | None = None


async def init_db(
    db_path: Path | str = "repwatch.db",
    *,
    auto_migrate: bool = True,
) -> aiosqlite.Connection:
    """Initialize database connection, optionally run migrations, return connection.

    Enables WAL mode for concurrent read performance.
    """
    global _db

    if _db is not None:
        return _db

    try:
        _db = await aiosqlite.connect(str(db_path))
        _db.row_factory = aiosqlite.Row

        await _db.execute("PRAGMA journal_mode=WAL")

        if auto_migrate:
            await run_migrations(_db)

        return _db
    except Exception as exc:
        if _db is not None:
            await _db.close()
        _db = None
        msg = f"Failed to initialize database at {db_path}: {exc}"
        raise PersistenceError(msg) from exc


async def init_repository(
    *,
    backend: str = "sqlite",
    db_path: Path | str = "repwatch.db",
    auto_migrate: bool = True,
) -> RecordRepository:
    """Initialise and return the configured :class:`RecordRepository`."""
    global _repository

    if _repository is not None:
        return _repository

    chosen = backend.lower()

    if chosen == "sqlite":
        conn = await init_db(db_path, auto_migrate=auto_migrate)
        from repwatch.storage.repositories.records import SQLiteRecordRepository

        _repository = SQLiteRecordRepository(conn)
        return _repository

    if chosen == "memory":
        from repwatch.storage.memory import MemoryRecordRepository

        _repository = MemoryRecordRepository()
        return _repository

    msg = f"Unknown database backend: {chosen!r}. Expected 'sqlite' or 'memory'."
    raise ConfigurationError(msg)


async def get_db() -> aiosqlite.Connection:
    """Get the active database connection.

    Raises PersistenceError if the database has not been initialized.
    """
    if _db is None:
        raise PersistenceError("Database not initialized. Call init_db() first.")
    return _db


async def get_repository() -> RecordRepository:
    """Get the active :class:`RecordRepository`.

    Falls back to wrapping an already-open SQLite connection so callers
    that only ran :func:`init_db` still get a repository.
    """
    global _repository

    if _repository is None and _db is not None:
        from repwatch.storage.repositories.records import SQLiteRecordRepository

        _repository = SQLiteRecordRepository(_db)

    if _repository is None:
        raise PersistenceError("Repository not initialized. Call init_repository() first.")
    return _repository


async def close_db() -> None:
    """Close the repository and database connection."""
    global _db, _repository

    if _repository is not None:
        await _repository.close()
        _repository = None

    if _db is not None:
        await _db.close()
        _db = None
