# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Storage layer -- record repositories, database lifecycle, and migrations."""

from repwatch.storage.backend import RecordRepository
from repwatch.storage.database import close_db, get_db, get_repository, init_db, init_repository
from repwatch.storage.memory import MemoryRecordRepository
from repwatch.storage.migrations import run_migrations
from repwatch.storage.repositories.records import SQLiteRecordRepository

__all__ = [
    "MemoryRecordRepository",
    "RecordRepository",
    "SQLiteRecordRepository",
    "close_db",
    "get_db",
    "get_repository",
    "init_db",
    "init_repository",
    "run_migrations",
]
