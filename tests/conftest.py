# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any

import pytest

from repwatch.adapters.base import VerdictAdapter
from repwatch.storage.memory import MemoryRecordRepository
from repwatch.store.reputation import ReputationStore

_PROVIDER_ENV = (
    "REPWATCH_IPQS_KEY",
    "REPWATCH_VT_KEY",
    "REPWATCH_GOOGLE_KEY",
    "REPWATCH_SSLLABS_EMAIL",
    "REPWATCH_API_KEYS",
    "REPWATCH_ENABLED_SOURCES",
    "REPWATCH_SCORE_POLICY",
    "REPWATCH_DB_BACKEND",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep developer credentials and ``.env`` files out of tests."""
    for name in _PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _clear_rate_limit_state():
    """Reset the in-memory rate-limit state between tests."""
    from repwatch.api.middleware import _request_log

    _request_log.clear()
    yield
    _request_log.clear()


class StubAdapter(VerdictAdapter):
    """Adapter returning a canned payload or raising a canned error."""

    def __init__(
        self,
        source: str,
        payload: Any = None,
        error: Exception | None = None,
        configured: bool = True,
        delay: float = 0.0,
    ) -> None:
        super().__init__(timeout=1.0)
        self.source = source
        self.payload = payload
        self.error = error
        self.configured = configured
        self.delay = delay
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def is_configured(self) -> bool:
        return self.configured

    async def _fetch(self, target_url: str, **options: Any) -> Any:
        import asyncio

        self.calls.append((target_url, options))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def repository() -> MemoryRecordRepository:
    return MemoryRecordRepository()


@pytest.fixture
def store(repository) -> ReputationStore:
    return ReputationStore(repository)


@pytest.fixture(autouse=True)
def _reset_storage_state():
    """Forget any connection or repository left over from a previous test."""
    import repwatch.storage.database as db_mod

    db_mod._db = None
    db_mod._repository = None
    yield
    db_mod._db = None
    db_mod._repository = None
