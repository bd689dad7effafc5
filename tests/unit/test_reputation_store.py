# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for the reputation store: report replacement, scoring and blacklist."""

from __future__ import annotations

import asyncio

import pytest

from repwatch.core.constants import Source
from repwatch.core.exceptions import ConfigurationError
from repwatch.models.report import (
    CertificateReportData,
    IpqsReportData,
    SafeBrowsingReportData,
)
from repwatch.store.locks import KeyedLock
from repwatch.store.reputation import ReputationStore
from repwatch.store.scoring import get_score_policy, last_writer_wins, max_risk


def _ipqs(score: float) -> IpqsReportData:
    return IpqsReportData(unsafe=score >= 75, risk_score=score)


class TestUpsertReport:
    async def test_creates_record_on_first_report(self, store, repository) -> None:
        record = await store.upsert_report("evil.example", Source.IPQS, _ipqs(85), 85)

        assert record.domain == "evil.example"
        assert record.current_score == 85
        assert record.is_blacklisted is False
        assert [r.source for r in record.reports] == [Source.IPQS]
        assert await repository.count() == 1

    async def test_same_source_replaces_previous_report(self, store) -> None:
        await store.upsert_report("evil.example", Source.IPQS, _ipqs(40), 40)
        record = await store.upsert_report("evil.example", Source.IPQS, _ipqs(90), 90)

        assert len(record.reports) == 1
        assert record.reports[0].data.risk_score == 90
        assert record.current_score == 90

    async def test_reports_from_different_sources_coexist(self, store) -> None:
        await store.upsert_report("evil.example", Source.IPQS, _ipqs(50), 50)
        await store.upsert_report(
            "evil.example", Source.GOOGLE, SafeBrowsingReportData(safe=True)
        )
        record = await store.upsert_report(
            "evil.example", Source.CRT, CertificateReportData(count=3)
        )

        assert sorted(r.source for r in record.reports) == sorted(
            [Source.IPQS, Source.GOOGLE, Source.CRT]
        )

    async def test_report_without_score_keeps_current_score(self, store) -> None:
        await store.upsert_report("evil.example", Source.IPQS, _ipqs(70), 70)
        record = await store.upsert_report(
            "evil.example", Source.GOOGLE, SafeBrowsingReportData(safe=True)
        )
        assert record.current_score == 70

    async def test_report_without_score_on_new_record(self, store) -> None:
        record = await store.upsert_report(
            "new.example", Source.CRT, CertificateReportData(count=0)
        )
        assert record.current_score is None

    async def test_upsert_preserves_blacklist_flag(self, store) -> None:
        await store.toggle_blacklist("evil.example")
        record = await store.upsert_report("evil.example", Source.IPQS, _ipqs(10), 10)

        assert record.is_blacklisted is True
        assert record.blacklisted_at is not None

    async def test_persisted_state_matches_returned_record(self, store, repository) -> None:
        returned = await store.upsert_report("evil.example", Source.IPQS, _ipqs(33), 33)
        stored = await repository.find_by_key("evil.example")
        assert stored == returned

    async def test_concurrent_same_source_reports_leave_one(self, store) -> None:
        await asyncio.gather(
            *(
                store.upsert_report("race.example", Source.IPQS, _ipqs(s), s)
                for s in (10, 20, 30, 40, 50)
            )
        )
        record = await store.get_record("race.example")

        assert record is not None
        assert len(record.reports) == 1
        assert record.current_score == record.reports[0].data.risk_score

    async def test_concurrent_first_reports_create_one_record(self, store, repository) -> None:
        await asyncio.gather(
            store.upsert_report("fresh.example", Source.IPQS, _ipqs(10), 10),
            store.upsert_report("fresh.example", Source.GOOGLE, SafeBrowsingReportData()),
            store.upsert_report("fresh.example", Source.CRT, CertificateReportData()),
        )
        record = await store.get_record("fresh.example")

        assert await repository.count() == 1
        assert record is not None
        assert len(record.reports) == 3


class TestScorePolicies:
    async def test_score_from_another_source_overwrites(self, store) -> None:
        await store.upsert_report("evil.example", "SourceA", _ipqs(10), 10)
        record = await store.upsert_report("evil.example", "SourceB", _ipqs(90), 90)
        assert record.current_score == 90

    async def test_last_writer_wins_overwrites_with_lower_score(self, store) -> None:
        await store.upsert_report("evil.example", Source.IPQS, _ipqs(90), 90)
        record = await store.upsert_report("evil.example", "Other", _ipqs(5), 5)
        assert record.current_score == 5

    async def test_max_risk_keeps_highest(self, repository) -> None:
        store = ReputationStore(repository, score_policy=max_risk)
        await store.upsert_report("evil.example", Source.IPQS, _ipqs(90), 90)
        record = await store.upsert_report("evil.example", "Other", _ipqs(5), 5)
        assert record.current_score == 90

    def test_policy_functions(self) -> None:
        assert last_writer_wins(80, 20) == 20
        assert last_writer_wins(None, 20) == 20
        assert max_risk(80, 20) == 80
        assert max_risk(None, 20) == 20

    def test_lookup_by_name(self) -> None:
        assert get_score_policy("last_writer") is last_writer_wins
        assert get_score_policy("max_risk") is max_risk

    def test_unknown_policy(self) -> None:
        with pytest.raises(ConfigurationError):
            get_score_policy("average")


class TestBlacklist:
    async def test_unknown_domain_is_not_blacklisted(self, store, repository) -> None:
        status = await store.get_blacklist_status("never-seen.example")

        assert status.exists is False
        assert status.is_blacklisted is False
        assert await repository.count() == 0

    async def test_first_toggle_creates_blacklisted_record(self, store) -> None:
        result = await store.toggle_blacklist("bad.example")
        record = await store.get_record("bad.example")

        assert result.is_blacklisted is True
        assert record is not None
        assert record.is_blacklisted is True
        assert record.blacklisted_at is not None
        assert record.reports == []

    async def test_second_toggle_clears_flag_and_timestamp(self, store) -> None:
        await store.toggle_blacklist("bad.example")
        result = await store.toggle_blacklist("bad.example")
        record = await store.get_record("bad.example")

        assert result.is_blacklisted is False
        assert record is not None
        assert record.is_blacklisted is False
        assert record.blacklisted_at is None

    async def test_toggle_keeps_reports_and_score(self, store) -> None:
        await store.upsert_report("bad.example", Source.IPQS, _ipqs(60), 60)
        await store.toggle_blacklist("bad.example")
        record = await store.get_record("bad.example")

        assert record is not None
        assert record.current_score == 60
        assert len(record.reports) == 1

    async def test_status_reflects_record(self, store) -> None:
        await store.upsert_report("bad.example", Source.IPQS, _ipqs(60), 60)
        await store.toggle_blacklist("bad.example")
        status = await store.get_blacklist_status("bad.example")

        assert status.exists is True
        assert status.is_blacklisted is True
        assert status.current_score == 60

    async def test_list_blacklisted(self, store) -> None:
        await store.toggle_blacklist("a.example")
        await store.toggle_blacklist("b.example")
        await store.toggle_blacklist("c.example")
        await store.toggle_blacklist("c.example")

        assert sorted(await store.list_blacklisted()) == ["a.example", "b.example"]


class TestKeyedLock:
    async def test_serialises_same_key(self) -> None:
        locks = KeyedLock()
        order: list[str] = []

        async def worker(name: str) -> None:
            async with locks.hold("k"):
                order.append(f"{name}-in")
                await asyncio.sleep(0.01)
                order.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))
        assert order in (
            ["a-in", "a-out", "b-in", "b-out"],
            ["b-in", "b-out", "a-in", "a-out"],
        )

    async def test_idle_locks_are_released(self) -> None:
        locks = KeyedLock()
        async with locks.hold("k"):
            assert len(locks) == 1
        assert len(locks) == 0
