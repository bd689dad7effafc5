# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for the aggregation orchestrator."""

from __future__ import annotations

import pytest

from repwatch.adapters.base import MissingCredentialError, NetworkError, UpstreamHTTPError
from repwatch.core.config import Settings
from repwatch.core.constants import Source
from repwatch.core.exceptions import (
    AuthConfigError,
    PersistenceError,
    UpstreamError,
    ValidationError,
)
from repwatch.models.report import IpqsReportData, SafeBrowsingReportData
from repwatch.orchestrator import AggregationOrchestrator
from repwatch.storage.memory import MemoryRecordRepository
from repwatch.store.reputation import ReputationStore
from repwatch.store.scoring import max_risk
from conftest import StubAdapter

IPQS_PAYLOAD = {"success": True, "unsafe": True, "risk_score": 85, "phishing": True}


def _orchestrator(store, *adapters, timeout: float = 1.0) -> AggregationOrchestrator:
    return AggregationOrchestrator(store, {a.source: a for a in adapters}, timeout=timeout)


class TestCheck:
    async def test_stores_formatted_report_and_score(self, store) -> None:
        ipqs = StubAdapter(Source.IPQS, payload=IPQS_PAYLOAD)
        orch = _orchestrator(store, ipqs)

        record = await orch.check("IPQS", "http://Evil.Example/login")

        assert record.domain == "evil.example"
        assert record.current_score == 85
        report = record.report_for(Source.IPQS)
        assert report is not None
        assert isinstance(report.data, IpqsReportData)
        assert report.data.threats.phishing is True

    async def test_adapter_receives_original_url(self, store) -> None:
        ipqs = StubAdapter(Source.IPQS, payload=IPQS_PAYLOAD)
        await _orchestrator(store, ipqs).check("ipqs", "http://evil.example/login?a=1")
        assert ipqs.calls == [("http://evil.example/login?a=1", {})]

    async def test_options_are_forwarded(self, store) -> None:
        ipqs = StubAdapter(Source.IPQS, payload=IPQS_PAYLOAD)
        await _orchestrator(store, ipqs).check("IPQS", "evil.example", strictness=2)
        assert ipqs.calls[0][1] == {"strictness": 2}

    async def test_source_without_score_leaves_score_alone(self, store) -> None:
        orch = _orchestrator(
            store,
            StubAdapter(Source.IPQS, payload=IPQS_PAYLOAD),
            StubAdapter(Source.GOOGLE, payload={}),
        )
        await orch.check("IPQS", "evil.example")
        record = await orch.check("google", "evil.example")

        assert record.current_score == 85
        google = record.report_for(Source.GOOGLE)
        assert google is not None
        assert isinstance(google.data, SafeBrowsingReportData)
        assert google.data.safe is True

    async def test_invalid_url_never_calls_adapter(self, store, repository) -> None:
        ipqs = StubAdapter(Source.IPQS, payload=IPQS_PAYLOAD)
        with pytest.raises(ValidationError):
            await _orchestrator(store, ipqs).check("IPQS", "http://")
        assert ipqs.calls == []
        assert await repository.count() == 0

    async def test_unknown_source(self, store) -> None:
        with pytest.raises(ValidationError):
            await _orchestrator(store).check("Shodan", "evil.example")

    async def test_malformed_payload_is_upstream_error(self, store, repository) -> None:
        ipqs = StubAdapter(Source.IPQS, payload={"risk_score": "N/A", "spamming": "maybe"})
        with pytest.raises(UpstreamError) as exc_info:
            await _orchestrator(store, ipqs).check("IPQS", "evil.example")
        assert exc_info.value.source == Source.IPQS
        assert await repository.count() == 0

    async def test_url_variants_share_one_record(self, store, repository) -> None:
        orch = _orchestrator(
            store,
            StubAdapter(Source.IPQS, payload=IPQS_PAYLOAD),
            StubAdapter(Source.CRT, payload=[{"id": 1}]),
        )
        await orch.check("IPQS", "example.com")
        await orch.check("crt", "https://example.com/path")
        record = await orch.check("IPQS", "EXAMPLE.com:443")

        assert await repository.count() == 1
        assert record.domain == "example.com"
        assert sorted(r.source for r in record.reports) == sorted([Source.IPQS, Source.CRT])

    async def test_missing_credentials(self, store, repository) -> None:
        orch = _orchestrator(store, StubAdapter(Source.VIRUSTOTAL, configured=False))
        with pytest.raises(AuthConfigError) as exc_info:
            await orch.check("vt", "evil.example")
        assert exc_info.value.source == Source.VIRUSTOTAL
        assert await repository.count() == 0

    async def test_rejected_credentials(self, store) -> None:
        adapter = StubAdapter(
            Source.IPQS, error=MissingCredentialError("Invalid key", source=Source.IPQS)
        )
        with pytest.raises(AuthConfigError):
            await _orchestrator(store, adapter).check("IPQS", "evil.example")

    async def test_upstream_http_error(self, store, repository) -> None:
        adapter = StubAdapter(
            Source.IPQS,
            error=UpstreamHTTPError("boom", source=Source.IPQS, status=500, body={"m": 1}),
        )
        with pytest.raises(UpstreamError) as exc_info:
            await _orchestrator(store, adapter).check("IPQS", "evil.example")

        assert exc_info.value.status == 500
        assert exc_info.value.detail == {"m": 1}
        assert await repository.count() == 0

    async def test_network_error(self, store) -> None:
        adapter = StubAdapter(Source.CRT, error=NetworkError("down", source=Source.CRT))
        with pytest.raises(UpstreamError):
            await _orchestrator(store, adapter).check("crt", "evil.example")

    async def test_timeout(self, store, repository) -> None:
        slow = StubAdapter(Source.IPQS, payload=IPQS_PAYLOAD, delay=1.0)
        with pytest.raises(UpstreamError, match="did not answer"):
            await _orchestrator(store, slow, timeout=0.05).check("IPQS", "evil.example")
        assert await repository.count() == 0

    async def test_failure_keeps_previous_report(self, store) -> None:
        good = StubAdapter(Source.IPQS, payload=IPQS_PAYLOAD)
        orch = _orchestrator(store, good)
        await orch.check("IPQS", "evil.example")

        good.error = NetworkError("down", source=Source.IPQS)
        with pytest.raises(UpstreamError):
            await orch.check("IPQS", "evil.example")

        record = await orch.lookup("evil.example")
        assert record is not None
        assert record.current_score == 85


class TestResolveSource:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("IPQS", Source.IPQS),
            ("ipqs", Source.IPQS),
            ("vt", Source.VIRUSTOTAL),
            ("VirusTotal", Source.VIRUSTOTAL),
            ("safebrowsing", Source.GOOGLE),
            ("ssl", Source.SSLLABS),
        ],
    )
    def test_aliases(self, store, name, expected) -> None:
        orch = _orchestrator(
            store,
            StubAdapter(Source.IPQS),
            StubAdapter(Source.VIRUSTOTAL),
            StubAdapter(Source.GOOGLE),
            StubAdapter(Source.SSLLABS),
        )
        assert orch.resolve_source(name) == expected


class TestCheckAll:
    async def test_collects_successes_errors_and_skips(self, store) -> None:
        orch = _orchestrator(
            store,
            StubAdapter(Source.IPQS, payload=IPQS_PAYLOAD),
            StubAdapter(Source.CRT, payload=[{"id": 1}]),
            StubAdapter(Source.GOOGLE, error=NetworkError("down", source=Source.GOOGLE)),
            StubAdapter(Source.VIRUSTOTAL, configured=False),
        )

        result = await orch.check_all("https://evil.example/x")

        assert result.domain == "evil.example"
        assert sorted(result.succeeded) == sorted([Source.IPQS, Source.CRT])
        assert list(result.errors) == [Source.GOOGLE]
        assert result.skipped == [Source.VIRUSTOTAL]
        assert result.record is not None
        assert sorted(r.source for r in result.record.reports) == sorted(
            [Source.IPQS, Source.CRT]
        )

    async def test_malformed_payload_does_not_discard_other_sources(self, store) -> None:
        orch = _orchestrator(
            store,
            StubAdapter(Source.IPQS, payload={"risk_score": "N/A"}),
            StubAdapter(Source.GOOGLE, payload={}),
        )

        result = await orch.check_all("evil.example")

        assert result.succeeded == [Source.GOOGLE]
        assert list(result.errors) == [Source.IPQS]
        assert "malformed" in result.errors[Source.IPQS]
        assert result.record is not None
        assert [r.source for r in result.record.reports] == [Source.GOOGLE]

    async def test_all_failed_leaves_no_record(self, store) -> None:
        orch = _orchestrator(
            store, StubAdapter(Source.CRT, error=NetworkError("down", source=Source.CRT))
        )
        result = await orch.check_all("evil.example")
        assert result.succeeded == []
        assert result.record is None

    async def test_persistence_failure_propagates(self) -> None:
        class BrokenRepository(MemoryRecordRepository):
            async def create(self, record):
                raise PersistenceError("disk full")

        orch = _orchestrator(
            ReputationStore(BrokenRepository()),
            StubAdapter(Source.CRT, payload=[]),
        )
        with pytest.raises(PersistenceError):
            await orch.check_all("evil.example")

    async def test_invalid_url(self, store) -> None:
        with pytest.raises(ValidationError):
            await _orchestrator(store, StubAdapter(Source.CRT)).check_all("")


class TestBlacklistOperations:
    async def test_status_for_unknown_domain(self, store) -> None:
        status = await _orchestrator(store).blacklist_status("https://nowhere.example/")
        assert status.exists is False
        assert status.is_blacklisted is False

    async def test_toggle_normalizes_url(self, store) -> None:
        orch = _orchestrator(store)
        await orch.toggle_blacklist("https://Bad.Example/path")
        status = await orch.blacklist_status("bad.example")
        assert status.is_blacklisted is True

    async def test_toggle_rejects_bad_url(self, store) -> None:
        with pytest.raises(ValidationError):
            await _orchestrator(store).toggle_blacklist("http://")


class TestFromSettings:
    def test_builds_store_and_adapters(self) -> None:
        settings = Settings(ipqs_key="k", score_policy="max_risk", adapter_timeout=4)
        orch = AggregationOrchestrator.from_settings(settings, MemoryRecordRepository())

        assert orch.timeout == 4
        assert Source.IPQS in orch.adapters
        assert orch.store._score_policy is max_risk
