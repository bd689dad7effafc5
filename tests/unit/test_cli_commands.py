# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Unit tests for CLI commands: check, status, toggle, show, db."""

from __future__ import annotations

import json
from unittest.mock import patch

import httpx
import pytest
import respx
from typer.testing import CliRunner

from repwatch.cli.app import app
from repwatch.core.constants import CRTSH_ENDPOINT

runner = CliRunner()


@pytest.fixture(autouse=True)
def _db_path(tmp_path, monkeypatch):
    monkeypatch.setenv("REPWATCH_DB_PATH", str(tmp_path / "cli.db"))


def _invoke(*args: str):
    return runner.invoke(app, ["--log-level", "ERROR", *args])


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


class TestCheck:
    @respx.mock
    def test_check_crt_json(self) -> None:
        respx.get(CRTSH_ENDPOINT).mock(
            return_value=httpx.Response(200, json=[{"id": 1, "common_name": "evil.example"}])
        )
        result = _invoke("check", "crt", "https://evil.example/login", "--json")

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output[result.output.index("{"):])
        assert payload["domain"] == "evil.example"
        assert payload["reports"][0]["source"] == "CRT"
        assert payload["reports"][0]["data"]["count"] == 1

    @respx.mock
    def test_check_crt_table(self) -> None:
        respx.get(CRTSH_ENDPOINT).mock(return_value=httpx.Response(200, json=[]))
        result = _invoke("check", "crt", "evil.example")

        assert result.exit_code == 0, result.output
        assert "evil.example" in result.output
        assert "0 certificate(s) logged" in result.output

    def test_check_missing_credentials(self) -> None:
        result = _invoke("check", "ipqs", "evil.example")
        assert result.exit_code == 1
        assert "AuthConfigError" in result.output

    def test_check_invalid_url(self) -> None:
        result = _invoke("check", "crt", "http://")
        assert result.exit_code == 1
        assert "ValidationError" in result.output

    def test_check_unknown_source(self) -> None:
        result = _invoke("check", "shodan", "evil.example")
        assert result.exit_code == 1
        assert "Unknown reputation source" in result.output

    @respx.mock
    def test_check_upstream_failure(self) -> None:
        respx.get(CRTSH_ENDPOINT).mock(return_value=httpx.Response(502, text="bad gateway"))
        result = _invoke("check", "crt", "evil.example")
        assert result.exit_code == 1
        assert "UpstreamError" in result.output


class TestCheckAll:
    @respx.mock
    def test_only_credential_free_sources_run(self) -> None:
        respx.get(CRTSH_ENDPOINT).mock(return_value=httpx.Response(200, json=[]))
        result = _invoke("check-all", "evil.example", "--json")

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output[result.output.index("{"):])
        assert payload["succeeded"] == ["CRT"]
        assert "IPQS" in payload["skipped"]
        assert payload["record"]["domain"] == "evil.example"


# ---------------------------------------------------------------------------
# blacklist
# ---------------------------------------------------------------------------


class TestBlacklistCommands:
    def test_status_unknown(self) -> None:
        result = _invoke("status", "https://nowhere.example/")
        assert result.exit_code == 0
        assert "not in database" in result.output

    def test_toggle_then_status(self) -> None:
        first = _invoke("toggle", "bad.example")
        assert first.exit_code == 0
        assert "blacklisted" in first.output

        status = _invoke("status", "https://bad.example/path")
        assert "BLACKLISTED" in status.output

        listed = _invoke("blacklisted")
        assert "bad.example" in listed.output

        second = _invoke("toggle", "bad.example")
        assert "removed from blacklist" in second.output

    def test_blacklisted_empty(self) -> None:
        result = _invoke("blacklisted")
        assert result.exit_code == 0
        assert "No blacklisted domains" in result.output


class TestShow:
    def test_missing_record(self) -> None:
        result = _invoke("show", "nowhere.example")
        assert result.exit_code == 1
        assert "No record" in result.output

    def test_blacklisted_record(self) -> None:
        _invoke("toggle", "bad.example")
        result = _invoke("show", "bad.example")
        assert result.exit_code == 0
        assert "BLACKLISTED" in result.output
        assert "No reports recorded" in result.output


# ---------------------------------------------------------------------------
# db
# ---------------------------------------------------------------------------


class TestDbCommands:
    def test_init_and_stats(self) -> None:
        init = _invoke("db", "init")
        assert init.exit_code == 0
        assert "Database initialized" in init.output

        _invoke("toggle", "bad.example")
        stats = _invoke("db", "stats")
        assert stats.exit_code == 0
        assert "domain records" in stats.output
        assert "sqlite" in stats.output

    def test_migrate_fresh_database(self) -> None:
        result = _invoke("db", "migrate")
        assert result.exit_code == 0
        assert "Applied migration 001: domain_records" in result.output

    def test_migrate_dry_run(self) -> None:
        result = _invoke("db", "migrate", "--dry-run")
        assert result.exit_code == 0
        assert "Pending migration 001: domain_records" in result.output

        applied = _invoke("db", "migrate")
        assert "Applied migration 001" in applied.output

    def test_migrate_up_to_date(self) -> None:
        _invoke("db", "init")
        result = _invoke("db", "migrate")
        assert "No pending migrations" in result.output


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


class TestServe:
    def test_uses_settings_defaults(self, monkeypatch) -> None:
        monkeypatch.setenv("REPWATCH_API_PORT", "9100")
        with patch("uvicorn.run") as run:
            result = _invoke("serve", "--host", "0.0.0.0")

        assert result.exit_code == 0, result.output
        args, kwargs = run.call_args
        assert args == ("repwatch.api.app:create_app",)
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 9100
        assert kwargs["workers"] == 1
        assert kwargs["factory"] is True
