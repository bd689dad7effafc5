# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Per-domain reputation record models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from repwatch.models.report import ReportData, report_data_type


def utcnow() -> datetime:
    return datetime.now(UTC)


class Report(BaseModel):
    """The latest verdict from one source for one domain."""

    source: str
    date: datetime = Field(default_factory=utcnow)
    data: ReportData

    @model_validator(mode="before")
    @classmethod
    def _coerce_data(cls, values: Any) -> Any:
        # Pick the payload model from the source tag rather than letting
        # the union guess from the dict's keys.
        if isinstance(values, dict) and isinstance(values.get("data"), dict):
            model = report_data_type(values.get("source"))
            values = {**values, "data": model.model_validate(values["data"])}
        return values


class DomainRecord(BaseModel):
    """Aggregated reputation state for one canonical domain."""

    model_config = ConfigDict(populate_by_name=True)

    domain: str
    current_score: float | None = Field(default=None, alias="currentScore")
    is_blacklisted: bool = Field(default=False, alias="isBlacklisted")
    blacklisted_at: datetime | None = Field(default=None, alias="blacklistedAt")
    tags: list[str] = Field(default_factory=list)
    reports: list[Report] = Field(default_factory=list)

    def report_for(self, source: str) -> Report | None:
        """Return the active report from *source*, if any."""
        for report in self.reports:
            if report.source == source:
                return report
        return None


class BlacklistStatus(BaseModel):
    """Answer to a blacklist query.  ``exists`` is False for unknown domains."""

    exists: bool
    is_blacklisted: bool = False
    current_score: float | None = None


class ToggleResult(BaseModel):
    is_blacklisted: bool
