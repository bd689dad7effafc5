# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Stored report payload shapes, one per known reputation source.

``Report.data`` is a tagged union keyed by the report's ``source``.  Known
sources get a fixed model so the persisted shape stays stable when a
provider adds fields; anything else falls back to :class:`RawReportData`.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from repwatch.core.constants import Source


class IpqsThreats(BaseModel):
    spamming: bool | None = None
    malware: bool | None = None
    phishing: bool | None = None
    suspicious: bool | None = None
    adult: bool | None = None


class IpqsReportData(BaseModel):
    """IPQualityScore URL verdict."""

    unsafe: bool | None = None
    risk_score: float | None = None
    root_domain: str | None = None
    category: str | None = None
    threats: IpqsThreats = Field(default_factory=IpqsThreats)


class SafeBrowsingReportData(BaseModel):
    """Google Safe Browsing verdict: safe unless at least one match."""

    safe: bool = True
    threats: list[dict[str, Any]] = Field(default_factory=list)


class VirusTotalStats(BaseModel):
    harmless: int | None = None
    malicious: int | None = None
    suspicious: int | None = None
    undetected: int | None = None
    timeout: int | None = None


class VirusTotalReportData(BaseModel):
    """VirusTotal URL analysis summary."""

    analysis_id: str | None = None
    status: str | None = None
    stats: VirusTotalStats = Field(default_factory=VirusTotalStats)


class CertificateSummary(BaseModel):
    issuer_name: str | None = None
    common_name: str | None = None
    name_value: str | None = None
    not_before: str | None = None
    not_after: str | None = None
    serial_number: str | None = None


class CertificateReportData(BaseModel):
    """Certificate transparency log results from crt.sh."""

    count: int = 0
    certificates: list[CertificateSummary] = Field(default_factory=list)


class TlsEndpoint(BaseModel):
    ip_address: str | None = None
    grade: str | None = None
    status_message: str | None = None


class SslLabsReportData(BaseModel):
    """TLS configuration grades from SSL Labs."""

    host: str | None = None
    status: str | None = None
    endpoints: list[TlsEndpoint] = Field(default_factory=list)


class RawReportData(BaseModel):
    """Payload from a source without a dedicated shape, stored verbatim."""

    model_config = ConfigDict(extra="allow")


ReportData = Union[
    IpqsReportData,
    SafeBrowsingReportData,
    VirusTotalReportData,
    CertificateReportData,
    SslLabsReportData,
    RawReportData,
]

REPORT_DATA_TYPES: dict[str, type[BaseModel]] = {
    Source.IPQS: IpqsReportData,
    Source.GOOGLE: SafeBrowsingReportData,
    Source.VIRUSTOTAL: VirusTotalReportData,
    Source.CRT: CertificateReportData,
    Source.SSLLABS: SslLabsReportData,
}


def report_data_type(source: str | None) -> type[BaseModel]:
    """Return the payload model registered for *source*."""
    return REPORT_DATA_TYPES.get(source or "", RawReportData)
