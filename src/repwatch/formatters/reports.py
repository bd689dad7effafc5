# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Reduce raw provider payloads to the stored report shapes.

Every formatter is pure: it only projects the fields worth keeping and
never raises on missing keys.  Fields a provider omits come out as
``None`` (or an empty collection) in the stored payload.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from repwatch.core.constants import CRT_MAX_CERTIFICATES, Source
from repwatch.models.report import (
    CertificateReportData,
    CertificateSummary,
    IpqsReportData,
    IpqsThreats,
    RawReportData,
    ReportData,
    SafeBrowsingReportData,
    SslLabsReportData,
    TlsEndpoint,
    VirusTotalReportData,
    VirusTotalStats,
)

Formatter = Callable[[Any], ReportData]


def _mapping(raw: Any) -> Mapping[str, Any]:
    return raw if isinstance(raw, Mapping) else {}


def format_ipqs(raw: Any) -> IpqsReportData:
    data = _mapping(raw)
    return IpqsReportData(
        unsafe=data.get("unsafe"),
        risk_score=data.get("risk_score"),
        root_domain=data.get("root_domain"),
        category=data.get("category"),
        threats=IpqsThreats(
            spamming=data.get("spamming"),
            malware=data.get("malware"),
            phishing=data.get("phishing"),
            suspicious=data.get("suspicious"),
            adult=data.get("adult"),
        ),
    )


def format_safe_browsing(raw: Any) -> SafeBrowsingReportData:
    matches = _mapping(raw).get("matches") or []
    if not isinstance(matches, list):
        matches = []
    threats = [m for m in matches if isinstance(m, dict)]
    return SafeBrowsingReportData(safe=not threats, threats=threats)


def format_virustotal(raw: Any) -> VirusTotalReportData:
    """Project a ``GET /analyses/{id}`` response."""
    analysis = _mapping(_mapping(raw).get("data"))
    attributes = _mapping(analysis.get("attributes"))
    stats = _mapping(attributes.get("stats"))
    return VirusTotalReportData(
        analysis_id=analysis.get("id"),
        status=attributes.get("status"),
        stats=VirusTotalStats(
            harmless=stats.get("harmless"),
            malicious=stats.get("malicious"),
            suspicious=stats.get("suspicious"),
            undetected=stats.get("undetected"),
            timeout=stats.get("timeout"),
        ),
    )


def format_certificates(raw: Any) -> CertificateReportData:
    """Project a crt.sh JSON listing, keeping the first few entries."""
    entries = raw if isinstance(raw, list) else []
    certificates = [
        CertificateSummary(
            issuer_name=entry.get("issuer_name"),
            common_name=entry.get("common_name"),
            name_value=entry.get("name_value"),
            not_before=entry.get("not_before"),
            not_after=entry.get("not_after"),
            serial_number=entry.get("serial_number"),
        )
        for entry in entries[:CRT_MAX_CERTIFICATES]
        if isinstance(entry, dict)
    ]
    return CertificateReportData(count=len(entries), certificates=certificates)


def format_ssllabs(raw: Any) -> SslLabsReportData:
    data = _mapping(raw)
    endpoints = data.get("endpoints") or []
    return SslLabsReportData(
        host=data.get("host"),
        status=data.get("status"),
        endpoints=[
            TlsEndpoint(
                ip_address=ep.get("ipAddress"),
                grade=ep.get("grade"),
                status_message=ep.get("statusMessage"),
            )
            for ep in endpoints
            if isinstance(ep, dict)
        ],
    )


def format_raw(raw: Any) -> RawReportData:
    return RawReportData.model_validate(dict(_mapping(raw)))


FORMATTERS: dict[str, Formatter] = {
    Source.IPQS: format_ipqs,
    Source.GOOGLE: format_safe_browsing,
    Source.VIRUSTOTAL: format_virustotal,
    Source.CRT: format_certificates,
    Source.SSLLABS: format_ssllabs,
}


def format_report(source: str, raw: Any) -> ReportData:
    """Format *raw* with the formatter registered for *source*.

    Unknown sources are stored verbatim.
    """
    return FORMATTERS.get(source, format_raw)(raw)


def extract_score(source: str, data: ReportData) -> float | None:
    """Return the risk score carried by a formatted report, if any.

    Only IPQS publishes a numeric risk score.
    """
    if source == Source.IPQS and isinstance(data, IpqsReportData):
        return data.risk_score
    return None
