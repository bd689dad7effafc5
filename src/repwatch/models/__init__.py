# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Domain models for repwatch."""

from repwatch.models.record import BlacklistStatus, DomainRecord, Report, ToggleResult
from repwatch.models.report import (
    CertificateReportData,
    IpqsReportData,
    RawReportData,
    ReportData,
    SafeBrowsingReportData,
    SslLabsReportData,
    VirusTotalReportData,
)

__all__ = [
    "BlacklistStatus",
    "CertificateReportData",
    "DomainRecord",
    "IpqsReportData",
    "RawReportData",
    "Report",
    "ReportData",
    "SafeBrowsingReportData",
    "SslLabsReportData",
    "ToggleResult",
    "VirusTotalReportData",
]
