# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Rich console output for domain records."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from repwatch.models.record import BlacklistStatus, DomainRecord
from repwatch.models.report import (
    CertificateReportData,
    IpqsReportData,
    ReportData,
    SafeBrowsingReportData,
    SslLabsReportData,
    VirusTotalReportData,
)

console = Console()


def _score_color(score: float | None) -> str:
    if score is None:
        return "dim"
    if score >= 75:
        return "bold red"
    if score >= 40:
        return "yellow"
    return "bold green"


def summarize_report(data: ReportData) -> str:
    """One-line human summary of a stored report payload."""
    if isinstance(data, IpqsReportData):
        flags = [name for name, hit in data.threats.model_dump().items() if hit]
        verdict = "unsafe" if data.unsafe else "safe"
        suffix = f" ({', '.join(flags)})" if flags else ""
        return f"{verdict}, risk {data.risk_score}{suffix}"
    if isinstance(data, SafeBrowsingReportData):
        if data.safe:
            return "no threat matches"
        kinds = sorted({str(t.get("threatType", "UNKNOWN")) for t in data.threats})
        return f"{len(data.threats)} match(es): {', '.join(kinds)}"
    if isinstance(data, VirusTotalReportData):
        s = data.stats
        return f"{data.status or 'unknown'}: {s.malicious or 0} malicious, {s.suspicious or 0} suspicious"
    if isinstance(data, CertificateReportData):
        return f"{data.count} certificate(s) logged"
    if isinstance(data, SslLabsReportData):
        grades = ", ".join(ep.grade or "?" for ep in data.endpoints) or "no grades"
        return f"{data.status or 'unknown'}: {grades}"
    return ", ".join(sorted(data.model_dump())) or "(empty)"


def format_record(record: DomainRecord) -> None:
    """Print a domain record with one row per source report."""
    console.print()
    color = "bold red" if record.is_blacklisted else _score_color(record.current_score)
    listed = "BLACKLISTED" if record.is_blacklisted else "not blacklisted"
    console.print(
        Panel(
            f"[{color}]{record.domain}[/{color}]  {listed}"
            f"  (current score: {record.current_score if record.current_score is not None else 'n/a'})",
            style=color,
        )
    )

    if not record.reports:
        console.print("  No reports recorded.", style="dim")
        return

    table = Table(title="Reports")
    table.add_column("Source", style="cyan", no_wrap=True)
    table.add_column("Recorded", style="dim")
    table.add_column("Summary")
    for report in record.reports:
        table.add_row(
            report.source,
            report.date.strftime("%Y-%m-%d %H:%M:%S"),
            summarize_report(report.data),
        )
    console.print(table)


def format_status(domain: str, status: BlacklistStatus) -> None:
    if not status.exists:
        console.print(f"{domain}: not in database (not blacklisted)")
        return
    listed = "[bold red]BLACKLISTED[/bold red]" if status.is_blacklisted else "not blacklisted"
    console.print(f"{domain}: {listed}, current score {status.current_score}")
