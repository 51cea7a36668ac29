# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich tables used by the CLI."""

from __future__ import annotations

import datetime as dt
from collections.abc import Sequence
from typing import Final

from rich.table import Table

from ..core.models import Report, SeveritySummary, ToolStatus
from ..core.severity import Severity

SEVERITY_STYLES: Final[dict[Severity, str]] = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
    Severity.INFO: "dim",
}
_MESSAGE_WIDTH: Final[int] = 100


def build_tools_table(statuses: Sequence[ToolStatus]) -> Table:
    """Return a table listing cataloged tools and whether they are installed."""

    table = Table(title="Analysis tools", show_lines=False)
    table.add_column("Tool", style="bold")
    table.add_column("Id")
    table.add_column("Category")
    table.add_column("Languages")
    table.add_column("Installed")
    for status in statuses:
        table.add_row(
            status.name,
            status.id,
            status.category.value,
            ", ".join(status.languages),
            "[green]yes[/green]" if status.installed else "[red]no[/red]",
        )
    return table


def summary_line(summary: SeveritySummary) -> str:
    """Return ``"N finding(s): c critical, h high, ..."`` for a report summary."""

    parts = ", ".join(f"{getattr(summary, level.value)} {level.value}" for level in Severity)
    return f"{summary.total} finding(s): {parts}"


def build_findings_table(report: Report) -> Table:
    """Return a table of the findings in ``report``."""

    table = Table(title=f"{report.tool_name} findings")
    table.add_column("Severity")
    table.add_column("Location")
    table.add_column("Rule")
    table.add_column("Message", overflow="fold")
    table.add_column("Id", style="dim")
    for finding in report.findings:
        location = f"{finding.file}:{finding.line}" if finding.file else "-"
        table.add_row(
            f"[{SEVERITY_STYLES[finding.severity]}]{finding.severity.value}[/]",
            location,
            finding.rule or "",
            finding.message[:_MESSAGE_WIDTH],
            finding.id,
        )
    return table


def _format_timestamp(timestamp_ms: int) -> str:
    moment = dt.datetime.fromtimestamp(timestamp_ms / 1000, tz=dt.UTC)
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


def build_reports_table(reports: Sequence[Report]) -> Table:
    """Return a table describing persisted reports, newest first."""

    table = Table(title="Reports")
    table.add_column("Id", style="dim")
    table.add_column("Tool", style="bold")
    table.add_column("Started")
    table.add_column("Duration")
    table.add_column("Findings", justify="right")
    table.add_column("Error", overflow="fold")
    for report in reports:
        table.add_row(
            report.id,
            report.tool_name,
            _format_timestamp(report.timestamp),
            f"{report.duration / 1000:.1f}s",
            str(report.summary.total),
            report.error or "",
        )
    return table


__all__ = ["SEVERITY_STYLES", "build_findings_table", "build_reports_table", "build_tools_table", "summary_line"]
