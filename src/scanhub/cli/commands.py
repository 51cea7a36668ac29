# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Typer commands exposing the analysis engine."""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Annotated

import typer

from ..core.models import Report
from ..engine import AnalysisEngine
from ..execution.progress import ProgressEvent, ProgressObserver, ProgressStatus
from ..tickets.grouping import GroupBy
from .rendering import build_findings_table, build_reports_table, build_tools_table, summary_line
from .shared import CLIError, CLILogger, build_cli_logger, build_engine, configure_debug_logging

RootOption = Annotated[Path, typer.Option("--root", "-r", help="Project root.")]
JsonOption = Annotated[bool, typer.Option("--json", help="Emit machine-readable JSON.")]
NoEmojiOption = Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in output.")]
NoColorOption = Annotated[bool, typer.Option("--no-color", help="Disable coloured output.")]


def _fail(logger: CLILogger, error: CLIError) -> typer.Exit:
    logger.fail(str(error))
    return typer.Exit(code=error.exit_code)


def _engine_or_exit(root: Path, logger: CLILogger) -> AnalysisEngine:
    try:
        return build_engine(root)
    except CLIError as exc:
        raise _fail(logger, exc) from exc


def _progress_printer(logger: CLILogger) -> ProgressObserver:
    def _observe(event: ProgressEvent) -> None:
        if event.status is ProgressStatus.RUNNING:
            logger.info(event.message)
        elif event.status is ProgressStatus.TIMED_OUT:
            logger.warn(event.message)

    return _observe


def _dump(payload: object) -> str:
    return json.dumps(payload, indent=2)


def tools_command(
    root: RootOption = Path.cwd(),
    as_json: JsonOption = False,
    no_emoji: NoEmojiOption = False,
    no_color: NoColorOption = False,
) -> None:
    """List cataloged analysis tools and whether they are installed."""

    logger = build_cli_logger(emoji=not no_emoji, no_color=no_color)
    engine = _engine_or_exit(root, logger)
    statuses = engine.detect_tools(root)
    if as_json:
        logger.echo(_dump([status.model_dump(mode="json") for status in statuses]))
        return
    logger.console.print(build_tools_table(statuses))


def _report_exit_code(report: Report) -> int:
    return 1 if report.error else 0


def run_command(
    tool: Annotated[str, typer.Argument(..., help="Tool identifier, for example 'semgrep'.")],
    root: RootOption = Path.cwd(),
    args: Annotated[
        list[str] | None,
        typer.Option("--arg", "-a", help="Extra argument passed to the tool (repeatable)."),
    ] = None,
    as_json: JsonOption = False,
    debug: Annotated[bool, typer.Option("--debug", help="Emit debug logging to stderr.")] = False,
    no_emoji: NoEmojiOption = False,
    no_color: NoColorOption = False,
) -> None:
    """Run one analysis tool against the project and print its findings.

    Pressing Ctrl-C cancels the running tool; the cancelled report is still stored.
    """

    configure_debug_logging(debug)
    logger = build_cli_logger(emoji=not no_emoji, no_color=no_color)
    engine = _engine_or_exit(root, logger)
    observer = None if as_json else _progress_printer(logger)

    with ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(engine.run, root, tool, args or [], observer)
        try:
            report = future.result()
        except KeyboardInterrupt:
            logger.warn(f"Cancelling {tool}...")
            engine.cancel(tool)
            report = future.result()

    if as_json:
        logger.echo(_dump(report.model_dump(mode="json")))
        raise typer.Exit(code=_report_exit_code(report))

    if report.error:
        logger.fail(report.error)
        raise typer.Exit(code=1)
    if report.findings:
        logger.console.print(build_findings_table(report))
        logger.warn(summary_line(report.summary))
    else:
        logger.ok(f"{report.tool_name} found no issues")
    logger.info(f"Report {report.id}")


def reports_command(
    root: RootOption = Path.cwd(),
    as_json: JsonOption = False,
    no_emoji: NoEmojiOption = False,
    no_color: NoColorOption = False,
) -> None:
    """List reports stored for the project, newest first."""

    logger = build_cli_logger(emoji=not no_emoji, no_color=no_color)
    engine = _engine_or_exit(root, logger)
    reports = engine.load_reports(root)
    if as_json:
        logger.echo(_dump([report.model_dump(mode="json") for report in reports]))
        return
    if not reports:
        logger.info("No reports stored for this project")
        return
    logger.console.print(build_reports_table(reports))


def delete_command(
    report_id: Annotated[str, typer.Argument(..., help="Identifier of the report to delete.")],
    root: RootOption = Path.cwd(),
    no_emoji: NoEmojiOption = False,
    no_color: NoColorOption = False,
) -> None:
    """Delete a stored report."""

    logger = build_cli_logger(emoji=not no_emoji, no_color=no_color)
    engine = _engine_or_exit(root, logger)
    result = engine.delete_report(root, report_id)
    if not result.success:
        raise _fail(logger, CLIError(result.error or "Delete failed"))
    logger.ok(f"Deleted report {report_id}")


def tickets_command(
    report_id: Annotated[str, typer.Argument(..., help="Report whose findings become tickets.")],
    workspace: Annotated[str, typer.Option("--workspace", "-w", help="Ticket workspace receiving the tickets.")],
    root: RootOption = Path.cwd(),
    findings: Annotated[
        list[str] | None,
        typer.Option("--finding", "-f", help="Finding id to include (repeatable); defaults to all."),
    ] = None,
    group_by: Annotated[
        GroupBy,
        typer.Option("--group-by", "-g", case_sensitive=False, help="How findings are grouped into tickets."),
    ] = GroupBy.INDIVIDUAL,
    target_project: Annotated[
        str | None,
        typer.Option("--target-project", help="Project reference stored on each ticket."),
    ] = None,
    no_emoji: NoEmojiOption = False,
    no_color: NoColorOption = False,
) -> None:
    """Create tickets from the findings of a stored report."""

    logger = build_cli_logger(emoji=not no_emoji, no_color=no_color)
    engine = _engine_or_exit(root, logger)
    result = engine.create_tickets(
        findings or None,
        report_id,
        workspace,
        target_project,
        group_by,
        project_path=root,
    )
    if not result.success:
        raise _fail(logger, CLIError(result.error or "Ticket creation failed"))
    logger.ok(f"Created {result.ticket_count} ticket(s) in {workspace}")


def register_commands(app: typer.Typer) -> None:
    """Attach every scanhub command to ``app``."""

    app.command("tools")(tools_command)
    app.command("run")(run_command)
    app.command("reports")(reports_command)
    app.command("delete")(delete_command)
    app.command("tickets")(tickets_command)


__all__ = [
    "delete_command",
    "register_commands",
    "reports_command",
    "run_command",
    "tickets_command",
    "tools_command",
]
