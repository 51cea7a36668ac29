# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the analysis engine entry points."""

from __future__ import annotations

import json
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from scanhub.config import EngineConfig
from scanhub.engine import (
    NO_MATCHING_FINDINGS,
    NO_RUNNING_PROCESS,
    REPORT_NOT_FOUND,
    TICKET_REPORT_NOT_FOUND,
    AnalysisEngine,
)
from scanhub.storage import ReportStore
from scanhub.tickets import GroupBy, JsonFileTicketSink
from scanhub.tools import ToolRegistry

THREE_FINDINGS = """
import json
import sys

root = sys.argv[-1]
results = [
    {"check_id": "R1", "path": root + "/a.py", "start": {"line": 1}, "extra": {"severity": "ERROR"}},
    {"check_id": "R1", "path": root + "/b.py", "start": {"line": 2}, "extra": {"severity": "WARNING"}},
    {"check_id": "R2", "path": root + "/a.py", "start": {"line": 3}, "extra": {"severity": "INFO"}},
]
print(json.dumps({"results": results}))
"""


@pytest.fixture
def engine_factory(engine_config: EngineConfig, isolated_env: dict[str, str]):
    def build(*tools) -> AnalysisEngine:
        return AnalysisEngine(engine_config, registry=ToolRegistry(tools), env=isolated_env)

    return build


def test_run_caches_and_persists_the_report(fake_scanner, engine_factory, project_dir: Path) -> None:
    engine = engine_factory(fake_scanner(THREE_FINDINGS))

    report = engine.run(project_dir, "fake")

    assert report.error is None
    assert report.project_path == str(project_dir.resolve())
    assert [finding.file for finding in report.findings] == ["a.py", "b.py", "a.py"]
    assert report.summary.total == 3
    assert engine.get_report(report.id) is report
    stored = ReportStore(engine.config.storage_dir).load_all(project_dir)
    assert [item.id for item in stored] == [report.id]


def test_unknown_tool_returns_unstored_error_report(engine_factory, project_dir: Path) -> None:
    engine = engine_factory()

    report = engine.run(project_dir, "nope")

    assert report.error == "Unknown tool: nope"
    assert report.tool_name == "nope"
    assert report.findings == ()
    assert engine.load_reports(project_dir) == []
    assert engine.get_report(report.id) is None


def test_busy_tool_returns_error_report(fake_scanner, engine_factory, project_dir: Path) -> None:
    engine = engine_factory(fake_scanner("import time\ntime.sleep(30)\n"))

    with ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(engine.run, project_dir, "fake")
        deadline = time.monotonic() + 5
        while not engine.supervisor.is_running("fake"):
            assert time.monotonic() < deadline
            time.sleep(0.01)
        busy = engine.run(project_dir, "fake")
        cancel = engine.cancel("fake")
        cancelled = future.result(timeout=15)

    assert busy.error == "fake is already running"
    assert cancel.success
    assert cancelled.error == "Fake Scanner was cancelled and killed."
    assert [report.id for report in engine.load_reports(project_dir)] == [cancelled.id]


def test_cancel_without_run_reports_failure(engine_factory) -> None:
    result = engine_factory().cancel("fake")

    assert not result.success
    assert result.error == NO_RUNNING_PROCESS


def test_run_many_keeps_request_order(fake_scanner, engine_factory, project_dir: Path) -> None:
    first = fake_scanner(THREE_FINDINGS, tool_id="first", name="First")
    second = fake_scanner('print(\'{"results": []}\')\n', tool_id="second", name="Second")
    engine = engine_factory(first, second)

    reports = engine.run_many(project_dir, ["second", "missing", "first"], jobs=3)

    assert [report.tool_id for report in reports] == ["second", "missing", "first"]
    assert reports[1].error == "Unknown tool: missing"
    assert reports[2].summary.total == 3
    assert engine.run_many(project_dir, []) == []


def test_detect_tools_lists_catalog_with_status(fake_scanner, engine_factory, project_dir: Path) -> None:
    installed = fake_scanner("", tool_id="present")
    missing = installed.model_copy(update={"id": "absent", "command": "scanhub-definitely-missing"})
    engine = engine_factory(installed, missing)

    statuses = engine.detect_tools(project_dir)

    assert [(status.id, status.installed) for status in statuses] == [("present", True), ("absent", False)]


def test_delete_report_evicts_cache_and_file(fake_scanner, engine_factory, project_dir: Path) -> None:
    engine = engine_factory(fake_scanner(THREE_FINDINGS))
    report = engine.run(project_dir, "fake")

    result = engine.delete_report(project_dir, report.id)

    assert result.success
    assert engine.get_report(report.id, project_dir) is None
    again = engine.delete_report(project_dir, report.id)
    assert not again.success
    assert again.error == REPORT_NOT_FOUND


def test_reports_survive_a_new_engine(fake_scanner, engine_config, isolated_env, project_dir: Path) -> None:
    tool = fake_scanner(THREE_FINDINGS)
    report = AnalysisEngine(engine_config, registry=ToolRegistry([tool]), env=isolated_env).run(project_dir, "fake")

    fresh = AnalysisEngine(engine_config, registry=ToolRegistry([tool]), env=isolated_env)

    assert fresh.get_report(report.id) is None
    loaded = fresh.get_report(report.id, project_dir)
    assert loaded is not None
    assert loaded.summary.total == 3


def test_create_tickets_groups_and_numbers(fake_scanner, engine_factory, project_dir: Path) -> None:
    engine = engine_factory(fake_scanner(THREE_FINDINGS))
    report = engine.run(project_dir, "fake")
    sink = JsonFileTicketSink(engine.config.kanban_dir)
    sink.write_tasks("board", [{"ticketNumber": 7, "title": "existing"}])

    result = engine.create_tickets(None, report.id, "board", "proj-1", GroupBy.RULE)

    assert result.success
    assert result.ticket_count == 2
    tasks = sink.read_tasks("board")
    assert [task["ticketNumber"] for task in tasks] == [7, 8, 9]
    assert tasks[1]["title"] == "[Fake Scanner] Rule R1 (2 occurrence(s))"
    assert tasks[1]["targetProjectId"] == "proj-1"
    assert tasks[1]["workspaceId"] == "board"
    assert tasks[2]["status"] == "TODO"
    json.dumps(tasks)


def test_create_tickets_for_selected_findings(fake_scanner, engine_factory, project_dir: Path) -> None:
    engine = engine_factory(fake_scanner(THREE_FINDINGS))
    report = engine.run(project_dir, "fake")

    result = engine.create_tickets([report.findings[2].id], report.id, "board")

    assert result.success
    assert result.ticket_count == 1


def test_create_tickets_errors(fake_scanner, engine_factory, project_dir: Path) -> None:
    engine = engine_factory(fake_scanner(THREE_FINDINGS))
    report = engine.run(project_dir, "fake")

    missing_report = engine.create_tickets(None, "unknown-report", "board")
    no_findings = engine.create_tickets(["unknown-finding"], report.id, "board")

    assert missing_report.error == TICKET_REPORT_NOT_FOUND
    assert no_findings.error == NO_MATCHING_FINDINGS
    assert JsonFileTicketSink(engine.config.kanban_dir).read_tasks("board") == []


def test_create_tickets_rejects_bad_workspace_and_grouping(fake_scanner, engine_factory, project_dir: Path) -> None:
    engine = engine_factory(fake_scanner(THREE_FINDINGS))
    report = engine.run(project_dir, "fake")

    escaping = engine.create_tickets(None, report.id, "../escape")
    bogus_grouping = engine.create_tickets(None, report.id, "board", group_by="bogus")

    assert not escaping.success
    assert escaping.ticket_count == 0
    assert escaping.error == "Invalid workspace id: '../escape'"
    assert not bogus_grouping.success
    assert bogus_grouping.error is not None
    assert "bogus" in bogus_grouping.error
    assert JsonFileTicketSink(engine.config.kanban_dir).read_tasks("board") == []
