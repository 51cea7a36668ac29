# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the scanhub command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from scanhub.cli.app import app
from scanhub.cli.shared import CLIError
from scanhub.engine import AnalysisEngine
from scanhub.tickets import JsonFileTicketSink
from scanhub.tools import ToolRegistry

ONE_FINDING = """
import json
import sys

root = sys.argv[-1]
print(json.dumps({"results": [
    {"check_id": "R1", "path": root + "/a.py", "start": {"line": 1}, "extra": {"severity": "ERROR", "message": "bad"}}
]}))
"""


@pytest.fixture
def cli_engine(fake_scanner, engine_config, isolated_env, monkeypatch: pytest.MonkeyPatch) -> AnalysisEngine:
    engine = AnalysisEngine(engine_config, registry=ToolRegistry([fake_scanner(ONE_FINDING)]), env=isolated_env)
    monkeypatch.setattr("scanhub.cli.commands.build_engine", lambda root: engine)
    return engine


def test_tools_json_lists_registry(cli_engine: AnalysisEngine, project_dir: Path) -> None:
    result = CliRunner().invoke(app, ["tools", "--root", str(project_dir), "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [(item["id"], item["installed"]) for item in payload] == [("fake", True)]


def test_tools_table_renders(cli_engine: AnalysisEngine, project_dir: Path) -> None:
    result = CliRunner().invoke(app, ["tools", "--root", str(project_dir)])

    assert result.exit_code == 0, result.output
    assert "Fake Scanner" in result.stdout


def test_run_json_outputs_report(cli_engine: AnalysisEngine, project_dir: Path) -> None:
    result = CliRunner().invoke(app, ["run", "fake", "--root", str(project_dir), "--json"])

    assert result.exit_code == 0, result.output
    report = json.loads(result.stdout)
    assert report["tool_id"] == "fake"
    assert report["summary"]["high"] == 1
    assert report["findings"][0]["file"] == "a.py"


def test_run_human_output_and_unknown_tool(cli_engine: AnalysisEngine, project_dir: Path) -> None:
    runner = CliRunner()

    ok = runner.invoke(app, ["run", "fake", "--root", str(project_dir), "--no-emoji"])
    missing = runner.invoke(app, ["run", "nope", "--root", str(project_dir), "--no-emoji"])

    assert ok.exit_code == 0, ok.output
    assert "1 finding(s)" in ok.stdout
    assert missing.exit_code == 1
    assert "Unknown tool: nope" in missing.stdout


def test_reports_delete_and_tickets(cli_engine: AnalysisEngine, project_dir: Path) -> None:
    runner = CliRunner()
    report = cli_engine.run(project_dir, "fake")

    listed = runner.invoke(app, ["reports", "--root", str(project_dir), "--json"])
    tickets = runner.invoke(
        app,
        ["tickets", report.id, "--workspace", "board", "--root", str(project_dir), "--group-by", "file", "--no-emoji"],
    )
    deleted = runner.invoke(app, ["delete", report.id, "--root", str(project_dir), "--no-emoji"])
    deleted_again = runner.invoke(app, ["delete", report.id, "--root", str(project_dir), "--no-emoji"])

    assert listed.exit_code == 0, listed.output
    assert [item["id"] for item in json.loads(listed.stdout)] == [report.id]
    assert tickets.exit_code == 0, tickets.output
    assert "Created 1 ticket(s) in board" in tickets.stdout
    assert len(JsonFileTicketSink(cli_engine.config.kanban_dir).read_tasks("board")) == 1
    assert deleted.exit_code == 0, deleted.output
    assert deleted_again.exit_code == 1
    assert "Report not found" in deleted_again.stdout


def test_configuration_errors_exit_non_zero(monkeypatch: pytest.MonkeyPatch, project_dir: Path) -> None:
    def broken(root: Path) -> AnalysisEngine:
        raise CLIError("Invalid scanhub configuration: boom", exit_code=2)

    monkeypatch.setattr("scanhub.cli.commands.build_engine", broken)

    result = CliRunner().invoke(app, ["reports", "--root", str(project_dir), "--no-emoji"])

    assert result.exit_code == 2
    assert "Invalid scanhub configuration" in result.stdout
