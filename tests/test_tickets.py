# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for finding grouping and ticket rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from scanhub.core.models import Finding, TicketStatus
from scanhub.core.severity import Severity
from scanhub.tickets import (
    NO_RULE_KEY,
    GroupBy,
    JsonFileTicketSink,
    build_ticket_description,
    build_ticket_title,
    build_tickets,
    group_findings,
    next_ticket_number,
)


def _finding(rule: str | None, *, file: str = "a.py", severity: Severity = Severity.HIGH, **extra: object) -> Finding:
    return Finding(tool="semgrep", file=file, line=4, severity=severity, message="Dangerous call", rule=rule, **extra)


def test_group_by_rule_uses_no_rule_bucket() -> None:
    findings = [_finding("R1"), _finding("R1"), _finding(None), _finding("R1")]

    groups = group_findings(findings, GroupBy.RULE)

    assert {key: len(members) for key, members in groups.items()} == {"R1": 3, NO_RULE_KEY: 1}


def test_group_by_individual_file_and_severity() -> None:
    findings = [_finding("R1", file="a.py"), _finding("R2", file="b.py", severity=Severity.LOW), _finding("R3")]

    assert len(group_findings(findings, GroupBy.INDIVIDUAL)) == 3
    assert list(group_findings(findings, "file")) == ["a.py", "b.py"]
    assert {key: len(value) for key, value in group_findings(findings, GroupBy.SEVERITY).items()} == {
        "high": 2,
        "low": 1,
    }


@pytest.mark.parametrize(
    ("group_by", "key", "expected"),
    [
        (GroupBy.FILE, "a.py", "[Semgrep] 2 issue(s) in a.py"),
        (GroupBy.RULE, "R1", "[Semgrep] Rule R1 (2 occurrence(s))"),
        (GroupBy.SEVERITY, "high", "[Semgrep] 2 HIGH issue(s)"),
        (GroupBy.INDIVIDUAL, "ignored", "[Semgrep] HIGH: Dangerous call"),
    ],
)
def test_ticket_titles(group_by: GroupBy, key: str, expected: str) -> None:
    assert build_ticket_title(key, group_by, [_finding("R1"), _finding("R1")], "Semgrep") == expected


def test_individual_title_truncates_message() -> None:
    finding = Finding(tool="t", severity=Severity.LOW, message="x" * 200)

    title = build_ticket_title(finding.id, GroupBy.INDIVIDUAL, [finding], "Tool")

    assert title == f"[Tool] LOW: {'x' * 80}"


def test_description_lists_optional_details() -> None:
    finding = _finding("R1", cwe="CWE-79", snippet="eval(x)", rule_url="https://docs/r1")

    description = build_ticket_description([finding])

    assert "### a.py:4" in description
    assert "- **Severity**: high" in description
    assert "- **Rule**: R1" in description
    assert "- **CWE**: CWE-79" in description
    assert "- **Message**: Dangerous call" in description
    assert "```\neval(x)\n```" in description
    assert "- [Documentation](https://docs/r1)" in description


def test_description_omits_missing_details() -> None:
    description = build_ticket_description([_finding(None)])

    assert "**Rule**" not in description
    assert "**CWE**" not in description
    assert "Documentation" not in description


def test_numbering_continues_after_existing_tasks() -> None:
    existing = [{"ticketNumber": 7}, {"ticketNumber": "3"}, {"title": "no number"}]
    groups = group_findings([_finding("A"), _finding("B"), _finding("C")], GroupBy.RULE)

    tickets = build_tickets(groups, GroupBy.RULE, "Semgrep", "ws-1", "proj-9", existing=existing)

    assert [ticket.ticket_number for ticket in tickets] == [8, 9, 10]
    assert all(ticket.status is TicketStatus.TODO for ticket in tickets)
    assert tickets[0].labels == ("refactor", "bug", "semgrep")
    assert tickets[0].priority == "high"
    assert tickets[0].target_project_id == "proj-9"
    assert next_ticket_number([]) == 1


def test_json_sink_round_trip(tmp_path: Path) -> None:
    sink = JsonFileTicketSink(tmp_path / "kanban")

    assert sink.read_tasks("ws") == []
    sink.write_tasks("ws", [{"ticketNumber": 1}])

    assert sink.read_tasks("ws") == [{"ticketNumber": 1}]


def test_json_sink_tolerates_corrupt_files_and_rejects_bad_ids(tmp_path: Path) -> None:
    root = tmp_path / "kanban"
    root.mkdir()
    (root / "ws.json").write_text("not json", encoding="utf-8")
    sink = JsonFileTicketSink(root)

    assert sink.read_tasks("ws") == []
    with pytest.raises(ValueError):
        sink.path_for("../escape")
