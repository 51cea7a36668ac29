# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Group findings and render them as ticket records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from typing import Final

from ..core.models import Finding, Ticket, TicketStatus, now_ms
from ..core.serialization import coerce_optional_int

NO_RULE_KEY: Final[str] = "no-rule"
TITLE_MESSAGE_LIMIT: Final[int] = 80
TICKET_PRIORITY: Final[str] = "high"
BASE_LABELS: Final[tuple[str, ...]] = ("refactor", "bug")
TICKET_NUMBER_FIELD: Final[str] = "ticketNumber"


class GroupBy(str, Enum):
    """Strategies for folding findings into tickets."""

    INDIVIDUAL = "individual"
    FILE = "file"
    RULE = "rule"
    SEVERITY = "severity"


def _group_key(finding: Finding, group_by: GroupBy) -> str:
    if group_by is GroupBy.FILE:
        return finding.file
    if group_by is GroupBy.RULE:
        return finding.rule or NO_RULE_KEY
    if group_by is GroupBy.SEVERITY:
        return finding.severity.value
    return finding.id


def group_findings(findings: Iterable[Finding], group_by: GroupBy | str) -> dict[str, list[Finding]]:
    """Partition ``findings`` by ``group_by``.

    Args:
        findings: Findings selected for ticket creation.
        group_by: Grouping strategy or its string value.

    Returns:
        dict[str, list[Finding]]: Groups keyed by finding id, file, rule (or
        ``"no-rule"``) or severity, ordered by first appearance.
    """

    strategy = GroupBy(group_by)
    groups: dict[str, list[Finding]] = {}
    for finding in findings:
        groups.setdefault(_group_key(finding, strategy), []).append(finding)
    return groups


def build_ticket_title(key: str, group_by: GroupBy | str, findings: Sequence[Finding], tool_name: str) -> str:
    """Return the ticket title for one group.

    Args:
        key: Group key produced by :func:`group_findings`.
        group_by: Grouping strategy used to build the groups.
        findings: Members of the group (never empty).
        tool_name: Display name of the tool that produced the report.

    Returns:
        str: Title prefixed with ``[<tool_name>]``.
    """

    strategy = GroupBy(group_by)
    count = len(findings)
    if strategy is GroupBy.FILE:
        return f"[{tool_name}] {count} issue(s) in {key}"
    if strategy is GroupBy.RULE:
        return f"[{tool_name}] Rule {key} ({count} occurrence(s))"
    if strategy is GroupBy.SEVERITY:
        return f"[{tool_name}] {count} {key.upper()} issue(s)"
    first = findings[0]
    return f"[{tool_name}] {first.severity.value.upper()}: {first.message[:TITLE_MESSAGE_LIMIT]}"


def build_ticket_description(findings: Iterable[Finding]) -> str:
    """Return a markdown description listing every finding of a group.

    Args:
        findings: Members of the group.

    Returns:
        str: One block per finding with location, severity, rule, CWE,
        message, snippet and documentation link where available.
    """

    lines: list[str] = []
    for finding in findings:
        lines.append(f"### {finding.file}:{finding.line}")
        lines.append(f"- **Severity**: {finding.severity.value}")
        if finding.rule:
            lines.append(f"- **Rule**: {finding.rule}")
        if finding.cwe:
            lines.append(f"- **CWE**: {finding.cwe}")
        lines.append(f"- **Message**: {finding.message}")
        if finding.snippet:
            lines.append(f"```\n{finding.snippet}\n```")
        if finding.rule_url:
            lines.append(f"- [Documentation]({finding.rule_url})")
        lines.append("")
    return "\n".join(lines)


def next_ticket_number(existing: Iterable[Mapping[str, object]]) -> int:
    """Return the number following the highest ``ticketNumber`` in ``existing``.

    Args:
        existing: Task records already present in the target list.

    Returns:
        int: ``max(existing numbers, default 0) + 1``.
    """

    highest = 0
    for task in existing:
        number = coerce_optional_int(task.get(TICKET_NUMBER_FIELD))  # type: ignore[arg-type]
        if number is not None and number > highest:
            highest = number
    return highest + 1


def build_tickets(
    groups: Mapping[str, Sequence[Finding]],
    group_by: GroupBy | str,
    tool_name: str,
    workspace_id: str,
    target_project_id: str | None = None,
    existing: Iterable[Mapping[str, object]] = (),
) -> list[Ticket]:
    """Render one ticket per group, numbered after the existing tasks.

    Args:
        groups: Output of :func:`group_findings`.
        group_by: Strategy used to build ``groups``.
        tool_name: Display name of the reporting tool.
        workspace_id: Target ticket list.
        target_project_id: Optional project reference stored on each ticket.
        existing: Tasks already in the target list.

    Returns:
        list[Ticket]: Tickets in group order with sequential numbers.
    """

    first_number = next_ticket_number(existing)
    labels = (*BASE_LABELS, tool_name.lower())
    timestamp = now_ms()
    return [
        Ticket(
            workspace_id=workspace_id,
            target_project_id=target_project_id,
            ticket_number=first_number + offset,
            title=build_ticket_title(key, group_by, members, tool_name),
            description=build_ticket_description(members),
            status=TicketStatus.TODO,
            priority=TICKET_PRIORITY,
            labels=labels,
            created_at=timestamp,
            updated_at=timestamp,
        )
        for offset, (key, members) in enumerate(groups.items())
    ]


__all__ = [
    "GroupBy",
    "NO_RULE_KEY",
    "build_ticket_description",
    "build_ticket_title",
    "build_tickets",
    "group_findings",
    "next_ticket_number",
]
