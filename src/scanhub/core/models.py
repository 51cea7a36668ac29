# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the scanhub package."""

from __future__ import annotations

import time
import uuid
from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from .severity import Severity


def new_id() -> str:
    """Return a fresh random identifier for findings, reports and tickets."""

    return str(uuid.uuid4())


def now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""

    return int(time.time() * 1000)


class ToolCategory(str, Enum):
    """High level grouping for cataloged scanners."""

    SECURITY = "security"
    QUALITY = "quality"
    DEPENDENCIES = "dependencies"
    INFRASTRUCTURE = "infrastructure"


class Finding(BaseModel):
    """One normalised issue reported by a scanner.

    ``file`` is always relative to the scanned project root so reports from the
    same project compare directly.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    tool: str
    file: str = ""
    line: int = 0
    column: int | None = None
    end_line: int | None = None
    end_column: int | None = None
    severity: Severity
    message: str = ""
    rule: str | None = None
    rule_url: str | None = None
    snippet: str | None = None
    cwe: str | None = None


class SeveritySummary(BaseModel):
    """Per-level finding counts; ``total`` always equals the sum of the levels."""

    model_config = ConfigDict(frozen=True)

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    info: int = 0
    total: int = 0

    @classmethod
    def from_findings(cls, findings: Iterable[Finding]) -> SeveritySummary:
        """Count ``findings`` by severity.

        Args:
            findings: Findings to tally.

        Returns:
            SeveritySummary: Counts per level plus the overall total.
        """

        counts = {level.value: 0 for level in Severity}
        for finding in findings:
            counts[finding.severity.value] += 1
        return cls(**counts, total=sum(counts.values()))


FindingInput = Finding | dict[str, object]


class Report(BaseModel):
    """Complete result of one tool run against one project.

    The severity summary is derived from :attr:`findings` on every access and
    is never stored independently; a ``summary`` key present in persisted JSON
    is ignored on load.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    project_path: str
    tool_id: str
    tool_name: str
    timestamp: int = Field(default_factory=now_ms)
    duration: int = 0
    findings: tuple[Finding, ...] = ()
    error: str | None = None

    @field_validator("findings", mode="before")
    @classmethod
    def _coerce_findings(cls, value: Iterable[FindingInput] | None) -> tuple[FindingInput, ...]:
        """Accept any iterable of findings (including ``None``) for the findings field."""

        if value is None:
            return ()
        return tuple(value)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def summary(self) -> SeveritySummary:
        """Return severity counts recomputed from :attr:`findings`."""

        return SeveritySummary.from_findings(self.findings)

    @property
    def ok(self) -> bool:
        """Return ``True`` when the run resolved without an error."""

        return self.error is None

    def select(self, finding_ids: Iterable[str] | None) -> list[Finding]:
        """Return findings whose id is in ``finding_ids`` preserving report order.

        Args:
            finding_ids: Identifiers to keep, or ``None`` to keep every finding.

        Returns:
            list[Finding]: Matching findings in report order.
        """

        if finding_ids is None:
            return list(self.findings)
        wanted = set(finding_ids)
        return [finding for finding in self.findings if finding.id in wanted]


class ToolStatus(BaseModel):
    """Detection view of a cataloged tool including whether it is installed."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    command: str
    category: ToolCategory
    description: str
    languages: tuple[str, ...]
    json_flag: str = ""
    installed: bool


class TicketStatus(str, Enum):
    """Workflow states recognised by the ticket store."""

    TODO = "TODO"
    WORKING = "WORKING"
    PENDING = "PENDING"
    DONE = "DONE"
    FAILED = "FAILED"


class Ticket(BaseModel):
    """Ticket record derived from a group of findings, ready for a ticket store."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=new_id)
    workspace_id: str
    target_project_id: str | None = None
    ticket_number: int
    title: str
    description: str
    status: TicketStatus = TicketStatus.TODO
    priority: str = "high"
    labels: tuple[str, ...] = ()
    created_at: int = Field(default_factory=now_ms)
    updated_at: int = Field(default_factory=now_ms)

    def to_task(self) -> dict[str, object]:
        """Return the camelCase task record written to ticket stores."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class OperationResult(BaseModel):
    """Structured acknowledgement returned by engine operations."""

    model_config = ConfigDict(frozen=True)

    success: bool
    error: str | None = None


class CancelResult(OperationResult):
    """Acknowledgement of a cancellation request."""


class DeleteResult(OperationResult):
    """Acknowledgement of a report deletion request."""


class TicketBatchResult(OperationResult):
    """Outcome of a ticket creation request."""

    ticket_count: int = 0


__all__ = [
    "CancelResult",
    "DeleteResult",
    "Finding",
    "OperationResult",
    "Report",
    "SeveritySummary",
    "Ticket",
    "TicketBatchResult",
    "TicketStatus",
    "ToolCategory",
    "ToolStatus",
    "new_id",
    "now_ms",
]
