# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for source-level security scanners."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping, Sequence
from typing import Final

from ..core.models import Finding
from ..core.serialization import (
    JsonValue,
    as_mapping,
    as_sequence,
    coerce_optional_int,
    coerce_optional_str,
    dig,
    iter_dicts,
    safe_int,
)
from ..core.severity import BANDIT_SEVERITY, BEARER_SEVERITY, SEMGREP_SEVERITY, Severity
from .base import ParseContext

_GRAUDIT_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(?P<file>.+?):(?P<line>\d+):(?P<content>.*)$")
_BEARER_SEVERITY_KEYS: Final[tuple[str, ...]] = ("critical", "high", "medium", "low", "warning", "info")
_BEARER_DEFAULT_LABEL: Final[str] = "warning"


def _first(value: JsonValue | None) -> JsonValue | None:
    """Return the first element of a JSON array, or ``value`` itself when scalar."""

    items = as_sequence(value)
    if items:
        return items[0]
    if isinstance(value, (list, dict)):
        return None
    return value


def _cwe_label(value: JsonValue | None) -> str | None:
    """Return ``CWE-<id>`` for a bare CWE number or string id."""

    text = coerce_optional_str(value)
    if text is None:
        return None
    return text if text.upper().startswith("CWE") else f"CWE-{text}"


def parse_semgrep(payload: JsonValue, context: ParseContext) -> list[Finding]:
    """Parse Semgrep ``--json`` output.

    Args:
        payload: Decoded JSON document with a ``results`` array.
        context: Parse context for the current run.

    Returns:
        list[Finding]: One finding per Semgrep result.
    """

    findings: list[Finding] = []
    for result in iter_dicts(dig(payload, "results")):
        extra = as_mapping(result.get("extra"))
        check_id = coerce_optional_str(result.get("check_id"))
        findings.append(
            Finding(
                tool=context.tool_id,
                file=context.relative(coerce_optional_str(result.get("path"))),
                line=safe_int(dig(result, "start", "line")),
                column=coerce_optional_int(dig(result, "start", "col")),
                end_line=coerce_optional_int(dig(result, "end", "line")),
                end_column=coerce_optional_int(dig(result, "end", "col")),
                severity=SEMGREP_SEVERITY.resolve(extra.get("severity")),
                message=coerce_optional_str(extra.get("message")) or check_id or "",
                rule=check_id,
                rule_url=coerce_optional_str(dig(extra, "metadata", "source")),
                snippet=coerce_optional_str(extra.get("lines")),
                cwe=coerce_optional_str(_first(dig(extra, "metadata", "cwe"))),
            ),
        )
    return findings


def parse_bandit(payload: JsonValue, context: ParseContext) -> list[Finding]:
    """Parse Bandit ``-f json`` output.

    Args:
        payload: Decoded JSON document with a ``results`` array.
        context: Parse context for the current run.

    Returns:
        list[Finding]: One finding per Bandit issue.
    """

    findings: list[Finding] = []
    for result in iter_dicts(dig(payload, "results")):
        findings.append(
            Finding(
                tool=context.tool_id,
                file=context.relative(coerce_optional_str(result.get("filename"))),
                line=safe_int(result.get("line_number")),
                column=coerce_optional_int(result.get("col_offset")),
                severity=BANDIT_SEVERITY.resolve(result.get("issue_severity")),
                message=coerce_optional_str(result.get("issue_text")) or "",
                rule=coerce_optional_str(result.get("test_id")),
                rule_url=coerce_optional_str(result.get("more_info")),
                snippet=coerce_optional_str(result.get("code")),
                cwe=_cwe_label(dig(result, "issue_cwe", "id")),
            ),
        )
    return findings


def _bearer_entries(payload: JsonValue) -> Iterator[tuple[Mapping[str, JsonValue], JsonValue | None]]:
    """Yield ``(entry, severity_hint)`` pairs from any known Bearer report shape."""

    document = as_mapping(payload)
    listed = document.get("warnings") or document.get("findings")
    if listed is not None:
        for entry in iter_dicts(listed):
            yield entry, None
        return
    for label in _BEARER_SEVERITY_KEYS:
        for entry in iter_dicts(document.get(label)):
            yield entry, label


def parse_bearer(payload: JsonValue, context: ParseContext) -> list[Finding]:
    """Parse Bearer ``--format json`` output.

    Bearer reports either a flat ``warnings``/``findings`` array or an object
    keyed by severity; both shapes are accepted.

    Args:
        payload: Decoded JSON document.
        context: Parse context for the current run.

    Returns:
        list[Finding]: One finding per Bearer warning.
    """

    findings: list[Finding] = []
    for entry, severity_hint in _bearer_entries(payload):
        label = entry.get("severity") or severity_hint or _BEARER_DEFAULT_LABEL
        line = coerce_optional_int(entry.get("line_number"))
        if line is None:
            line = safe_int(entry.get("line"))
        findings.append(
            Finding(
                tool=context.tool_id,
                file=context.relative(
                    coerce_optional_str(entry.get("filename")) or coerce_optional_str(entry.get("file")),
                ),
                line=line,
                severity=BEARER_SEVERITY.resolve(label),
                message=coerce_optional_str(entry.get("description"))
                or coerce_optional_str(entry.get("title"))
                or "",
                rule=coerce_optional_str(entry.get("rule_id")) or coerce_optional_str(entry.get("id")),
                rule_url=coerce_optional_str(entry.get("documentation_url")),
                snippet=coerce_optional_str(entry.get("code_extract")),
                cwe=_cwe_label(_first(entry.get("cwe_ids"))),
            ),
        )
    return findings


def parse_graudit(lines: Sequence[str], context: ParseContext) -> list[Finding]:
    """Parse Graudit grep-style ``file:line:content`` output.

    Args:
        lines: Output lines with colour codes already stripped.
        context: Parse context for the current run.

    Returns:
        list[Finding]: One medium-severity finding per matching line.
    """

    findings: list[Finding] = []
    for raw_line in lines:
        if not raw_line.strip():
            continue
        match = _GRAUDIT_PATTERN.match(raw_line)
        if match is None:
            continue
        findings.append(
            Finding(
                tool=context.tool_id,
                file=context.relative(match.group("file")),
                line=int(match.group("line")),
                severity=Severity.MEDIUM,
                message=match.group("content").strip(),
            ),
        )
    return findings


__all__ = ["parse_bandit", "parse_bearer", "parse_graudit", "parse_semgrep"]
