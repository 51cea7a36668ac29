# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for code quality linters (ESLint, Pylint, MegaLinter)."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..core.models import Finding
from ..core.serialization import JsonValue, coerce_optional_int, coerce_optional_str, dig, iter_dicts, safe_int
from ..core.severity import ESLINT_SEVERITY, PYLINT_SEVERITY, Severity
from .base import ParseContext, load_json_payload, strip_ansi

ESLINT_RULE_URL: Final[str] = "https://eslint.org/docs/latest/rules/{rule}"
_ESLINT_WARNING_LEVEL: Final[int] = 1
_MEGALINTER_ERROR_MARK: Final[str] = "ERROR"
_MEGALINTER_WARNING_MARK: Final[str] = "WARNING"


def parse_eslint(payload: JsonValue, context: ParseContext) -> list[Finding]:
    """Parse ESLint ``-f json`` output.

    Args:
        payload: JSON array of per-file results.
        context: Parse context for the current run.

    Returns:
        list[Finding]: One finding per ESLint message.
    """

    findings: list[Finding] = []
    for entry in iter_dicts(payload):
        path = context.relative(coerce_optional_str(entry.get("filePath")))
        for message in iter_dicts(entry.get("messages")):
            level = coerce_optional_int(message.get("severity"))
            if level is None:
                level = _ESLINT_WARNING_LEVEL
            rule = coerce_optional_str(message.get("ruleId"))
            findings.append(
                Finding(
                    tool=context.tool_id,
                    file=path,
                    line=safe_int(message.get("line")),
                    column=coerce_optional_int(message.get("column")),
                    end_line=coerce_optional_int(message.get("endLine")),
                    end_column=coerce_optional_int(message.get("endColumn")),
                    severity=ESLINT_SEVERITY.resolve(level),
                    message=coerce_optional_str(message.get("message")) or "",
                    rule=rule,
                    rule_url=ESLINT_RULE_URL.format(rule=rule) if rule else None,
                    snippet=coerce_optional_str(message.get("source")),
                ),
            )
    return findings


def parse_pylint(payload: JsonValue, context: ParseContext) -> list[Finding]:
    """Parse Pylint ``--output-format=json`` output.

    Args:
        payload: JSON array of messages.
        context: Parse context for the current run.

    Returns:
        list[Finding]: One finding per Pylint message.
    """

    findings: list[Finding] = []
    for item in iter_dicts(payload):
        path = coerce_optional_str(item.get("path")) or coerce_optional_str(item.get("module"))
        findings.append(
            Finding(
                tool=context.tool_id,
                file=context.relative(path),
                line=safe_int(item.get("line")),
                column=coerce_optional_int(item.get("column")),
                end_line=coerce_optional_int(item.get("endLine")),
                end_column=coerce_optional_int(item.get("endColumn")),
                severity=PYLINT_SEVERITY.resolve(item.get("type")),
                message=coerce_optional_str(item.get("message")) or "",
                rule=coerce_optional_str(item.get("symbol")) or coerce_optional_str(item.get("message-id")),
            ),
        )
    return findings


def parse_megalinter_json(payload: JsonValue, context: ParseContext) -> list[Finding]:
    """Parse MegaLinter's JSON report.

    Args:
        payload: Decoded report with a ``linters`` array.
        context: Parse context for the current run.

    Returns:
        list[Finding]: Medium-severity findings attributed to each linter.
    """

    findings: list[Finding] = []
    for linter in iter_dicts(dig(payload, "linters")):
        linter_name = coerce_optional_str(linter.get("linter_name"))
        for file_result in iter_dicts(linter.get("files_lint_results")):
            path = context.relative(coerce_optional_str(file_result.get("file")))
            for error in iter_dicts(file_result.get("errors")):
                findings.append(
                    Finding(
                        tool=context.tool_id,
                        file=path,
                        line=safe_int(error.get("line")),
                        column=coerce_optional_int(error.get("column")),
                        severity=Severity.MEDIUM,
                        message=coerce_optional_str(error.get("message")) or f"[{linter_name or ''}] issue",
                        rule=linter_name,
                    ),
                )
    return findings


def parse_megalinter_text(lines: Sequence[str], context: ParseContext) -> list[Finding]:
    """Parse MegaLinter console output when no JSON report was produced.

    Args:
        lines: Output lines with colour codes already stripped.
        context: Parse context for the current run.

    Returns:
        list[Finding]: One finding per line mentioning ``ERROR`` or ``WARNING``.
    """

    findings: list[Finding] = []
    for line in lines:
        if _MEGALINTER_ERROR_MARK in line:
            severity = Severity.HIGH
        elif _MEGALINTER_WARNING_MARK in line:
            severity = Severity.MEDIUM
        else:
            continue
        findings.append(Finding(tool=context.tool_id, severity=severity, message=line.strip()))
    return findings


@dataclass(frozen=True, slots=True)
class MegaLinterParser:
    """Parse MegaLinter output as JSON, falling back to its console format."""

    tool_id: str

    def __call__(self, raw: str, project_path: str | Path) -> list[Finding]:
        context = ParseContext(self.tool_id, str(project_path))
        try:
            payload = load_json_payload(raw)
        except json.JSONDecodeError:
            return parse_megalinter_text(strip_ansi(raw).splitlines(), context)
        if payload is None:
            return []
        return parse_megalinter_json(payload, context)


__all__ = [
    "ESLINT_RULE_URL",
    "MegaLinterParser",
    "parse_eslint",
    "parse_megalinter_json",
    "parse_megalinter_text",
    "parse_pylint",
]
