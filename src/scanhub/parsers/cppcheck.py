# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Streaming parser for Cppcheck ``--xml`` reports."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from ..core.models import Finding
from ..core.severity import CPPCHECK_SEVERITY
from .base import ParseContext

_TAG_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"<(?P<closing>/?)(?P<name>[A-Za-z_][\w.-]*)(?P<attrs>[^>]*?)(?P<selfclosing>/?)>",
)
_ATTR_PATTERN: Final[re.Pattern[str]] = re.compile(r"""(?P<key>[\w.-]+)\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)')""")
_ERROR_TAG: Final[str] = "error"
_LOCATION_TAG: Final[str] = "location"


def _attributes(raw: str) -> dict[str, str]:
    """Return unescaped attribute values from the body of a start tag."""

    attributes: dict[str, str] = {}
    for match in _ATTR_PATTERN.finditer(raw):
        value = match.group("dq") if match.group("dq") is not None else match.group("sq")
        attributes[match.group("key")] = html.unescape(value or "")
    return attributes


def _optional_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


@dataclass(slots=True)
class _Location:
    file: str
    line: int
    column: int | None


@dataclass(slots=True)
class _OpenError:
    rule: str
    severity: str
    message: str
    cwe: str | None
    locations: list[_Location] = field(default_factory=list)


def _emit(error: _OpenError, context: ParseContext) -> list[Finding]:
    """Return one finding per location of ``error`` (or one unlocated finding)."""

    severity = CPPCHECK_SEVERITY.resolve(error.severity)
    locations = error.locations or [_Location(file="", line=0, column=None)]
    return [
        Finding(
            tool=context.tool_id,
            file=context.relative(location.file),
            line=location.line,
            column=location.column,
            severity=severity,
            message=error.message,
            rule=error.rule or None,
            cwe=f"CWE-{error.cwe}" if error.cwe else None,
        )
        for location in locations
    ]


def parse_cppcheck_xml(raw: str, context: ParseContext) -> list[Finding]:
    """Walk the tags of a Cppcheck XML report in document order.

    ``<location>`` elements attach to the most recently opened ``<error>``
    that has not been closed. An error is emitted when ``</error>`` is seen or
    when it is written as a self-closing element. An ``<error>`` opened while
    another is still open replaces it.

    Args:
        raw: XML text, normally captured from stderr.
        context: Parse context for the current run.

    Returns:
        list[Finding]: Findings in report order.
    """

    findings: list[Finding] = []
    current: _OpenError | None = None
    for tag in _TAG_PATTERN.finditer(raw):
        name = tag.group("name")
        if name == _ERROR_TAG:
            if tag.group("closing"):
                if current is not None:
                    findings.extend(_emit(current, context))
                current = None
                continue
            attrs = _attributes(tag.group("attrs"))
            opened = _OpenError(
                rule=attrs.get("id", ""),
                severity=attrs.get("severity", ""),
                message=attrs.get("msg", ""),
                cwe=attrs.get("cwe") or None,
            )
            if tag.group("selfclosing"):
                findings.extend(_emit(opened, context))
                current = None
            else:
                current = opened
        elif name == _LOCATION_TAG and not tag.group("closing") and current is not None:
            attrs = _attributes(tag.group("attrs"))
            current.locations.append(
                _Location(
                    file=attrs.get("file", ""),
                    line=_optional_int(attrs.get("line")) or 0,
                    column=_optional_int(attrs.get("column")),
                ),
            )
    return findings


@dataclass(frozen=True, slots=True)
class CppcheckParser:
    """Callable adapter binding :func:`parse_cppcheck_xml` to a tool id."""

    tool_id: str

    def __call__(self, raw: str, project_path: str | Path) -> list[Finding]:
        return parse_cppcheck_xml(raw, ParseContext(self.tool_id, str(project_path)))


__all__ = ["CppcheckParser", "parse_cppcheck_xml"]
