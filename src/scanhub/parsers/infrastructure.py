# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parser for infrastructure-as-code scanners."""

from __future__ import annotations

from collections.abc import Mapping

from ..core.models import Finding
from ..core.serialization import JsonValue, as_sequence, coerce_optional_int, coerce_optional_str, dig, iter_dicts
from ..core.severity import CHECKOV_SEVERITY
from .base import ParseContext


def _checkov_file(path: str | None, context: ParseContext) -> str:
    """Return a project-relative path for Checkov's scan-root-relative ``file_path``."""

    relative = context.relative(path)
    # checkov reports "/main.tf" for files directly under the scan root
    if relative == path and relative.startswith("/"):
        return relative.lstrip("/")
    return relative


def parse_checkov(payload: JsonValue, context: ParseContext) -> list[Finding]:
    """Parse Checkov ``--output json`` output.

    Checkov emits one object per framework, or a bare object when only one
    framework ran.

    Args:
        payload: Decoded JSON object or array of objects.
        context: Parse context for the current run.

    Returns:
        list[Finding]: One finding per failed check.
    """

    groups = list(iter_dicts(payload)) if as_sequence(payload) else [payload]
    findings: list[Finding] = []
    for group in groups:
        if not isinstance(group, Mapping):
            continue
        for check in iter_dicts(dig(group, "results", "failed_checks")):
            check_id = coerce_optional_str(check.get("check_id"))
            line_range = as_sequence(check.get("file_line_range"))
            name = coerce_optional_str(check.get("name")) or coerce_optional_str(
                dig(check, "check_result", "result"),
            )
            findings.append(
                Finding(
                    tool=context.tool_id,
                    file=_checkov_file(coerce_optional_str(check.get("file_path")), context),
                    line=(coerce_optional_int(line_range[0]) or 0) if line_range else 0,
                    end_line=coerce_optional_int(line_range[1]) if len(line_range) > 1 else None,
                    severity=CHECKOV_SEVERITY.resolve(check.get("severity")),
                    message=f"{check_id or ''}: {name or ''}",
                    rule=check_id,
                    rule_url=coerce_optional_str(check.get("guideline")),
                ),
            )
    return findings


__all__ = ["parse_checkov"]
