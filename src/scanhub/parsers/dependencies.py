# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for dependency vulnerability scanners."""

from __future__ import annotations

from typing import Final

from ..core.models import Finding
from ..core.serialization import JsonValue, as_sequence, coerce_optional_str, dig, iter_dicts
from ..core.severity import OSV_SEVERITY, TRIVY_SEVERITY
from .base import ParseContext

_OSV_MISSING_SEVERITY: Final[str] = "MEDIUM"


def _text(value: JsonValue | None) -> str:
    return coerce_optional_str(value) or ""


def parse_trivy(payload: JsonValue, context: ParseContext) -> list[Finding]:
    """Parse ``trivy fs -f json`` output.

    Args:
        payload: Decoded JSON document with a ``Results`` array.
        context: Parse context for the current run.

    Returns:
        list[Finding]: One finding per vulnerable package; line is always ``0``.
    """

    findings: list[Finding] = []
    for result in iter_dicts(dig(payload, "Results")):
        target = context.relative(coerce_optional_str(result.get("Target")))
        for vuln in iter_dicts(result.get("Vulnerabilities")):
            vuln_id = _text(vuln.get("VulnerabilityID"))
            title = coerce_optional_str(vuln.get("Title")) or _text(vuln.get("Description"))
            package = f"{_text(vuln.get('PkgName'))}@{_text(vuln.get('InstalledVersion'))}"
            cwe_ids = as_sequence(vuln.get("CweIDs"))
            findings.append(
                Finding(
                    tool=context.tool_id,
                    file=target,
                    line=0,
                    severity=TRIVY_SEVERITY.resolve(vuln.get("Severity")),
                    message=f"{vuln_id}: {title} ({package})",
                    rule=vuln_id or None,
                    rule_url=coerce_optional_str(vuln.get("PrimaryURL")),
                    cwe=coerce_optional_str(cwe_ids[0]) if cwe_ids else None,
                ),
            )
    return findings


def parse_osv(payload: JsonValue, context: ParseContext) -> list[Finding]:
    """Parse ``osv-scanner --format json`` output.

    Args:
        payload: Decoded JSON document with a ``results`` array.
        context: Parse context for the current run.

    Returns:
        list[Finding]: One finding per advisory affecting a scanned package.
    """

    findings: list[Finding] = []
    for result in iter_dicts(dig(payload, "results")):
        source = context.relative(coerce_optional_str(dig(result, "source", "path")))
        for package in iter_dicts(result.get("packages")):
            name = _text(dig(package, "package", "name"))
            version = _text(dig(package, "package", "version"))
            for vuln in iter_dicts(package.get("vulnerabilities")):
                vuln_id = _text(vuln.get("id"))
                label = dig(vuln, "database_specific", "severity") or _OSV_MISSING_SEVERITY
                references = list(iter_dicts(vuln.get("references")))
                findings.append(
                    Finding(
                        tool=context.tool_id,
                        file=source,
                        line=0,
                        severity=OSV_SEVERITY.resolve(label),
                        message=f"{vuln_id}: {_text(vuln.get('summary'))} ({name}@{version})",
                        rule=vuln_id or None,
                        rule_url=coerce_optional_str(references[0].get("url")) if references else None,
                    ),
                )
    return findings


__all__ = ["parse_osv", "parse_trivy"]
