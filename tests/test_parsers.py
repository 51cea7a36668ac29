# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for scanner output parsers."""

from __future__ import annotations

import json

import pytest

from scanhub.core.errors import ParserError, ScanhubError
from scanhub.core.models import Report
from scanhub.core.severity import Severity
from scanhub.parsers import (
    ESLINT_RULE_URL,
    JsonParser,
    MegaLinterParser,
    TextParser,
    parse_bandit,
    parse_bearer,
    parse_checkov,
    parse_eslint,
    parse_graudit,
    parse_osv,
    parse_pylint,
    parse_semgrep,
    parse_trivy,
)

PROJECT = "/work/proj"


def test_semgrep_results_are_normalised() -> None:
    payload = {
        "results": [
            {
                "check_id": "python.lang.security.eval",
                "path": f"{PROJECT}/src/app.py",
                "start": {"line": 10, "col": 5},
                "end": {"line": 10, "col": 20},
                "extra": {
                    "severity": "ERROR",
                    "message": "Avoid eval",
                    "lines": "eval(x)",
                    "metadata": {"cwe": ["CWE-95: Eval Injection"], "source": "https://semgrep.dev/r/x"},
                },
            },
        ],
    }

    findings = JsonParser("semgrep", parse_semgrep)(json.dumps(payload), PROJECT)

    assert len(findings) == 1
    finding = findings[0]
    assert finding.tool == "semgrep"
    assert finding.file == "src/app.py"
    assert (finding.line, finding.column, finding.end_line, finding.end_column) == (10, 5, 10, 20)
    assert finding.severity is Severity.HIGH
    assert finding.message == "Avoid eval"
    assert finding.rule == "python.lang.security.eval"
    assert finding.rule_url == "https://semgrep.dev/r/x"
    assert finding.snippet == "eval(x)"
    assert finding.cwe == "CWE-95: Eval Injection"


def test_bandit_results_are_normalised() -> None:
    payload = {
        "results": [
            {
                "filename": f"{PROJECT}/pkg/db.py",
                "line_number": 42,
                "col_offset": 4,
                "issue_severity": "LOW",
                "issue_text": "Possible SQL injection",
                "test_id": "B608",
                "more_info": "https://bandit.readthedocs.io/b608",
                "code": "cursor.execute(q)",
                "issue_cwe": {"id": 89},
            },
        ],
    }

    (finding,) = JsonParser("bandit", parse_bandit)(json.dumps(payload), PROJECT)

    assert finding.file == "pkg/db.py"
    assert finding.line == 42
    assert finding.severity is Severity.LOW
    assert finding.rule == "B608"
    assert finding.cwe == "CWE-89"
    assert finding.snippet == "cursor.execute(q)"


def test_bearer_accepts_severity_keyed_documents() -> None:
    payload = {
        "critical": [{"filename": "lib/a.rb", "line_number": 3, "title": "Leak", "rule_id": "r1"}],
        "low": [{"filename": "lib/b.rb", "line_number": 7, "description": "Minor", "cwe_ids": ["200"]}],
    }

    findings = JsonParser("bearer", parse_bearer)(json.dumps(payload), PROJECT)

    assert [(f.file, f.severity) for f in findings] == [("lib/a.rb", Severity.CRITICAL), ("lib/b.rb", Severity.LOW)]
    assert findings[0].message == "Leak"
    assert findings[1].cwe == "CWE-200"


def test_bearer_flat_warnings_default_to_medium() -> None:
    payload = {"warnings": [{"filename": "x.js", "line_number": 1, "description": "d"}]}

    (finding,) = JsonParser("bearer", parse_bearer)(json.dumps(payload), PROJECT)

    assert finding.severity is Severity.MEDIUM


def test_trivy_vulnerabilities_have_line_zero() -> None:
    payload = {
        "Results": [
            {
                "Target": "requirements.txt",
                "Vulnerabilities": [
                    {
                        "VulnerabilityID": "CVE-2023-1",
                        "PkgName": "requests",
                        "InstalledVersion": "2.0.0",
                        "Severity": "HIGH",
                        "Title": "Bad thing",
                        "PrimaryURL": "https://avd/1",
                        "CweIDs": ["CWE-20"],
                    },
                    {"VulnerabilityID": "CVE-2023-2", "Severity": "UNKNOWN", "Description": "Other"},
                ],
            },
        ],
    }

    findings = JsonParser("trivy", parse_trivy)(json.dumps(payload), PROJECT)

    assert len(findings) == 2
    assert findings[0].line == 0
    assert findings[0].file == "requirements.txt"
    assert findings[0].message == "CVE-2023-1: Bad thing (requests@2.0.0)"
    assert findings[0].cwe == "CWE-20"
    assert findings[1].severity is Severity.INFO


def test_osv_missing_severity_is_medium() -> None:
    payload = {
        "results": [
            {
                "source": {"path": f"{PROJECT}/package-lock.json"},
                "packages": [
                    {
                        "package": {"name": "lodash", "version": "4.17.0"},
                        "vulnerabilities": [
                            {"id": "GHSA-1", "summary": "Proto pollution", "references": [{"url": "https://x"}]},
                            {"id": "GHSA-2", "summary": "Other", "database_specific": {"severity": "MODERATE"}},
                            {"id": "GHSA-3", "summary": "Crit", "database_specific": {"severity": "CRITICAL"}},
                        ],
                    },
                ],
            },
        ],
    }

    findings = JsonParser("osv-scanner", parse_osv)(json.dumps(payload), PROJECT)

    assert [f.severity for f in findings] == [Severity.MEDIUM, Severity.MEDIUM, Severity.CRITICAL]
    assert findings[0].file == "package-lock.json"
    assert findings[0].rule_url == "https://x"
    assert findings[0].message == "GHSA-1: Proto pollution (lodash@4.17.0)"


def test_eslint_numeric_severity_and_rule_url() -> None:
    payload = [
        {
            "filePath": f"{PROJECT}/src/index.js",
            "messages": [
                {"ruleId": "no-eval", "severity": 2, "message": "eval is evil", "line": 12, "column": 3},
                {"ruleId": None, "message": "Parsing error", "line": 1},
            ],
        },
    ]

    findings = JsonParser("eslint", parse_eslint)(json.dumps(payload), PROJECT)

    first, second = findings
    assert first.file == "src/index.js"
    assert first.line == 12
    assert first.severity is Severity.HIGH
    assert first.rule_url == ESLINT_RULE_URL.format(rule="no-eval")
    assert second.severity is Severity.MEDIUM
    assert second.rule is None
    assert second.rule_url is None


def test_graudit_lines_are_medium_findings() -> None:
    raw = "\x1b[31m/work/proj/app.php\x1b[0m:14:  eval($_GET['x']);\n\nnot a match\n"

    findings = TextParser("graudit", parse_graudit)(raw, PROJECT)

    assert len(findings) == 1
    assert findings[0].file == "app.php"
    assert findings[0].line == 14
    assert findings[0].severity is Severity.MEDIUM
    assert findings[0].message == "eval($_GET['x']);"


def test_checkov_accepts_single_object_and_strips_root_slash() -> None:
    payload = {
        "results": {
            "failed_checks": [
                {
                    "check_id": "CKV_AWS_20",
                    "name": "S3 bucket is public",
                    "file_path": "/main.tf",
                    "file_line_range": [4, 9],
                    "severity": "HIGH",
                    "guideline": "https://docs/ckv20",
                },
            ],
        },
    }

    (finding,) = JsonParser("checkov", parse_checkov)(json.dumps(payload), PROJECT)

    assert finding.file == "main.tf"
    assert (finding.line, finding.end_line) == (4, 9)
    assert finding.severity is Severity.HIGH
    assert finding.message == "CKV_AWS_20: S3 bucket is public"


def test_checkov_accepts_framework_list_and_missing_severity() -> None:
    payload = [
        {"results": {"failed_checks": [{"check_id": "CKV_K8S_1", "name": "n", "file_path": "/k.yaml"}]}},
        {"results": {"failed_checks": []}},
    ]

    (finding,) = JsonParser("checkov", parse_checkov)(json.dumps(payload), PROJECT)

    assert finding.severity is Severity.MEDIUM
    assert finding.line == 0


def test_pylint_messages_are_normalised() -> None:
    payload = [
        {"type": "convention", "path": "pkg/mod.py", "line": 3, "column": 0, "symbol": "missing-docstring", "message": "m"},
        {"type": "error", "path": "pkg/mod.py", "line": 8, "column": 4, "message-id": "E1101", "message": "no member"},
    ]

    findings = JsonParser("pylint", parse_pylint)(json.dumps(payload), PROJECT)

    assert [f.severity for f in findings] == [Severity.LOW, Severity.HIGH]
    assert findings[0].rule == "missing-docstring"
    assert findings[1].rule == "E1101"


def test_megalinter_json_report() -> None:
    payload = {
        "linters": [
            {
                "linter_name": "shellcheck",
                "files_lint_results": [{"file": f"{PROJECT}/run.sh", "errors": [{"line": 2, "message": ""}]}],
            },
        ],
    }

    (finding,) = MegaLinterParser("megalinter")(json.dumps(payload), PROJECT)

    assert finding.file == "run.sh"
    assert finding.severity is Severity.MEDIUM
    assert finding.message == "[shellcheck] issue"
    assert finding.rule == "shellcheck"


def test_megalinter_falls_back_to_console_output() -> None:
    raw = "Linting...\n❌ ERROR in PYTHON_PYLINT\n⚠ WARNING in BASH\nall good\n"

    findings = MegaLinterParser("megalinter")(raw, PROJECT)

    assert [f.severity for f in findings] == [Severity.HIGH, Severity.MEDIUM]
    assert findings[0].file == ""
    assert findings[0].line == 0


@pytest.mark.parametrize("raw", ["", "   \n"])
def test_blank_output_yields_no_findings(raw: str) -> None:
    assert JsonParser("semgrep", parse_semgrep)(raw, PROJECT) == []
    assert MegaLinterParser("megalinter")(raw, PROJECT) == []


def test_invalid_json_raises_value_error() -> None:
    with pytest.raises(ValueError):
        JsonParser("bandit", parse_bandit)("{not json", PROJECT)


def test_parsing_is_deterministic_apart_from_identifiers() -> None:
    payload = json.dumps({"results": [{"check_id": "r", "path": "a.py", "start": {"line": 1}, "extra": {}}]})
    parser = JsonParser("semgrep", parse_semgrep)

    first = [f.model_dump(exclude={"id"}) for f in parser(payload, PROJECT)]
    second = [f.model_dump(exclude={"id"}) for f in parser(payload, PROJECT)]

    assert first == second


def test_paths_outside_project_are_kept() -> None:
    payload = {"results": [{"check_id": "r", "path": "/elsewhere/x.py", "start": {"line": 1}, "extra": {}}]}

    (finding,) = JsonParser("semgrep", parse_semgrep)(json.dumps(payload), PROJECT)

    assert finding.file == "/elsewhere/x.py"
    assert finding.severity is Severity.MEDIUM
    assert finding.message == "r"


def test_scalar_json_is_rejected() -> None:
    with pytest.raises(ParserError, match="not a JSON object or array"):
        JsonParser("semgrep", parse_semgrep)("42", PROJECT)


def test_parser_error_belongs_to_engine_hierarchy() -> None:
    error = ParserError("bad payload")

    assert isinstance(error, ScanhubError)
    assert isinstance(error, ValueError)


def test_single_eslint_error_summary() -> None:
    payload = [{"filePath": f"{PROJECT}/a.js", "messages": [{"ruleId": "semi", "severity": 2, "line": 12}]}]

    findings = JsonParser("eslint", parse_eslint)(json.dumps(payload), PROJECT)
    report = Report(project_path=PROJECT, tool_id="eslint", tool_name="ESLint", findings=findings)

    assert report.summary.model_dump() == {"critical": 0, "high": 1, "medium": 0, "low": 0, "info": 0, "total": 1}
    assert not any(finding.file.startswith(PROJECT) for finding in findings)
