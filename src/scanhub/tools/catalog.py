# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Builtin catalog of supported scanners.

Tool ids are persisted inside reports and used by callers to address tools,
so they must never change once published.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..core.models import ToolCategory
from ..parsers import (
    CppcheckParser,
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
from .base import ANY_LANGUAGE, ToolDefinition
from .registry import ToolRegistry


def _semgrep_args(path: str, extra: Sequence[str]) -> list[str]:
    return ["scan", "--json", *extra, path]


def _bandit_args(path: str, extra: Sequence[str]) -> list[str]:
    return ["-r", path, "-f", "json", *extra]


def _bearer_args(path: str, extra: Sequence[str]) -> list[str]:
    return ["scan", path, "--format", "json", *extra]


def _trivy_args(path: str, extra: Sequence[str]) -> list[str]:
    return ["fs", "--scanners", "vuln", "-f", "json", *extra, path]


def _osv_args(path: str, extra: Sequence[str]) -> list[str]:
    return ["scan", "--format", "json", *extra, path]


def _eslint_args(path: str, extra: Sequence[str]) -> list[str]:
    return ["-f", "json", *extra, path]


def _graudit_args(path: str, extra: Sequence[str]) -> list[str]:
    return ["-d", "all", *extra, path]


def _checkov_args(path: str, extra: Sequence[str]) -> list[str]:
    return ["-d", path, "--output", "json", *extra]


def _pylint_args(path: str, extra: Sequence[str]) -> list[str]:
    return ["--output-format=json", "--recursive=y", *extra, path]


def _cppcheck_args(path: str, extra: Sequence[str]) -> list[str]:
    return ["--xml", "--enable=all", *extra, path]


def _megalinter_args(path: str, extra: Sequence[str]) -> list[str]:
    return ["--path", path, "--json", *extra]


BUILTIN_TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        id="semgrep",
        name="Semgrep",
        command="semgrep",
        category=ToolCategory.SECURITY,
        description="Static analysis for security vulnerabilities (multi-language)",
        languages=("python", "javascript", "typescript", "go", "java", "ruby", "c", "cpp"),
        json_flag="--json",
        args=_semgrep_args,
        parser=JsonParser("semgrep", parse_semgrep),
    ),
    ToolDefinition(
        id="bandit",
        name="Bandit",
        command="bandit",
        category=ToolCategory.SECURITY,
        description="Security linter for Python code",
        languages=("python",),
        json_flag="-f json",
        args=_bandit_args,
        parser=JsonParser("bandit", parse_bandit),
    ),
    ToolDefinition(
        id="bearer",
        name="Bearer",
        command="bearer",
        category=ToolCategory.SECURITY,
        description="Security and privacy analysis (multi-language)",
        languages=("javascript", "typescript", "ruby", "java", "python", "go", "php"),
        json_flag="--format json",
        args=_bearer_args,
        parser=JsonParser("bearer", parse_bearer),
    ),
    ToolDefinition(
        id="trivy",
        name="Trivy",
        command="trivy",
        category=ToolCategory.DEPENDENCIES,
        description="Vulnerability scanner for dependencies and containers",
        languages=(ANY_LANGUAGE,),
        json_flag="-f json",
        args=_trivy_args,
        parser=JsonParser("trivy", parse_trivy),
    ),
    ToolDefinition(
        id="osv-scanner",
        name="OSV-Scanner",
        command="osv-scanner",
        category=ToolCategory.DEPENDENCIES,
        description="Open Source Vulnerability scanner (Google)",
        languages=(ANY_LANGUAGE,),
        json_flag="--format json",
        args=_osv_args,
        parser=JsonParser("osv-scanner", parse_osv),
    ),
    ToolDefinition(
        id="eslint",
        name="ESLint",
        command="eslint",
        category=ToolCategory.QUALITY,
        description="Linter for JavaScript and TypeScript",
        languages=("javascript", "typescript"),
        json_flag="-f json",
        args=_eslint_args,
        parser=JsonParser("eslint", parse_eslint),
    ),
    ToolDefinition(
        id="graudit",
        name="Graudit",
        command="graudit",
        category=ToolCategory.SECURITY,
        description="Grep-based source code auditing tool",
        languages=(ANY_LANGUAGE,),
        args=_graudit_args,
        parser=TextParser("graudit", parse_graudit),
    ),
    ToolDefinition(
        id="checkov",
        name="Checkov",
        command="checkov",
        category=ToolCategory.INFRASTRUCTURE,
        description="Infrastructure-as-Code security scanner",
        languages=("terraform", "cloudformation", "kubernetes", "docker"),
        json_flag="--output json",
        args=_checkov_args,
        parser=JsonParser("checkov", parse_checkov),
    ),
    ToolDefinition(
        id="pylint",
        name="Pylint",
        command="pylint",
        category=ToolCategory.QUALITY,
        description="Python code quality checker",
        languages=("python",),
        json_flag="--output-format=json",
        args=_pylint_args,
        parser=JsonParser("pylint", parse_pylint),
    ),
    ToolDefinition(
        id="cppcheck",
        name="Cppcheck",
        command="cppcheck",
        category=ToolCategory.QUALITY,
        description="Static analysis for C/C++",
        languages=("c", "cpp"),
        json_flag="--xml",
        args=_cppcheck_args,
        parser=CppcheckParser("cppcheck"),
    ),
    ToolDefinition(
        id="megalinter",
        name="MegaLinter",
        command="mega-linter-runner",
        category=ToolCategory.QUALITY,
        description="Aggregated linter runner for 50+ languages",
        languages=(ANY_LANGUAGE,),
        args=_megalinter_args,
        parser=MegaLinterParser("megalinter"),
    ),
)

DEFAULT_REGISTRY = ToolRegistry(BUILTIN_TOOLS)


def list_tools() -> tuple[ToolDefinition, ...]:
    """Return every builtin tool in stable catalog order."""

    return DEFAULT_REGISTRY.tools()


def find(tool_id: str) -> ToolDefinition | None:
    """Return the builtin tool registered as ``tool_id``, or ``None``."""

    return DEFAULT_REGISTRY.try_get(tool_id)


__all__ = ["BUILTIN_TOOLS", "DEFAULT_REGISTRY", "find", "list_tools"]
