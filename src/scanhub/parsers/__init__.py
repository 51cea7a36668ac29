# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers normalising scanner output into :class:`~scanhub.core.models.Finding` objects."""

from __future__ import annotations

from .base import JsonParser, ParseContext, TextParser, load_json_payload, strip_ansi
from .cppcheck import CppcheckParser, parse_cppcheck_xml
from .dependencies import parse_osv, parse_trivy
from .infrastructure import parse_checkov
from .quality import (
    ESLINT_RULE_URL,
    MegaLinterParser,
    parse_eslint,
    parse_megalinter_json,
    parse_megalinter_text,
    parse_pylint,
)
from .security import parse_bandit, parse_bearer, parse_graudit, parse_semgrep

__all__ = [
    "CppcheckParser",
    "ESLINT_RULE_URL",
    "JsonParser",
    "MegaLinterParser",
    "ParseContext",
    "TextParser",
    "load_json_payload",
    "parse_bandit",
    "parse_bearer",
    "parse_checkov",
    "parse_cppcheck_xml",
    "parse_eslint",
    "parse_graudit",
    "parse_megalinter_json",
    "parse_megalinter_text",
    "parse_osv",
    "parse_pylint",
    "parse_semgrep",
    "parse_trivy",
    "strip_ansi",
]
