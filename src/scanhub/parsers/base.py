# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared parser infrastructure and helper utilities."""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final, cast

from ..core.errors import ParserError
from ..core.models import Finding
from ..core.serialization import JsonValue
from ..filesystem.paths import relativize

JsonTransform = Callable[[JsonValue, "ParseContext"], list[Finding]]
TextTransform = Callable[[Sequence[str], "ParseContext"], list[Finding]]

_ANSI_ESCAPE: Final[re.Pattern[str]] = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")


@dataclass(frozen=True, slots=True)
class ParseContext:
    """Describe the run whose output is being normalised."""

    tool_id: str
    project_path: str

    def relative(self, path: str | None) -> str:
        """Return ``path`` relative to the scanned project root.

        Args:
            path: File path emitted by the scanner.

        Returns:
            str: Project-relative path, or ``path`` unchanged when outside the project.
        """

        return relativize(path, self.project_path)


def strip_ansi(text: str) -> str:
    """Remove terminal colour escape sequences from ``text``."""

    return _ANSI_ESCAPE.sub("", text)


def load_json_payload(raw: str) -> JsonValue | None:
    """Decode ``raw`` as a single JSON document.

    Args:
        raw: Captured scanner output.

    Returns:
        JsonValue | None: Decoded payload, or ``None`` when ``raw`` is blank.

    Raises:
        json.JSONDecodeError: If ``raw`` is not valid JSON.
    """

    text = raw.strip()
    if not text:
        return None
    return cast(JsonValue, json.loads(text))


def iter_pattern_matches(lines: Sequence[str], pattern: re.Pattern[str]) -> Iterator[re.Match[str]]:
    """Yield regex matches from non-blank ``lines``.

    Args:
        lines: Raw lines emitted by a tool.
        pattern: Compiled expression matched against each stripped line.

    Yields:
        re.Match[str]: Match objects produced by ``pattern``.
    """

    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue
        match = pattern.match(line)
        if match:
            yield match


@dataclass(frozen=True, slots=True)
class JsonParser:
    """Decode output as JSON and delegate to a transform function."""

    tool_id: str
    transform: JsonTransform

    def __call__(self, raw: str, project_path: str | Path) -> list[Finding]:
        payload = load_json_payload(raw)
        if payload is None:
            return []
        if not isinstance(payload, (dict, list)):
            raise ParserError(f"{self.tool_id} output is not a JSON object or array")
        return self.transform(payload, ParseContext(self.tool_id, str(project_path)))


@dataclass(frozen=True, slots=True)
class TextParser:
    """Split output into lines and delegate to a transform function."""

    tool_id: str
    transform: TextTransform

    def __call__(self, raw: str, project_path: str | Path) -> list[Finding]:
        lines = strip_ansi(raw).splitlines()
        return self.transform(lines, ParseContext(self.tool_id, str(project_path)))


__all__ = [
    "JsonParser",
    "ParseContext",
    "TextParser",
    "iter_pattern_matches",
    "load_json_payload",
    "strip_ansi",
]
