# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich console construction and the status lines the CLI prints."""

from __future__ import annotations

from enum import Enum
from typing import Final

from rich.console import Console
from rich.text import Text


class StatusKind(str, Enum):
    """Kinds of user-facing status line."""

    INFO = "info"
    OK = "ok"
    WARN = "warn"
    FAIL = "fail"


_PREFIXES: Final[dict[StatusKind, str]] = {
    StatusKind.INFO: "ℹ️ ",
    StatusKind.OK: "✅ ",
    StatusKind.WARN: "⚠️ ",
    StatusKind.FAIL: "❌ ",
}
_STYLES: Final[dict[StatusKind, str]] = {
    StatusKind.INFO: "cyan",
    StatusKind.OK: "green",
    StatusKind.WARN: "yellow",
    StatusKind.FAIL: "red",
}


def build_console(*, color: bool = True, emoji: bool = True) -> Console:
    """Return a console for CLI output.

    The console writes to whatever ``sys.stdout`` is at print time and lets
    Rich decide whether the stream supports colour; ``color=False`` disables
    styling unconditionally.

    Args:
        color: Whether ANSI styling may be emitted.
        emoji: Whether Rich should render ``:emoji:`` codes.

    Returns:
        Console: Console shared by tables and status lines of one command.
    """

    return Console(no_color=not color, emoji=emoji, highlight=False, soft_wrap=True)


def status_text(kind: StatusKind, message: str, *, use_emoji: bool) -> Text:
    """Return ``message`` styled for ``kind``, optionally prefixed by its emoji."""

    prefix = _PREFIXES[kind] if use_emoji else ""
    return Text(f"{prefix}{message}", style=_STYLES[kind])


def print_status(console: Console, kind: StatusKind, message: str, *, use_emoji: bool) -> None:
    """Print one status line to ``console``."""

    console.print(status_text(kind, message, use_emoji=use_emoji))


__all__ = ["StatusKind", "build_console", "print_status", "status_text"]
