# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors, engine construction)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console

from ..config.loaders import load_config
from ..core.console import StatusKind, build_console, print_status
from ..core.errors import ConfigError
from ..engine import AnalysisEngine


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Status-line printer sharing one console with the tables of a command."""

    console: Console
    use_emoji: bool

    def info(self, message: str) -> None:
        print_status(self.console, StatusKind.INFO, message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        print_status(self.console, StatusKind.OK, message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        print_status(self.console, StatusKind.WARN, message, use_emoji=self.use_emoji)

    def fail(self, message: str) -> None:
        print_status(self.console, StatusKind.FAIL, message, use_emoji=self.use_emoji)

    def echo(self, message: str) -> None:
        """Write ``message`` verbatim to stdout (used for JSON output)."""

        typer.echo(message)


def build_cli_logger(*, emoji: bool = True, no_color: bool = False) -> CLILogger:
    """Return a :class:`CLILogger` bound to a dedicated Rich console.

    Args:
        emoji: Whether log output may include emoji glyphs.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Logger used by every command.
    """

    return CLILogger(console=build_console(color=not no_color, emoji=emoji), use_emoji=emoji)


def configure_debug_logging(enabled: bool) -> None:
    """Route ``scanhub`` debug records to stderr when ``enabled``."""

    if not enabled:
        return
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("scanhub").setLevel(logging.DEBUG)


def build_engine(root: Path) -> AnalysisEngine:
    """Return an engine configured for the project at ``root``.

    Args:
        root: Project directory whose configuration files participate.

    Returns:
        AnalysisEngine: Engine using the layered configuration.

    Raises:
        CLIError: If the configuration cannot be loaded.
    """

    try:
        config = load_config(root)
    except ConfigError as exc:
        raise CLIError(str(exc)) from exc
    return AnalysisEngine(config)


__all__ = ["CLIError", "CLILogger", "build_cli_logger", "build_engine", "configure_debug_logging"]
