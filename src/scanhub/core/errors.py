# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the analysis engine."""

from __future__ import annotations


class ScanhubError(RuntimeError):
    """Base class for errors raised inside the analysis engine."""


class ConfigError(ScanhubError):
    """Raised when configuration sources cannot be read or validated."""


class ToolNotFoundError(ScanhubError):
    """Raised when a tool id is not present in the catalog."""

    def __init__(self, tool_id: str) -> None:
        """Initialise the error for ``tool_id``.

        Args:
            tool_id: Identifier that failed to resolve.
        """

        super().__init__(f"Unknown tool: {tool_id}")
        self.tool_id = tool_id


class ToolBusyError(ScanhubError):
    """Raised when a run is requested for a tool that already has a process in flight."""

    def __init__(self, tool_id: str) -> None:
        """Initialise the error for ``tool_id``.

        Args:
            tool_id: Identifier of the tool that is already running.
        """

        super().__init__(f"{tool_id} is already running")
        self.tool_id = tool_id


class ParserError(ScanhubError, ValueError):
    """Raised by output parsers when a payload cannot be interpreted."""


class ReportStoreError(ScanhubError):
    """Raised when a report cannot be written to persistent storage."""


__all__ = [
    "ConfigError",
    "ParserError",
    "ReportStoreError",
    "ScanhubError",
    "ToolBusyError",
    "ToolNotFoundError",
]
