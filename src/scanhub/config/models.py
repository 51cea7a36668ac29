# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Configuration models for the analysis engine."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..platform.environment import user_home

DEFAULT_TIMEOUT_S: Final[float] = 5 * 60
DEFAULT_TOOL_TIMEOUTS: Final[dict[str, float]] = {"megalinter": 10 * 60}
DEFAULT_TIMEOUT_GRACE_S: Final[float] = 5.0
DEFAULT_CANCEL_GRACE_S: Final[float] = 3.0
DEFAULT_MAX_CACHED_REPORTS: Final[int] = 50
DEFAULT_STDERR_EXCERPT_CHARS: Final[int] = 500


def _default_state_root() -> Path:
    return user_home() / ".scanhub"


def default_storage_dir() -> Path:
    """Return the default directory holding persisted reports."""

    return _default_state_root() / "analysis"


def default_kanban_dir() -> Path:
    """Return the default directory holding ticket lists for the JSON sink."""

    return _default_state_root() / "kanban"


class EngineConfig(BaseModel):
    """Tunable settings governing process supervision and storage."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    storage_dir: Path = Field(default_factory=default_storage_dir)
    kanban_dir: Path = Field(default_factory=default_kanban_dir)
    default_timeout_s: float = Field(default=DEFAULT_TIMEOUT_S, gt=0)
    tool_timeouts: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_TOOL_TIMEOUTS))
    timeout_grace_s: float = Field(default=DEFAULT_TIMEOUT_GRACE_S, ge=0)
    cancel_grace_s: float = Field(default=DEFAULT_CANCEL_GRACE_S, ge=0)
    max_cached_reports: int = Field(default=DEFAULT_MAX_CACHED_REPORTS, ge=1)
    stderr_excerpt_chars: int = Field(default=DEFAULT_STDERR_EXCERPT_CHARS, ge=0)
    extra_paths: list[str] = Field(default_factory=list)

    @field_validator("storage_dir", "kanban_dir", mode="before")
    @classmethod
    def _expand_dir(cls, value: str | Path) -> Path:
        """Expand ``~`` in configured directories.

        Args:
            value: Raw directory from a configuration source.

        Returns:
            Path: Expanded directory path.
        """

        return Path(value).expanduser()

    @field_validator("tool_timeouts")
    @classmethod
    def _positive_timeouts(cls, value: dict[str, float]) -> dict[str, float]:
        """Reject non-positive per-tool timeouts.

        Args:
            value: Mapping of tool id to timeout seconds.

        Returns:
            dict[str, float]: Validated overrides layered over the builtin per-tool defaults.

        Raises:
            ValueError: If any timeout is zero or negative.
        """

        for tool_id, seconds in value.items():
            if seconds <= 0:
                raise ValueError(f"timeout for '{tool_id}' must be positive")
        return {**DEFAULT_TOOL_TIMEOUTS, **value}

    def timeout_for(self, tool_id: str) -> float:
        """Return the timeout in seconds applied to ``tool_id``.

        Args:
            tool_id: Catalog identifier of the tool.

        Returns:
            float: Per-tool override when configured, otherwise :attr:`default_timeout_s`.
        """

        return self.tool_timeouts.get(tool_id, self.default_timeout_s)


__all__ = [
    "DEFAULT_CANCEL_GRACE_S",
    "DEFAULT_MAX_CACHED_REPORTS",
    "DEFAULT_TIMEOUT_GRACE_S",
    "DEFAULT_TIMEOUT_S",
    "DEFAULT_TOOL_TIMEOUTS",
    "EngineConfig",
    "default_kanban_dir",
    "default_storage_dir",
]
