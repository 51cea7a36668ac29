# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tool definition model shared by the catalog, prober and supervisor."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Final, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.models import Finding, ToolCategory, ToolStatus

ANY_LANGUAGE: Final[str] = "*"

ArgsBuilder: TypeAlias = Callable[[str, Sequence[str]], list[str]]
OutputParser: TypeAlias = Callable[[str, str | Path], list[Finding]]


class ToolDefinition(BaseModel):
    """Immutable description of how to invoke one scanner and read its output."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    name: str
    command: str
    category: ToolCategory
    description: str = ""
    languages: tuple[str, ...] = Field(default_factory=tuple)
    json_flag: str = ""
    args: ArgsBuilder
    parser: OutputParser
    timeout_s: float | None = Field(default=None, gt=0)

    @field_validator("languages", mode="before")
    @classmethod
    def _coerce_languages(cls, value: str | Iterable[str] | None) -> tuple[str, ...]:
        """Normalise language declarations into a tuple of lowercase tags.

        Args:
            value: Single tag, iterable of tags or ``None``.

        Returns:
            tuple[str, ...]: Language tags in declaration order.
        """

        if value is None:
            return ()
        if isinstance(value, str):
            return (value.lower(),)
        return tuple(str(item).lower() for item in value)

    def build_args(self, project_path: str, extra_args: Sequence[str] | None = None) -> list[str]:
        """Return the argument vector (without the executable) for a run.

        Args:
            project_path: Absolute project directory to scan.
            extra_args: Caller supplied arguments placed where the tool expects them.

        Returns:
            list[str]: Arguments passed to the executable.
        """

        return list(self.args(project_path, tuple(extra_args or ())))

    def supports_language(self, language: str) -> bool:
        """Return ``True`` when the tool targets ``language`` or any language."""

        return ANY_LANGUAGE in self.languages or language.lower() in self.languages

    def to_status(self, installed: bool) -> ToolStatus:
        """Return the detection view of this definition.

        Args:
            installed: Whether the prober located an executable.

        Returns:
            ToolStatus: Public fields plus the ``installed`` flag.
        """

        return ToolStatus(
            id=self.id,
            name=self.name,
            command=self.command,
            category=self.category,
            description=self.description,
            languages=self.languages,
            json_flag=self.json_flag,
            installed=installed,
        )


__all__ = ["ANY_LANGUAGE", "ArgsBuilder", "OutputParser", "ToolDefinition"]
