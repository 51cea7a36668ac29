# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tool registry providing discovery by id or language."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator, Mapping

from .base import ANY_LANGUAGE, ToolDefinition


class ToolRegistry(Mapping[str, ToolDefinition]):
    """Central registry for tool definitions.

    ``ToolRegistry`` behaves like a read-only mapping whose keys are tool ids
    and whose values are :class:`ToolDefinition` instances. Iteration follows
    registration order, which is the stable catalog order.
    """

    def __init__(self, tools: Iterable[ToolDefinition] = ()) -> None:
        """Initialise the registry, registering ``tools`` in order.

        Args:
            tools: Optional definitions inserted immediately.
        """

        self._tools: dict[str, ToolDefinition] = {}
        self._by_language: dict[str, list[str]] = defaultdict(list)
        for tool in tools:
            self.register(tool)

    def register(self, tool: ToolDefinition) -> None:
        """Register ``tool`` enforcing uniqueness by id.

        Args:
            tool: Tool definition to insert into the registry.

        Raises:
            ValueError: If a tool with the same id is already registered.
        """

        if tool.id in self._tools:
            raise ValueError(f"Tool '{tool.id}' already registered")
        self._tools[tool.id] = tool
        for language in tool.languages:
            self._by_language[language].append(tool.id)

    def try_get(self, tool_id: str) -> ToolDefinition | None:
        """Return the tool registered as ``tool_id``, otherwise ``None``.

        Args:
            tool_id: Tool identifier to retrieve.

        Returns:
            ToolDefinition | None: Registered tool or ``None`` when not found.
        """

        return self._tools.get(tool_id)

    def tools(self) -> tuple[ToolDefinition, ...]:
        """Return all registered tools in catalog order."""

        return tuple(self._tools.values())

    def tools_for_language(self, language: str) -> tuple[ToolDefinition, ...]:
        """Return tools declaring ``language`` or the any-language tag.

        Args:
            language: Language tag used to filter tools.

        Returns:
            tuple[ToolDefinition, ...]: Matching tools in catalog order.
        """

        wanted = {*self._by_language.get(language.lower(), ()), *self._by_language.get(ANY_LANGUAGE, ())}
        return tuple(tool for tool_id, tool in self._tools.items() if tool_id in wanted)

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __getitem__(self, tool_id: str) -> ToolDefinition:
        return self._tools[tool_id]


__all__ = ["ToolRegistry"]
