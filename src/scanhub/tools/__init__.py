# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tool definitions, registry and builtin catalog."""

from __future__ import annotations

from .base import ANY_LANGUAGE, ArgsBuilder, OutputParser, ToolDefinition
from .catalog import BUILTIN_TOOLS, DEFAULT_REGISTRY, find, list_tools
from .registry import ToolRegistry

__all__ = [
    "ANY_LANGUAGE",
    "ArgsBuilder",
    "BUILTIN_TOOLS",
    "DEFAULT_REGISTRY",
    "OutputParser",
    "ToolDefinition",
    "ToolRegistry",
    "find",
    "list_tools",
]
