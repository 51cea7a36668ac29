# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Platform-specific helpers."""

from __future__ import annotations

from .environment import common_tool_paths, enriched_environment, enriched_search_path, is_windows, user_home

__all__ = [
    "common_tool_paths",
    "enriched_environment",
    "enriched_search_path",
    "is_windows",
    "user_home",
]
