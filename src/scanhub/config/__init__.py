# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Engine configuration models and loaders."""

from __future__ import annotations

from .loaders import (
    EnvironmentConfigSource,
    PyProjectConfigSource,
    TomlConfigSource,
    default_sources,
    load_config,
)
from .models import EngineConfig, default_kanban_dir, default_storage_dir

__all__ = [
    "EngineConfig",
    "EnvironmentConfigSource",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "default_kanban_dir",
    "default_storage_dir",
    "default_sources",
    "load_config",
]
