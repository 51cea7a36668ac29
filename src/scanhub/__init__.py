# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run external code-analysis tools, normalise their findings and file tickets."""

from __future__ import annotations

from importlib import metadata

from .config import EngineConfig, load_config
from .core import Finding, Report, Severity, SeveritySummary, Ticket, ToolStatus
from .engine import AnalysisEngine
from .tickets import GroupBy

__all__ = [
    "AnalysisEngine",
    "EngineConfig",
    "Finding",
    "GroupBy",
    "Report",
    "Severity",
    "SeveritySummary",
    "Ticket",
    "ToolStatus",
    "__version__",
    "load_config",
]

try:
    __version__ = metadata.version("scanhub")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
