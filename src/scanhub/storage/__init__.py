# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Report persistence and in-memory caching."""

from __future__ import annotations

from .report_cache import DEFAULT_MAX_REPORTS, ReportCache
from .report_store import ReportStore, project_digest

__all__ = ["DEFAULT_MAX_REPORTS", "ReportCache", "ReportStore", "project_digest"]
