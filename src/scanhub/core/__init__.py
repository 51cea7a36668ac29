# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core models, severity scale and shared helpers."""

from __future__ import annotations

from .errors import ConfigError, ParserError, ReportStoreError, ScanhubError, ToolBusyError, ToolNotFoundError
from .models import (
    CancelResult,
    DeleteResult,
    Finding,
    OperationResult,
    Report,
    SeveritySummary,
    Ticket,
    TicketBatchResult,
    TicketStatus,
    ToolCategory,
    ToolStatus,
)
from .severity import Severity, SeverityTable

__all__ = [
    "CancelResult",
    "ConfigError",
    "DeleteResult",
    "Finding",
    "OperationResult",
    "ParserError",
    "Report",
    "ReportStoreError",
    "ScanhubError",
    "Severity",
    "SeveritySummary",
    "SeverityTable",
    "Ticket",
    "TicketBatchResult",
    "TicketStatus",
    "ToolBusyError",
    "ToolCategory",
    "ToolNotFoundError",
    "ToolStatus",
]
