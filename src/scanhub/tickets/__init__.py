# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Ticket grouping and ticket store adapters."""

from __future__ import annotations

from .grouping import (
    NO_RULE_KEY,
    GroupBy,
    build_ticket_description,
    build_ticket_title,
    build_tickets,
    group_findings,
    next_ticket_number,
)
from .sink import JsonFileTicketSink, TicketSink

__all__ = [
    "GroupBy",
    "JsonFileTicketSink",
    "NO_RULE_KEY",
    "TicketSink",
    "build_ticket_description",
    "build_ticket_title",
    "build_tickets",
    "group_findings",
    "next_ticket_number",
]
