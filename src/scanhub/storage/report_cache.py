# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bounded in-memory cache of recent reports."""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable
from threading import Lock
from typing import Final

from ..core.models import Report

DEFAULT_MAX_REPORTS: Final[int] = 50


class ReportCache:
    """Keep the most recently inserted reports, evicting the oldest insert first."""

    def __init__(self, max_reports: int = DEFAULT_MAX_REPORTS) -> None:
        if max_reports < 1:
            raise ValueError("max_reports must be at least 1")
        self._max_reports = max_reports
        self._entries: OrderedDict[str, Report] = OrderedDict()
        self._lock = Lock()

    @property
    def max_reports(self) -> int:
        return self._max_reports

    def put(self, report: Report) -> None:
        """Insert ``report``, evicting the oldest entries beyond capacity.

        Re-inserting an existing id replaces the report without changing its
        insertion position.
        """

        with self._lock:
            self._entries[report.id] = report
            while len(self._entries) > self._max_reports:
                self._entries.popitem(last=False)

    def put_many(self, reports: Iterable[Report]) -> None:
        for report in reports:
            self.put(report)

    def get(self, report_id: str) -> Report | None:
        with self._lock:
            return self._entries.get(report_id)

    def discard(self, report_id: str) -> bool:
        """Drop ``report_id`` and return whether it was cached."""

        with self._lock:
            return self._entries.pop(report_id, None) is not None

    def ids(self) -> tuple[str, ...]:
        """Return cached ids from oldest to newest insertion."""

        with self._lock:
            return tuple(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, report_id: object) -> bool:
        with self._lock:
            return report_id in self._entries


__all__ = ["DEFAULT_MAX_REPORTS", "ReportCache"]
