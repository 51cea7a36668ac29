# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Progress notifications emitted while a scanner runs."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

_LOGGER = logging.getLogger(__name__)


class ProgressStatus(str, Enum):
    """Lifecycle milestones reported to observers."""

    RUNNING = "running"
    TIMED_OUT = "timed_out"
    ERROR = "error"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """Single progress notification for one tool run."""

    tool_id: str
    status: ProgressStatus
    message: str


ProgressObserver: TypeAlias = Callable[[ProgressEvent], None]


def notify(observer: ProgressObserver | None, event: ProgressEvent) -> None:
    """Deliver ``event`` to ``observer`` without letting observer failures escape.

    Args:
        observer: Optional callback supplied by the caller.
        event: Notification to deliver.
    """

    if observer is None:
        return
    try:
        observer(event)
    except Exception:  # observer failures are logged only
        _LOGGER.exception("Progress observer failed for %s (%s)", event.tool_id, event.status.value)


__all__ = ["ProgressEvent", "ProgressObserver", "ProgressStatus", "notify"]
