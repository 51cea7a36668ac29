# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Process supervision for scanner runs."""

from __future__ import annotations

from .availability import AvailabilityProber
from .process import SupervisedProcess
from .progress import ProgressEvent, ProgressObserver, ProgressStatus
from .supervisor import KillReason, RunState, RunSupervisor

__all__ = [
    "AvailabilityProber",
    "KillReason",
    "ProgressEvent",
    "ProgressObserver",
    "ProgressStatus",
    "RunState",
    "RunSupervisor",
    "SupervisedProcess",
]
