# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Ticket store adapters."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

_LOGGER = logging.getLogger(__name__)


@runtime_checkable
class TicketSink(Protocol):
    """Read and replace the task list of one workspace."""

    def read_tasks(self, workspace_id: str) -> list[dict[str, Any]]:
        """Return every task currently stored for ``workspace_id``."""
        ...

    def write_tasks(self, workspace_id: str, tasks: Sequence[dict[str, Any]]) -> None:
        """Replace the stored task list of ``workspace_id`` with ``tasks``."""
        ...


class JsonFileTicketSink:
    """Store each workspace's tasks as a JSON array in ``<root>/<workspace>.json``."""

    def __init__(self, root: Path) -> None:
        self._root = root

    def path_for(self, workspace_id: str) -> Path:
        """Return the file backing ``workspace_id``.

        Raises:
            ValueError: If ``workspace_id`` is not a plain file name.
        """

        if not workspace_id or Path(workspace_id).name != workspace_id:
            raise ValueError(f"Invalid workspace id: {workspace_id!r}")
        return self._root / f"{workspace_id}.json"

    def read_tasks(self, workspace_id: str) -> list[dict[str, Any]]:
        """Return stored tasks; missing or unreadable files read as an empty list."""

        path = self.path_for(workspace_id)
        if not path.is_file():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            _LOGGER.debug("Treating unreadable task list %s as empty: %s", path, exc)
            return []
        if not isinstance(data, list):
            return []
        return [task for task in data if isinstance(task, dict)]

    def write_tasks(self, workspace_id: str, tasks: Sequence[dict[str, Any]]) -> None:
        """Atomically replace the task list of ``workspace_id``."""

        path = self.path_for(workspace_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(prefix=f".{workspace_id}-", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(list(tasks), handle, indent=2)
            os.replace(temp_name, path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise


__all__ = ["JsonFileTicketSink", "TicketSink"]
