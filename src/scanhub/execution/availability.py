# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate scanner executables on the enriched search path."""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Final, TypeAlias

from ..platform.environment import enriched_search_path, user_home
from ..tools.base import ToolDefinition

LocalCandidate: TypeAlias = Callable[[Path | None, Path], Path | None]


def _eslint_candidate(project: Path | None, _home: Path) -> Path | None:
    return project / "node_modules" / ".bin" / "eslint" if project is not None else None


def _graudit_candidate(_project: Path | None, home: Path) -> Path | None:
    return home / ".graudit" / "graudit"


_LOCAL_CANDIDATES: Final[dict[str, LocalCandidate]] = {
    "eslint": _eslint_candidate,
    "graudit": _graudit_candidate,
}


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


class AvailabilityProber:
    """Decide whether a tool can run and which executable a run should spawn.

    Detection and execution share :meth:`local_command`, so a tool reported as
    installed through a project-local or per-user install is also launched
    from that location.
    """

    def __init__(
        self,
        extra_paths: Sequence[str] = (),
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialise the prober.

        Args:
            extra_paths: Configured directories appended to the search path.
            env: Environment used for ``PATH`` and home lookups.
        """

        self._extra_paths = tuple(extra_paths)
        self._env = os.environ if env is None else env

    def search_path(self) -> str:
        """Return the enriched ``PATH`` used for lookups and spawned processes."""

        return enriched_search_path(self._extra_paths, env=self._env)

    def local_command(self, tool: ToolDefinition, project_path: str | Path | None) -> Path | None:
        """Return a tool-specific install outside the search path, when present.

        Args:
            tool: Tool being probed.
            project_path: Project directory; project-local installs need it.

        Returns:
            Path | None: Executable path when the special location holds one.
        """

        candidate_for = _LOCAL_CANDIDATES.get(tool.id)
        if candidate_for is None:
            return None
        project = Path(project_path) if project_path is not None else None
        candidate = candidate_for(project, user_home(self._env))
        if candidate is None or not _is_executable(candidate):
            return None
        return candidate

    def is_available(self, tool: ToolDefinition, project_path: str | Path | None = None) -> bool:
        """Return ``True`` when ``tool`` can be launched.

        Args:
            tool: Tool being probed.
            project_path: Optional project directory for project-local installs.

        Returns:
            bool: Whether a special-case install or a search path entry resolves.
        """

        if self.local_command(tool, project_path) is not None:
            return True
        return shutil.which(tool.command, path=self.search_path()) is not None

    def resolve_command(self, tool: ToolDefinition, project_path: str | Path) -> str:
        """Return the executable a run of ``tool`` should spawn.

        Args:
            tool: Tool about to run.
            project_path: Project directory being scanned.

        Returns:
            str: Special-case install path when present, otherwise the catalog
            command resolved against the enriched search path (or the bare
            command when it cannot be resolved).
        """

        local = self.local_command(tool, project_path)
        if local is not None:
            return str(local)
        return shutil.which(tool.command, path=self.search_path()) or tool.command


__all__ = ["AvailabilityProber"]
