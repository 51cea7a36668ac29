# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for reasoning about filesystem paths reported by scanners."""

from __future__ import annotations

import os
from functools import lru_cache
from os import PathLike
from pathlib import Path
from typing import Final

_Pathish = str | PathLike[str] | Path
_DEFAULT_CACHE_SIZE: Final[int] = 256
_SEPARATORS: Final[str] = "/\\"


@lru_cache(maxsize=_DEFAULT_CACHE_SIZE)
def _best_effort_resolve(path: Path) -> Path:
    """Return ``path`` resolved where possible without raising.

    Args:
        path: Candidate path to resolve.

    Returns:
        Path: Absolute variant when resolution succeeds; otherwise the closest
        achievable approximation.
    """

    try:
        return path.resolve(strict=False)
    except (OSError, RuntimeError):
        return path.absolute() if not path.is_absolute() else path


def absolute_project_path(path: _Pathish) -> Path:
    """Return the canonical absolute form of a project directory.

    Args:
        path: Project directory as typed by the caller.

    Returns:
        Path: Expanded and resolved absolute path.
    """

    return _best_effort_resolve(Path(path).expanduser())


def _root_prefixes(project_root: _Pathish) -> tuple[str, ...]:
    """Return the textual prefixes a scanner may use for ``project_root``."""

    text = os.fspath(project_root)
    raw = text.rstrip(_SEPARATORS)
    resolved = str(_best_effort_resolve(Path(text))).rstrip(_SEPARATORS)
    # the filesystem root strips to "", which prefixes every absolute path
    prefixes = {raw, resolved} if text else {resolved}
    # longest prefix wins
    return tuple(sorted(prefixes, key=len, reverse=True))


def relativize(path: str | None, project_root: _Pathish) -> str:
    """Return ``path`` relative to ``project_root`` when it lies beneath it.

    Paths outside the project and paths that are already relative are
    returned unchanged. A path equal to the root becomes an empty string.

    Args:
        path: File path emitted by a scanner.
        project_root: Absolute project directory the scan ran against.

    Returns:
        str: Path with the project prefix and leading separators removed.
    """

    if not path:
        return ""
    for prefix in _root_prefixes(project_root):
        if path == prefix:
            return ""
        if path.startswith(prefix) and path[len(prefix)] in _SEPARATORS:
            return path[len(prefix) :].lstrip(_SEPARATORS)
    return path


__all__ = ["absolute_project_path", "relativize"]
