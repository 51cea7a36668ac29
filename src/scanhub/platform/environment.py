# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Process environment helpers for locating per-user scanner installs."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Final

_PATH_KEY: Final[str] = "PATH"
_HOME_KEY: Final[str] = "HOME"
_PYTHON_USER_VERSIONS: Final[tuple[str, ...]] = ("3.11", "3.12", "3.13")


def is_windows() -> bool:
    """Return ``True`` when running on Windows."""

    return sys.platform.startswith("win")


def user_home(env: Mapping[str, str] | None = None) -> Path:
    """Return the real user home directory.

    Args:
        env: Environment consulted before falling back to :meth:`Path.home`.

    Returns:
        Path: Home directory of the invoking user.
    """

    source = os.environ if env is None else env
    for key in (_HOME_KEY, "USERPROFILE"):
        value = source.get(key)
        if value:
            return Path(value)
    return Path.home()


def common_tool_paths(home: Path | None = None, env: Mapping[str, str] | None = None) -> list[str]:
    """Return well-known install directories for scanners on the current platform.

    GUI launchers frequently start processes with a minimal ``PATH``; these
    directories cover Homebrew, pip ``--user`` installs and cloned tools.

    Args:
        home: Home directory to expand user-relative entries against.
        env: Environment used for Windows ``APPDATA`` lookups.

    Returns:
        list[str]: Directories in search order.
    """

    source = os.environ if env is None else env
    base = home if home is not None else user_home(source)
    if is_windows():
        appdata = source.get("APPDATA", "")
        scripts = [f"{appdata}\\Python\\Python{version.replace('.', '')}\\Scripts" for version in _PYTHON_USER_VERSIONS]
        return [
            "C:\\ProgramData\\chocolatey\\bin",
            *scripts,
            str(base / ".local" / "bin"),
        ]
    return [
        "/usr/local/bin",
        "/opt/homebrew/bin",
        "/opt/homebrew/sbin",
        str(base / ".local" / "bin"),
        *(str(base / "Library" / "Python" / version / "bin") for version in _PYTHON_USER_VERSIONS),
        str(base / ".graudit"),
    ]


def enriched_search_path(
    extra_paths: Sequence[str] = (),
    *,
    env: Mapping[str, str] | None = None,
) -> str:
    """Return the inherited ``PATH`` extended with common install locations.

    Args:
        extra_paths: Additional configured directories appended last.
        env: Base environment; defaults to :data:`os.environ`.

    Returns:
        str: ``os.pathsep``-joined search path.
    """

    source = os.environ if env is None else env
    inherited = source.get(_PATH_KEY, "")
    entries = [inherited, *common_tool_paths(env=source), *extra_paths]
    return os.pathsep.join(entries)


def enriched_environment(
    extra_paths: Sequence[str] = (),
    *,
    env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return the environment handed to every spawned scanner process.

    Args:
        extra_paths: Additional configured directories appended to ``PATH``.
        env: Base environment; defaults to :data:`os.environ`.

    Returns:
        dict[str, str]: Inherited variables with ``HOME`` and ``PATH`` overridden.
    """

    source = os.environ if env is None else env
    enriched = dict(source)
    enriched[_HOME_KEY] = str(user_home(source))
    enriched[_PATH_KEY] = enriched_search_path(extra_paths, env=source)
    return enriched


__all__ = [
    "common_tool_paths",
    "enriched_environment",
    "enriched_search_path",
    "is_windows",
    "user_home",
]
