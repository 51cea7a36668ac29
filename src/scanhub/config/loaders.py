# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Configuration sources (user TOML, pyproject, project TOML, environment)."""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final, Protocol

from pydantic import ValidationError

from ..core.errors import ConfigError
from ..platform.environment import user_home
from .models import EngineConfig

PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "scanhub"
PROJECT_CONFIG_NAME: Final[str] = ".scanhub.toml"
ENV_STORAGE_DIR: Final[str] = "SCANHUB_STORAGE_DIR"
ENV_KANBAN_DIR: Final[str] = "SCANHUB_KANBAN_DIR"
ENV_DEFAULT_TIMEOUT: Final[str] = "SCANHUB_DEFAULT_TIMEOUT"

_LOGGER = logging.getLogger(__name__)


class ConfigSource(Protocol):
    """Provide one layer of configuration data."""

    name: str

    def load(self) -> Mapping[str, Any]:
        """Return the configuration fragment supplied by this source."""
        ...

    def describe(self) -> str:
        """Return a human readable description of the source."""
        ...


def _deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` recursively updated with ``overlay``."""

    merged: dict[str, Any] = dict(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _normalise_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Accept top-level ``kebab-case`` keys; nested tool ids keep their spelling."""

    return {key.replace("-", "_"): value for key, value in payload.items()}


class TomlConfigSource:
    """Load configuration data from a standalone TOML document."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self._path = path
        self.name = name or str(path)

    def load(self) -> Mapping[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            with self._path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {self._path}: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Unable to read {self._path}: {exc}") from exc
        return _normalise_keys(self._select(data))

    def _select(self, data: Mapping[str, Any]) -> Mapping[str, Any]:
        return data

    def describe(self) -> str:
        return f"TOML configuration at {self.name}"


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.scanhub]`` within ``pyproject.toml``."""

    def _select(self, data: Mapping[str, Any]) -> Mapping[str, Any]:
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if not isinstance(section, Mapping):
            return {}
        return section

    def describe(self) -> str:
        return f"pyproject.toml ({self.name})"


class EnvironmentConfigSource:
    """Read the ``SCANHUB_*`` overrides from an environment mapping."""

    name = "environment"

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env = os.environ if env is None else env

    def load(self) -> Mapping[str, Any]:
        fragment: dict[str, Any] = {}
        if storage := self._env.get(ENV_STORAGE_DIR):
            fragment["storage_dir"] = storage
        if kanban := self._env.get(ENV_KANBAN_DIR):
            fragment["kanban_dir"] = kanban
        if timeout := self._env.get(ENV_DEFAULT_TIMEOUT):
            try:
                fragment["default_timeout_s"] = float(timeout)
            except ValueError as exc:
                raise ConfigError(f"{ENV_DEFAULT_TIMEOUT} must be a number, got {timeout!r}") from exc
        return fragment

    def describe(self) -> str:
        return "SCANHUB_* environment variables"


def default_sources(
    project_root: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> list[ConfigSource]:
    """Return configuration sources ordered from lowest to highest priority.

    Args:
        project_root: Project whose ``pyproject.toml`` and ``.scanhub.toml``
            participate; omitted sources are skipped when ``None``.
        env: Environment mapping consulted for the user home and overrides.

    Returns:
        list[ConfigSource]: Sources in merge order.
    """

    source_env = os.environ if env is None else env
    home = user_home(source_env)
    sources: list[ConfigSource] = [
        TomlConfigSource(home / ".config" / "scanhub" / "config.toml", name="user config"),
    ]
    if project_root is not None:
        root = Path(project_root).expanduser()
        sources.append(PyProjectConfigSource(root / "pyproject.toml"))
        sources.append(TomlConfigSource(root / PROJECT_CONFIG_NAME))
    sources.append(EnvironmentConfigSource(source_env))
    return sources


def load_config(
    project_root: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    sources: Sequence[ConfigSource] | None = None,
) -> EngineConfig:
    """Build an :class:`EngineConfig` by layering every configuration source.

    Args:
        project_root: Optional project directory contributing project-level files.
        env: Environment mapping; defaults to :data:`os.environ`.
        sources: Explicit sources overriding :func:`default_sources`.

    Returns:
        EngineConfig: Validated configuration.

    Raises:
        ConfigError: If a source is unreadable or the merged data is invalid.
    """

    merged: dict[str, Any] = {}
    for source in sources if sources is not None else default_sources(project_root, env=env):
        fragment = source.load()
        if fragment:
            _LOGGER.debug("Applying configuration from %s", source.describe())
            merged = _deep_merge(merged, fragment)
    try:
        return EngineConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid scanhub configuration: {exc}") from exc


__all__ = [
    "ConfigSource",
    "ENV_DEFAULT_TIMEOUT",
    "ENV_KANBAN_DIR",
    "ENV_STORAGE_DIR",
    "EnvironmentConfigSource",
    "PROJECT_CONFIG_NAME",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "default_sources",
    "load_config",
]
