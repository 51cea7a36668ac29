# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import os
import sys
import textwrap
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from scanhub.config import EngineConfig
from scanhub.core.models import ToolCategory
from scanhub.parsers import JsonParser, parse_semgrep
from scanhub.tools.base import OutputParser, ToolDefinition

ScannerFactory = Callable[..., ToolDefinition]


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Return an empty project directory to scan."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def isolated_env(tmp_path: Path) -> dict[str, str]:
    """Return an environment whose home directory lives under ``tmp_path``."""
    home = tmp_path / "home"
    home.mkdir()
    return {"PATH": os.environ.get("PATH", ""), "HOME": str(home)}


@pytest.fixture
def engine_config(tmp_path: Path) -> EngineConfig:
    """Return engine settings storing reports and tickets under ``tmp_path``."""
    return EngineConfig(
        storage_dir=tmp_path / "analysis",
        kanban_dir=tmp_path / "kanban",
        timeout_grace_s=0.5,
        cancel_grace_s=0.5,
    )


@pytest.fixture
def fake_scanner(tmp_path: Path) -> ScannerFactory:
    """Return a factory building tool definitions backed by a Python script.

    The script body runs under the current interpreter; the scanned project
    path is available to it as ``sys.argv[-1]``.
    """

    counter = {"value": 0}

    def factory(
        body: str,
        *,
        tool_id: str = "fake",
        name: str = "Fake Scanner",
        parser: OutputParser | None = None,
        timeout_s: float | None = None,
    ) -> ToolDefinition:
        counter["value"] += 1
        script = tmp_path / f"scanner_{counter['value']}.py"
        script.write_text(textwrap.dedent(body), encoding="utf-8")

        def build(path: str, extra: Sequence[str]) -> list[str]:
            return [str(script), *extra, path]

        return ToolDefinition(
            id=tool_id,
            name=name,
            command=sys.executable,
            category=ToolCategory.SECURITY,
            languages=("python",),
            args=build,
            parser=parser or JsonParser(tool_id, parse_semgrep),
            timeout_s=timeout_s,
        )

    return factory
