# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""File-backed persistence of analysis reports, one directory per project."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Final

from pydantic import ValidationError

from ..core.errors import ReportStoreError
from ..core.models import Report
from ..filesystem.paths import absolute_project_path

REPORT_PREFIX: Final[str] = "report-"
REPORT_SUFFIX: Final[str] = ".json"
_DIGEST_LENGTH: Final[int] = 12

_LOGGER = logging.getLogger(__name__)


def project_digest(project_path: str | Path) -> str:
    """Return the directory key for ``project_path``.

    Args:
        project_path: Project directory in any spelling.

    Returns:
        str: First twelve hex characters of the MD5 of the resolved absolute path.
    """

    canonical = str(absolute_project_path(project_path)).encode("utf-8")
    # Bandit: MD5 only derives a stable directory name, not a security boundary.
    return hashlib.md5(canonical, usedforsecurity=False).hexdigest()[:_DIGEST_LENGTH]  # nosec B324


class ReportStore:
    """Persist reports under ``<root>/<project digest>/report-<id>.json``."""

    def __init__(self, root: Path) -> None:
        """Initialise the store rooted at ``root``.

        Args:
            root: Directory holding one sub-directory per project.
        """

        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def directory_for(self, project_path: str | Path) -> Path:
        """Return the directory holding reports of ``project_path``."""

        return self._root / project_digest(project_path)

    def _report_path(self, project_path: str | Path, report_id: str) -> Path | None:
        if not report_id or Path(report_id).name != report_id:
            return None
        return self.directory_for(project_path) / f"{REPORT_PREFIX}{report_id}{REPORT_SUFFIX}"

    def persist(self, report: Report) -> Path:
        """Write ``report`` atomically and return its file path.

        Args:
            report: Report to persist.

        Returns:
            Path: Location of the written file.

        Raises:
            ReportStoreError: If the directory or file cannot be written.
        """

        target = self._report_path(report.project_path, report.id)
        if target is None:
            raise ReportStoreError(f"Invalid report id: {report.id!r}")
        payload = json.dumps(report.model_dump(mode="json"), indent=2)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(prefix=".report-", suffix=".tmp", dir=target.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(temp_name, target)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise ReportStoreError(f"Unable to persist report {report.id}: {exc}") from exc
        return target

    def load_all(self, project_path: str | Path) -> list[Report]:
        """Return every readable report of ``project_path``, newest first.

        Corrupted or schema-invalid files are skipped.

        Args:
            project_path: Project whose reports should be loaded.

        Returns:
            list[Report]: Reports sorted by descending timestamp.
        """

        directory = self.directory_for(project_path)
        if not directory.is_dir():
            return []
        reports: list[Report] = []
        for entry in sorted(directory.glob(f"{REPORT_PREFIX}*{REPORT_SUFFIX}")):
            try:
                reports.append(Report.model_validate_json(entry.read_text(encoding="utf-8")))
            except (OSError, ValidationError, UnicodeDecodeError) as exc:
                _LOGGER.debug("Skipping unreadable report %s: %s", entry, exc)
        reports.sort(key=lambda report: report.timestamp, reverse=True)
        return reports

    def delete(self, project_path: str | Path, report_id: str) -> bool:
        """Remove the persisted report ``report_id``.

        Args:
            project_path: Project the report belongs to.
            report_id: Identifier of the report.

        Returns:
            bool: ``True`` when a file was removed.
        """

        target = self._report_path(project_path, report_id)
        if target is None or not target.is_file():
            return False
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        return True


__all__ = ["REPORT_PREFIX", "REPORT_SUFFIX", "ReportStore", "project_digest"]
