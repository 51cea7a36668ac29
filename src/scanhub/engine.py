# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Invocation boundary tying catalog, supervisor, storage and tickets together."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Final

from .config.models import EngineConfig
from .core.errors import ReportStoreError, ToolBusyError, ToolNotFoundError
from .core.models import CancelResult, DeleteResult, Report, TicketBatchResult, ToolStatus, now_ms
from .execution.availability import AvailabilityProber
from .execution.progress import ProgressObserver
from .execution.supervisor import RunSupervisor
from .filesystem.paths import absolute_project_path
from .storage.report_cache import ReportCache
from .storage.report_store import ReportStore
from .tickets.grouping import GroupBy, build_tickets, group_findings
from .tickets.sink import JsonFileTicketSink, TicketSink
from .tools.catalog import DEFAULT_REGISTRY
from .tools.registry import ToolRegistry

DEFAULT_JOBS: Final[int] = 4
NO_RUNNING_PROCESS: Final[str] = "No running process for this tool"
REPORT_NOT_FOUND: Final[str] = "Report not found"
TICKET_REPORT_NOT_FOUND: Final[str] = "Report not found. Run the analysis again."
NO_MATCHING_FINDINGS: Final[str] = "No matching findings found."

_LOGGER = logging.getLogger(__name__)


class AnalysisEngine:
    """Own the in-flight registry, report cache and stores for one application.

    Scan failures never raise out of :meth:`run`; they come back as reports
    whose ``error`` explains why there are no findings.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        registry: ToolRegistry | None = None,
        store: ReportStore | None = None,
        sink: TicketSink | None = None,
        prober: AvailabilityProber | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialise the engine.

        Args:
            config: Engine settings; defaults to :class:`EngineConfig` defaults.
            registry: Tool catalog; defaults to the builtin catalog.
            store: Report persistence; defaults to ``config.storage_dir``.
            sink: Ticket store; defaults to a JSON file sink under ``config.kanban_dir``.
            prober: Executable resolver shared by detection and execution.
            env: Base environment for probing and spawned processes.
        """

        self._config = config or EngineConfig()
        self._registry = registry if registry is not None else DEFAULT_REGISTRY
        self._store = store or ReportStore(self._config.storage_dir)
        self._sink: TicketSink = sink or JsonFileTicketSink(self._config.kanban_dir)
        self._prober = prober or AvailabilityProber(self._config.extra_paths, env=env)
        self._supervisor = RunSupervisor(self._config, prober=self._prober, env=env)
        self._cache = ReportCache(self._config.max_cached_reports)

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def supervisor(self) -> RunSupervisor:
        return self._supervisor

    @property
    def cache(self) -> ReportCache:
        return self._cache

    def detect_tools(self, project_path: str | Path | None = None) -> list[ToolStatus]:
        """Return every cataloged tool with its installation status.

        Args:
            project_path: Optional project enabling project-local installs (``eslint``).

        Returns:
            list[ToolStatus]: Statuses in catalog order.
        """

        project = absolute_project_path(project_path) if project_path else None
        return [tool.to_status(self._prober.is_available(tool, project)) for tool in self._registry.tools()]

    def run(
        self,
        project_path: str | Path,
        tool_id: str,
        extra_args: Sequence[str] | None = None,
        observer: ProgressObserver | None = None,
    ) -> Report:
        """Run one tool and return its report.

        Args:
            project_path: Project directory to scan.
            tool_id: Catalog id of the tool.
            extra_args: Additional tool arguments.
            observer: Optional progress callback.

        Returns:
            Report: Completed report. Resolved runs are cached and persisted;
            unknown or busy tools yield an unstored error report.
        """

        project = str(absolute_project_path(project_path))
        tool = self._registry.try_get(tool_id)
        if tool is None:
            return self._error_report(project, tool_id, tool_id, str(ToolNotFoundError(tool_id)))
        try:
            report = self._supervisor.run(tool, project, extra_args, observer)
        except ToolBusyError as exc:
            return self._error_report(project, tool.id, tool.name, str(exc))
        self._remember(report)
        return report

    def run_many(
        self,
        project_path: str | Path,
        tool_ids: Sequence[str],
        extra_args: Sequence[str] | None = None,
        jobs: int = DEFAULT_JOBS,
        observer: ProgressObserver | None = None,
    ) -> list[Report]:
        """Run several tools concurrently.

        Args:
            project_path: Project directory to scan.
            tool_ids: Tools to run.
            extra_args: Arguments passed to every tool.
            jobs: Maximum number of concurrent processes.
            observer: Optional progress callback shared by every run.

        Returns:
            list[Report]: Reports in the order of ``tool_ids``.
        """

        if not tool_ids:
            return []
        with ThreadPoolExecutor(max_workers=max(1, min(jobs, len(tool_ids)))) as executor:
            futures = [
                executor.submit(self.run, project_path, tool_id, extra_args, observer) for tool_id in tool_ids
            ]
            return [future.result() for future in futures]

    def cancel(self, tool_id: str) -> CancelResult:
        """Cancel the in-flight run of ``tool_id``.

        The cancelled run still resolves into a report carrying a cancellation error.
        """

        if self._supervisor.cancel(tool_id):
            return CancelResult(success=True)
        return CancelResult(success=False, error=NO_RUNNING_PROCESS)

    def load_reports(self, project_path: str | Path) -> list[Report]:
        """Return persisted reports of ``project_path`` newest first and cache them."""

        reports = self._store.load_all(project_path)
        self._cache.put_many(reports)
        return reports

    def delete_report(self, project_path: str | Path, report_id: str) -> DeleteResult:
        """Delete a persisted report and evict it from the cache."""

        if self._store.delete(project_path, report_id):
            self._cache.discard(report_id)
            return DeleteResult(success=True)
        return DeleteResult(success=False, error=REPORT_NOT_FOUND)

    def get_report(self, report_id: str, project_path: str | Path | None = None) -> Report | None:
        """Return a report from the cache, falling back to ``project_path``'s persisted reports.

        Args:
            report_id: Identifier of the report.
            project_path: Project whose persisted reports are searched on a cache miss.

        Returns:
            Report | None: The report, or ``None`` when it cannot be found.
        """

        cached = self._cache.get(report_id)
        if cached is not None or project_path is None:
            return cached
        for report in self.load_reports(project_path):
            if report.id == report_id:
                return report
        return None

    def create_tickets(
        self,
        finding_ids: Iterable[str] | None,
        report_id: str,
        target_list_id: str,
        target_project_ref: str | None = None,
        group_by: GroupBy | str = GroupBy.INDIVIDUAL,
        project_path: str | Path | None = None,
    ) -> TicketBatchResult:
        """Turn selected findings of a report into tickets in ``target_list_id``.

        Args:
            finding_ids: Findings to include, or ``None`` for every finding of the report.
            report_id: Report holding the findings.
            target_list_id: Ticket list (workspace) receiving the tickets.
            target_project_ref: Optional project reference stored on each ticket.
            group_by: Grouping strategy.
            project_path: Project used to load the report when it is not cached.

        Returns:
            TicketBatchResult: Number of tickets written, or an error.
        """

        report = self.get_report(report_id, project_path)
        if report is None:
            return TicketBatchResult(success=False, error=TICKET_REPORT_NOT_FOUND)
        selected = report.select(finding_ids)
        if not selected:
            return TicketBatchResult(success=False, error=NO_MATCHING_FINDINGS)

        try:
            strategy = GroupBy(group_by)
            groups = group_findings(selected, strategy)
            tasks = self._sink.read_tasks(target_list_id)
            tickets = build_tickets(
                groups,
                strategy,
                report.tool_name,
                target_list_id,
                target_project_ref,
                existing=tasks,
            )
            self._sink.write_tasks(target_list_id, [*tasks, *(ticket.to_task() for ticket in tickets)])
        except (ValueError, OSError) as exc:
            _LOGGER.debug("Ticket creation in %s failed: %s", target_list_id, exc)
            return TicketBatchResult(success=False, error=str(exc))
        _LOGGER.debug("Created %d ticket(s) in %s from report %s", len(tickets), target_list_id, report_id)
        return TicketBatchResult(success=True, ticket_count=len(tickets))

    def _remember(self, report: Report) -> None:
        self._cache.put(report)
        try:
            self._store.persist(report)
        except ReportStoreError as exc:
            _LOGGER.warning("Failed to persist report %s: %s", report.id, exc)

    @staticmethod
    def _error_report(project: str, tool_id: str, tool_name: str, error: str) -> Report:
        return Report(
            project_path=project,
            tool_id=tool_id,
            tool_name=tool_name,
            timestamp=now_ms(),
            duration=0,
            error=error,
        )


__all__ = [
    "AnalysisEngine",
    "DEFAULT_JOBS",
    "NO_MATCHING_FINDINGS",
    "NO_RUNNING_PROCESS",
    "REPORT_NOT_FOUND",
    "TICKET_REPORT_NOT_FOUND",
]
