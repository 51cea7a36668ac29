# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run scanners as supervised processes and resolve each run into a report.

Every run moves through ``pending -> running -> completed`` or, when a
timeout or cancellation fires, ``running -> timed_out -> killing -> killed``,
and finally ``resolved``. A report is only produced once the process has
fully exited.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..config.models import EngineConfig
from ..core.errors import ToolBusyError
from ..core.models import Finding, Report, now_ms
from ..platform.environment import enriched_environment
from ..tools.base import ToolDefinition
from .availability import AvailabilityProber
from .process import SupervisedProcess
from .progress import ProgressEvent, ProgressObserver, ProgressStatus, notify

_LOGGER = logging.getLogger(__name__)

_PARSE_FAILURES: tuple[type[Exception], ...] = (
    ValueError,
    TypeError,
    KeyError,
    AttributeError,
    IndexError,
    RecursionError,
)


class RunState(str, Enum):
    """Lifecycle states of one supervised run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    KILLING = "killing"
    KILLED = "killed"
    RESOLVED = "resolved"


class KillReason(str, Enum):
    """Why a run entered the kill path."""

    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class _ActiveRun:
    tool: ToolDefinition
    timeout_s: float
    observer: ProgressObserver | None = None
    state: RunState = RunState.PENDING
    process: SupervisedProcess | None = None
    kill_reason: KillReason | None = None
    kill_grace_s: float = 0.0
    lock: threading.Lock = field(default_factory=threading.Lock)


def format_seconds(value: float) -> str:
    """Return ``value`` without a trailing ``.0`` (``300`` rather than ``300.0``)."""

    return f"{value:g}"


class RunSupervisor:
    """Spawn, time-limit, cancel and resolve scanner processes.

    At most one process per tool id is in flight. The in-flight registry is
    guarded by a lock and emptied on every terminal transition.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        prober: AvailabilityProber | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialise the supervisor.

        Args:
            config: Engine settings (timeouts, grace periods, extra paths).
            prober: Executable resolver; defaults to one sharing ``config.extra_paths``.
            env: Base environment for spawned processes; defaults to :data:`os.environ`.
        """

        self._config = config or EngineConfig()
        self._env = os.environ if env is None else env
        self._prober = prober or AvailabilityProber(self._config.extra_paths, env=self._env)
        self._in_flight: dict[str, _ActiveRun] = {}
        self._lock = threading.Lock()

    @property
    def prober(self) -> AvailabilityProber:
        return self._prober

    def running_tools(self) -> tuple[str, ...]:
        """Return the ids of tools with a process currently in flight."""

        with self._lock:
            return tuple(self._in_flight)

    def is_running(self, tool_id: str) -> bool:
        with self._lock:
            return tool_id in self._in_flight

    def timeout_for(self, tool: ToolDefinition) -> float:
        """Return the timeout applied to ``tool``.

        Args:
            tool: Tool about to run.

        Returns:
            float: The definition override, else the configured per-tool value,
            else the default timeout.
        """

        if tool.timeout_s is not None:
            return tool.timeout_s
        return self._config.timeout_for(tool.id)

    def run(
        self,
        tool: ToolDefinition,
        project_path: str | Path,
        extra_args: Sequence[str] | None = None,
        observer: ProgressObserver | None = None,
    ) -> Report:
        """Run ``tool`` against ``project_path`` and block until it resolves.

        Args:
            tool: Tool definition to execute.
            project_path: Absolute project directory used as cwd and scan target.
            extra_args: Caller supplied arguments inserted by the tool's builder.
            observer: Optional progress callback.

        Returns:
            Report: Parsed findings or an error describing why there are none.

        Raises:
            ToolBusyError: If a process for ``tool.id`` is already in flight.
        """

        project = str(project_path)
        active = _ActiveRun(tool=tool, timeout_s=self.timeout_for(tool), observer=observer)
        with self._lock:
            if tool.id in self._in_flight:
                raise ToolBusyError(tool.id)
            self._in_flight[tool.id] = active

        started_ms = now_ms()
        started = time.monotonic()
        try:
            return self._supervise(active, project, extra_args, observer, started_ms, started)
        finally:
            with self._lock:
                if self._in_flight.get(tool.id) is active:
                    del self._in_flight[tool.id]

    def cancel(self, tool_id: str) -> bool:
        """Kill the in-flight process of ``tool_id`` with the cancellation grace period.

        Args:
            tool_id: Tool whose run should be cancelled.

        Returns:
            bool: ``True`` when a run was found and the kill path was entered.
        """

        with self._lock:
            active = self._in_flight.get(tool_id)
        if active is None:
            return False
        self._begin_kill(active, KillReason.CANCELLED, self._config.cancel_grace_s)
        return True

    def _supervise(
        self,
        active: _ActiveRun,
        project: str,
        extra_args: Sequence[str] | None,
        observer: ProgressObserver | None,
        started_ms: int,
        started: float,
    ) -> Report:
        tool = active.tool
        argv = [self._prober.resolve_command(tool, project), *tool.build_args(project, extra_args)]
        env = enriched_environment(self._config.extra_paths, env=self._env)
        notify(observer, ProgressEvent(tool.id, ProgressStatus.RUNNING, f"Running {tool.name}..."))

        try:
            process = SupervisedProcess(argv, cwd=project, env=env)
        except OSError as exc:
            _LOGGER.debug("Failed to spawn %s: %s", tool.id, exc)
            message = str(exc) or repr(exc)
            notify(observer, ProgressEvent(tool.id, ProgressStatus.ERROR, f"{tool.name} failed: {message}"))
            return self._resolve(active, project, started_ms, started, None, error=message)

        timer = threading.Timer(active.timeout_s, self._on_timeout, args=(active,))
        timer.daemon = True
        with active.lock:
            active.process = process
            self._transition(active, RunState.RUNNING)
            pending_reason = active.kill_reason
            if pending_reason is not None:
                self._transition(active, RunState.KILLING)
        if pending_reason is not None:
            process.escalate(active.kill_grace_s)
        else:
            timer.start()

        stdout, stderr = process.communicate()
        timer.cancel()

        with active.lock:
            reason = active.kill_reason
            self._transition(active, RunState.KILLED if reason is not None else RunState.COMPLETED)

        if reason is KillReason.TIMEOUT:
            error = f"{tool.name} timed out after {format_seconds(active.timeout_s)}s and was killed."
            return self._resolve(active, project, started_ms, started, observer, error=error)
        if reason is KillReason.CANCELLED:
            error = f"{tool.name} was cancelled and killed."
            return self._resolve(active, project, started_ms, started, observer, error=error)

        raw = stdout if stdout else stderr
        returncode = process.returncode if process.returncode is not None else 0
        if returncode != 0 and not raw.strip():
            _LOGGER.debug("%s exited with %s and no output", tool.id, returncode)
            error = self._exit_error(tool, returncode, stderr)
            return self._resolve(active, project, started_ms, started, observer, error=error)
        try:
            findings = tool.parser(raw, project)
        except _PARSE_FAILURES as exc:
            if returncode != 0:
                error = self._exit_error(tool, returncode, stderr)
            else:
                error = f"Failed to parse {tool.name} output: {exc}"
            _LOGGER.debug("Could not parse %s output (exit %s): %s", tool.id, returncode, exc)
            return self._resolve(active, project, started_ms, started, observer, error=error)
        return self._resolve(active, project, started_ms, started, observer, findings=findings)

    def _exit_error(self, tool: ToolDefinition, returncode: int, stderr: str) -> str:
        excerpt = stderr[: self._config.stderr_excerpt_chars]
        return f"{tool.name} exited with code {returncode}. {excerpt}"

    def _on_timeout(self, active: _ActiveRun) -> None:
        message = f"{active.tool.name} exceeded {format_seconds(active.timeout_s)}s; terminating"
        notify(active.observer, ProgressEvent(active.tool.id, ProgressStatus.TIMED_OUT, message))
        self._begin_kill(active, KillReason.TIMEOUT, self._config.timeout_grace_s)

    def _begin_kill(self, active: _ActiveRun, reason: KillReason, grace_s: float) -> None:
        with active.lock:
            if active.kill_reason is not None or active.state in {RunState.COMPLETED, RunState.RESOLVED}:
                return
            active.kill_reason = reason
            active.kill_grace_s = grace_s
            process = active.process
            if process is None:
                # not spawned yet; escalation happens right after spawn
                return
            if reason is KillReason.TIMEOUT:
                self._transition(active, RunState.TIMED_OUT)
            self._transition(active, RunState.KILLING)
        process.escalate(grace_s)

    def _resolve(
        self,
        active: _ActiveRun,
        project: str,
        started_ms: int,
        started: float,
        observer: ProgressObserver | None,
        *,
        findings: Sequence[Finding] = (),
        error: str | None = None,
    ) -> Report:
        tool = active.tool
        report = Report(
            project_path=project,
            tool_id=tool.id,
            tool_name=tool.name,
            timestamp=started_ms,
            duration=int((time.monotonic() - started) * 1000),
            findings=() if error is not None else tuple(findings),
            error=error,
        )
        with active.lock:
            self._transition(active, RunState.RESOLVED)
        if error is not None:
            notify(observer, ProgressEvent(tool.id, ProgressStatus.ERROR, error))
        else:
            notify(
                observer,
                ProgressEvent(tool.id, ProgressStatus.DONE, f"{tool.name} found {report.summary.total} issue(s)"),
            )
        return report

    @staticmethod
    def _transition(active: _ActiveRun, state: RunState) -> None:
        _LOGGER.debug("%s: %s -> %s", active.tool.id, active.state.value, state.value)
        active.state = state


__all__ = ["KillReason", "RunState", "RunSupervisor", "format_seconds"]
