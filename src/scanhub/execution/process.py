# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Thin supervision wrapper around a spawned scanner process."""

from __future__ import annotations

import logging

# Bandit: subprocess usage is intentional; scanners are launched from catalog
# argument vectors without shell expansion.
import subprocess  # nosec B404 - shell-free wrapper around cataloged scanners
import threading
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

_LOGGER = logging.getLogger(__name__)


class SupervisedProcess:
    """Own one scanner process, its captured streams and its kill escalation."""

    def __init__(
        self,
        argv: Sequence[str],
        *,
        cwd: str | Path,
        env: Mapping[str, str],
    ) -> None:
        """Spawn ``argv`` with stdin closed and both output streams captured.

        Args:
            argv: Executable followed by its arguments.
            cwd: Working directory for the process.
            env: Complete environment handed to the process.

        Raises:
            OSError: If the executable cannot be launched.
        """

        self.argv = tuple(argv)
        # Bandit: argument vectors come from the tool catalog; no shell is involved.
        self._popen = subprocess.Popen(  # nosec B603 - controlled arguments, shell disabled
            list(self.argv),
            cwd=str(cwd),
            env=dict(env),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        self._kill_timer: threading.Timer | None = None

    @property
    def pid(self) -> int:
        return self._popen.pid

    @property
    def returncode(self) -> int | None:
        return self._popen.returncode

    def has_exited(self) -> bool:
        """Return ``True`` once the process has terminated."""

        return self._popen.poll() is not None

    def communicate(self) -> tuple[str, str]:
        """Block until the process exits and return ``(stdout, stderr)``.

        Output is accumulated for the whole life of the process. Any pending
        kill escalation is cancelled once the process has exited.

        Returns:
            tuple[str, str]: Captured standard output and standard error.
        """

        stdout, stderr = self._popen.communicate()
        if self._kill_timer is not None:
            self._kill_timer.cancel()
        return stdout or "", stderr or ""

    def terminate(self) -> None:
        """Send SIGTERM unless the process has already exited."""

        self._signal(self._popen.terminate, "terminate")

    def kill(self) -> None:
        """Send SIGKILL unless the process has already exited."""

        self._signal(self._popen.kill, "kill")

    def escalate(self, grace_s: float) -> None:
        """Terminate now and kill if the process outlives ``grace_s`` seconds.

        Args:
            grace_s: Seconds to wait between SIGTERM and SIGKILL.
        """

        self.terminate()
        timer = threading.Timer(grace_s, self._kill_if_alive)
        timer.daemon = True
        self._kill_timer = timer
        timer.start()

    def _kill_if_alive(self) -> None:
        if not self.has_exited():
            _LOGGER.debug("Process %s outlived its grace period; sending SIGKILL", self.pid)
            self.kill()

    def _signal(self, sender: Callable[[], None], label: str) -> None:
        if self.has_exited():
            return
        try:
            sender()
        except OSError:
            _LOGGER.debug("Process %s exited before %s", self.pid, label)


__all__ = ["SupervisedProcess"]
