# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity scale and per-tool vocabulary mapping tables."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Final

from .serialization import JsonValue


class Severity(str, Enum):
    """Shared five-level severity scale ordered from most to least severe."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Return the position of the level in the total order (``critical`` is ``0``).

        Returns:
            int: Zero-based rank where lower values are more severe.
        """

        return _SEVERITY_ORDER.index(self)

    def is_at_least(self, other: Severity) -> bool:
        """Return whether this level is as severe as or more severe than ``other``.

        Args:
            other: Level compared against.

        Returns:
            bool: ``True`` when ``self`` ranks at or above ``other``.
        """

        return self.rank <= other.rank


_SEVERITY_ORDER: Final[tuple[Severity, ...]] = (
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
    Severity.INFO,
)


def ordered_severities() -> tuple[Severity, ...]:
    """Return every severity level from most to least severe."""

    return _SEVERITY_ORDER


@dataclass(frozen=True, slots=True)
class SeverityTable:
    """Total mapping from a tool's native severity vocabulary onto :class:`Severity`.

    Labels are matched case-insensitively. Anything outside ``entries``,
    including missing values, resolves to ``default`` rather than being dropped.
    """

    entries: Mapping[str, Severity] = field(default_factory=dict)
    default: Severity = Severity.MEDIUM

    def resolve(self, label: JsonValue | None) -> Severity:
        """Return the shared severity for ``label``.

        Args:
            label: Native severity emitted by the tool (string, number or ``None``).

        Returns:
            Severity: Mapped severity, or :attr:`default` for unknown labels.
        """

        if label is None or isinstance(label, (list, dict)):
            return self.default
        key = str(label).strip().lower()
        return self.entries.get(key, self.default)


SEMGREP_SEVERITY: Final[SeverityTable] = SeverityTable(
    entries={
        "error": Severity.HIGH,
        "warning": Severity.MEDIUM,
        "info": Severity.INFO,
    },
    default=Severity.MEDIUM,
)

BANDIT_SEVERITY: Final[SeverityTable] = SeverityTable(
    entries={
        "high": Severity.HIGH,
        "medium": Severity.MEDIUM,
        "low": Severity.LOW,
    },
    default=Severity.MEDIUM,
)

BEARER_SEVERITY: Final[SeverityTable] = SeverityTable(
    entries={
        **SEMGREP_SEVERITY.entries,
        "critical": Severity.CRITICAL,
        "high": Severity.HIGH,
        "medium": Severity.MEDIUM,
        "low": Severity.LOW,
    },
    default=Severity.MEDIUM,
)

TRIVY_SEVERITY: Final[SeverityTable] = SeverityTable(
    entries={
        "critical": Severity.CRITICAL,
        "high": Severity.HIGH,
        "medium": Severity.MEDIUM,
        "low": Severity.LOW,
    },
    default=Severity.INFO,
)

OSV_SEVERITY: Final[SeverityTable] = SeverityTable(
    entries={
        **TRIVY_SEVERITY.entries,
        "moderate": Severity.MEDIUM,
    },
    default=Severity.INFO,
)

ESLINT_SEVERITY: Final[SeverityTable] = SeverityTable(
    entries={
        "2": Severity.HIGH,
        "1": Severity.MEDIUM,
    },
    default=Severity.INFO,
)

CHECKOV_SEVERITY: Final[SeverityTable] = SeverityTable(
    entries={
        "critical": Severity.CRITICAL,
        "high": Severity.HIGH,
        "medium": Severity.MEDIUM,
        "low": Severity.LOW,
    },
    default=Severity.MEDIUM,
)

PYLINT_SEVERITY: Final[SeverityTable] = SeverityTable(
    entries={
        "fatal": Severity.HIGH,
        "error": Severity.HIGH,
        "warning": Severity.MEDIUM,
        "convention": Severity.LOW,
        "refactor": Severity.LOW,
    },
    default=Severity.INFO,
)

CPPCHECK_SEVERITY: Final[SeverityTable] = SeverityTable(
    entries={
        "error": Severity.HIGH,
        "warning": Severity.MEDIUM,
        "style": Severity.LOW,
        "performance": Severity.LOW,
        "portability": Severity.LOW,
        "information": Severity.INFO,
        "debug": Severity.INFO,
    },
    default=Severity.INFO,
)

__all__ = [
    "BANDIT_SEVERITY",
    "BEARER_SEVERITY",
    "CHECKOV_SEVERITY",
    "CPPCHECK_SEVERITY",
    "ESLINT_SEVERITY",
    "OSV_SEVERITY",
    "PYLINT_SEVERITY",
    "SEMGREP_SEVERITY",
    "Severity",
    "SeverityTable",
    "TRIVY_SEVERITY",
    "ordered_severities",
]
