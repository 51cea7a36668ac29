# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers for coercing loosely-typed JSON payloads emitted by scanners."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import TypeAlias

JsonScalar: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = "JsonScalar | list[JsonValue] | dict[str, JsonValue]"


def coerce_optional_int(value: JsonValue | None) -> int | None:
    """Return an optional integer parsed from ``value`` when feasible."""

    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def coerce_optional_str(value: JsonValue | None) -> str | None:
    """Return a string representation of ``value`` or ``None`` when unset or empty."""

    if value is None:
        return None
    if isinstance(value, (list, dict)):
        return None
    text = str(value)
    return text or None


def safe_int(value: JsonValue | None, default: int = 0) -> int:
    """Return ``value`` as ``int`` when possible, otherwise ``default``."""

    coerced = coerce_optional_int(value)
    return default if coerced is None else coerced


def as_mapping(value: JsonValue | None) -> Mapping[str, JsonValue]:
    """Return ``value`` when it is a JSON object, otherwise an empty mapping."""

    if isinstance(value, Mapping):
        return value
    return {}


def as_sequence(value: JsonValue | None) -> Sequence[JsonValue]:
    """Return ``value`` when it is a JSON array, otherwise an empty sequence."""

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    return ()


def iter_dicts(value: JsonValue | None) -> Iterator[Mapping[str, JsonValue]]:
    """Yield mapping items from ``value`` when it is a sequence of JSON objects."""

    for item in as_sequence(value):
        if isinstance(item, Mapping):
            yield item


def dig(value: JsonValue | None, *keys: str) -> JsonValue | None:
    """Return the nested value reached by following ``keys`` through JSON objects.

    Args:
        value: Root JSON value.
        *keys: Object keys traversed in order.

    Returns:
        JsonValue | None: Value at the end of the path, or ``None`` when any hop is missing.
    """

    current: JsonValue | None = value
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


__all__ = [
    "JsonScalar",
    "JsonValue",
    "as_mapping",
    "as_sequence",
    "coerce_optional_int",
    "coerce_optional_str",
    "dig",
    "iter_dicts",
    "safe_int",
]
