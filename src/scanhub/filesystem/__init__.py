# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem helpers."""

from __future__ import annotations

from .paths import absolute_project_path, relativize

__all__ = ["absolute_project_path", "relativize"]
