# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

This module provides initialization logic for the package.
"""
try:
    from importlib.metadata import version

    __version__ = version("mvnsettings")
except Exception:  # pragma: no cover
    __version__ = "unknown"
