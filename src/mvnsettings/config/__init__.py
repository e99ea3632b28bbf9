# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

This package provides loading of the options file with environment variable
overrides and validation, and the typed options it produces.
"""

from __future__ import annotations

from mvnsettings.config.config import Config, ConfigError, ConfigValidationError
from mvnsettings.config.options import (
    SettingsOptions,
    default_global_settings_file,
    default_security_file,
    default_user_settings_file,
)

__all__ = [
    # Configuration
    "Config",
    "ConfigError",
    "ConfigValidationError",
    # Options
    "SettingsOptions",
    "default_user_settings_file",
    "default_global_settings_file",
    "default_security_file",
]
