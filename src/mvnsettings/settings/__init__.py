# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Settings model and the loader that merges global and user documents.
"""

from __future__ import annotations

from mvnsettings.settings.loader import SettingsLoader, merge_settings
from mvnsettings.settings.model import (
    Activation,
    ActivationPredicate,
    FileExists,
    HttpHeader,
    JdkVersion,
    Mirror,
    OperatingSystem,
    Profile,
    Property,
    Repository,
    Server,
    ServerConfiguration,
    Settings,
)

__all__ = [
    # Loader
    "SettingsLoader",
    "merge_settings",
    # Model
    "Settings",
    "Server",
    "ServerConfiguration",
    "HttpHeader",
    "Mirror",
    "Profile",
    "Repository",
    # Activation
    "Activation",
    "ActivationPredicate",
    "JdkVersion",
    "OperatingSystem",
    "Property",
    "FileExists",
]
