# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Typed resolution options built from the ``maven`` section of the options file.

Example mvnsettings.yaml:

    maven:
      user_settings_file: ~/.m2/settings.yaml
      global_settings_file: /opt/maven/conf/settings.yaml
      security_file: ~/.m2/settings-security.yaml
      active_profiles: [nexus, ci]
      export_build_props: true
      audit_file: ~/.m2/mvnsettings-audit.log
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mvnsettings.config.config import Config, ConfigValidationError

SECTION = "maven"


def default_user_settings_file() -> Path:
    """Return ``~/.m2/settings.yaml``."""
    return Path.home() / ".m2" / "settings.yaml"


def default_global_settings_file(environ: Mapping[str, str] | None = None) -> Path | None:
    """Return ``$M2_HOME/conf/settings.yaml``, or None if M2_HOME is unset."""
    environ = os.environ if environ is None else environ
    m2_home = environ.get("M2_HOME")
    if not m2_home:
        return None
    return Path(m2_home) / "conf" / "settings.yaml"


def default_security_file() -> Path:
    """Return ``~/.m2/settings-security.yaml``."""
    return Path.home() / ".m2" / "settings-security.yaml"


@dataclass
class SettingsOptions:
    """
    Options controlling one settings resolution.

    Attributes:
        user_settings_file: User settings document
        global_settings_file: Global settings document, None to skip it
        security_file: Security document holding the master password
        active_profiles: Profile ids to activate explicitly
        export_build_props: Use project properties as user properties
                            during profile activation
        audit_file: File receiving credential audit records, None for none
    """

    user_settings_file: Path | None = field(default_factory=default_user_settings_file)
    global_settings_file: Path | None = field(default_factory=default_global_settings_file)
    security_file: Path | None = field(default_factory=default_security_file)
    active_profiles: list[str] = field(default_factory=list)
    export_build_props: bool = True
    audit_file: Path | None = None

    @classmethod
    def from_config(cls, config: Config) -> SettingsOptions:
        """
        Build options from a loaded Config.

        Keys missing from the ``maven`` section keep their defaults.

        Raises:
            ConfigValidationError: If a value has the wrong type
        """
        section = config.get(SECTION, default={})
        if not isinstance(section, dict):
            raise ConfigValidationError(f"Configuration section '{SECTION}' must be a mapping")

        options = cls()
        if "user_settings_file" in section:
            options.user_settings_file = _path(section["user_settings_file"])
        if "global_settings_file" in section:
            options.global_settings_file = _path(section["global_settings_file"])
        if "security_file" in section:
            options.security_file = _path(section["security_file"])
        if "active_profiles" in section:
            options.active_profiles = _string_list(section["active_profiles"], "active_profiles")
        if "export_build_props" in section:
            options.export_build_props = _bool(section["export_build_props"], "export_build_props")
        if "audit_file" in section:
            options.audit_file = _path(section["audit_file"])
        return options


def _path(value: Any) -> Path | None:
    if value is None or value == "":
        return None
    return Path(str(value)).expanduser()


def _string_list(value: Any, key: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    raise ConfigValidationError(f"Option '{SECTION}.{key}' must be a list or a comma-separated string")


def _bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    raise ConfigValidationError(f"Option '{SECTION}.{key}' must be a boolean")
