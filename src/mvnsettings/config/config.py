# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

This module provides loading of the tool's own options file (YAML) with:
- Nested keys accessed using dot notation (e.g., 'maven.active_profiles')
- Environment variable overrides with customizable prefix
- Type preservation (int, float, bool, str, list)
- Optional options files that may be absent

Example:
    >>> config = Config(config_file='mvnsettings.yaml', env_prefix='MVNSETTINGS_')
    >>> config.load()
    >>> profiles = config.get('maven.active_profiles', default=[])
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml


class Config:
    """
    Options file loader.

    Attributes:
        config_file: Path to the YAML options file
        env_prefix: Prefix for environment variables (e.g., 'MVNSETTINGS_')
                    Set to None to disable environment overrides
        required: Whether a missing options file is an error

    Example:
        # mvnsettings.yaml:
        # maven:
        #   user_settings_file: ~/.m2/settings.yaml
        #   active_profiles: [nexus]

        config = Config('mvnsettings.yaml')
        config.load()

        config.get('maven.active_profiles')  # Returns ['nexus']

        # Environment override (MVNSETTINGS_MAVEN__ACTIVE_PROFILES=nexus,ci)
        config.get('maven.active_profiles')  # Returns ['nexus', 'ci']
    """

    def __init__(
        self,
        config_file: str | Path | None = None,
        env_prefix: str | None = "MVNSETTINGS_",
        required: bool = True,
    ) -> None:
        """
        Initialize options loader.

        Args:
            config_file: Path to YAML options file
                        If None, uses 'mvnsettings.yaml' in current directory
            env_prefix: Prefix for environment variable overrides, named as
                       {prefix}{SECTION}__{KEY} (e.g., MVNSETTINGS_MAVEN__OFFLINE).
                       Set to None to disable environment overrides
            required: If False, a missing file yields empty options
        """
        if config_file is None:
            self.config_file = Path("mvnsettings.yaml")
        else:
            self.config_file = Path(config_file)

        self.env_prefix = env_prefix
        self.required = required
        self._data: dict[str, Any] = {}
        self._loaded = False

    def load(self) -> None:
        """
        Load options from the YAML file and apply environment overrides.

        Can be called multiple times to reload.

        Raises:
            ConfigError: If a required file doesn't exist or cannot be parsed
        """
        if not self.config_file.exists():
            if self.required:
                raise ConfigError(f"Configuration file not found: {self.config_file}")
            self._data = {}
        else:
            self._data = self._read()

        self._loaded = True

        if self.env_prefix is not None:
            self._apply_env_overrides()

    def _read(self) -> dict[str, Any]:
        try:
            with open(self.config_file, encoding="utf-8") as file:
                file_content = file.read()
        except OSError as err:
            raise ConfigError(
                f"Failed to open configuration file {self.config_file}: {err}"
            ) from err

        try:
            data = yaml.safe_load(file_content) or {}
        except yaml.YAMLError as err:
            raise ConfigError(
                f"Failed to parse configuration file {self.config_file}: {err}"
            ) from err

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {self.config_file} must contain a mapping")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get an option by key in dot notation.

        Args:
            key: Option key (e.g., 'maven.offline')
            default: Default value if key doesn't exist

        Returns:
            Option value or default

        Raises:
            ConfigError: If options haven't been loaded yet
            ValueError: If key is empty
        """
        if not self._loaded:
            raise ConfigError("Configuration not loaded. Call load() first.")

        if not key:
            raise ValueError("Key cannot be empty")

        value: Any = self._data
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value

    def _apply_env_overrides(self) -> None:
        """
        Apply environment variable overrides.

        - MVNSETTINGS_MAVEN__OFFLINE -> maven.offline
        - MVNSETTINGS_MAVEN__ACTIVE_PROFILES -> maven.active_profiles

        Double underscores (__) separate nesting levels.
        Values are converted based on the existing value's type.
        """
        if self.env_prefix is None:
            return

        for env_key, env_value in os.environ.items():
            if not env_key.startswith(self.env_prefix):
                continue

            config_key = env_key[len(self.env_prefix):].lower().replace("__", ".")
            if not config_key:
                continue

            converted_value = self._convert_type(env_value, self.get(config_key))
            self._set_value(config_key, converted_value)

    def _convert_type(self, value: str, reference_value: Any) -> Any:
        """Convert an environment string to the type of the existing value."""
        if reference_value is None:
            return value

        if isinstance(reference_value, bool):
            return value.lower() in ("true", "1", "yes", "on")
        elif isinstance(reference_value, int):
            try:
                return int(value)
            except ValueError:
                return value
        elif isinstance(reference_value, float):
            try:
                return float(value)
            except ValueError:
                return value
        elif isinstance(reference_value, list):
            return [item.strip() for item in value.split(",") if item.strip()]
        else:
            return value

    def _set_value(self, key: str, value: Any) -> None:
        """Set a value using dot notation, creating nested mappings as needed."""
        parts = key.split(".")
        data = self._data

        for part in parts[:-1]:
            if part not in data:
                data[part] = {}
            elif not isinstance(data[part], dict):
                return
            data = data[part]

        data[parts[-1]] = value

    def __repr__(self) -> str:
        """Return string representation of Config."""
        status = "loaded" if self._loaded else "not loaded"
        return f"Config(config_file={self.config_file}, {status})"


class ConfigError(Exception):
    """
    Base exception for options errors.

    Raised when:
    - A required options file cannot be found
    - The options file cannot be parsed
    - Options are accessed before loading
    """

    pass


class ConfigValidationError(ConfigError):
    """Raised when required options are missing or invalid."""

    pass
