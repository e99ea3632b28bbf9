# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Tests for mvnsettings.config.config module.

Tests options loading from YAML files with environment variable overrides.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from mvnsettings.config.config import Config, ConfigError


class TestConfigInitialization:
    """Tests for Config initialization."""

    def test_config_creation_without_file(self) -> None:
        """Test creating Config without specifying a file uses mvnsettings.yaml."""
        config = Config()
        assert config.config_file == Path("mvnsettings.yaml")
        assert config.required is True

    def test_config_with_string_path(self, tmp_path: Path) -> None:
        """Test Config accepts string paths in addition to Path objects."""
        config_file = tmp_path / "mvnsettings.yaml"

        config = Config(config_file=str(config_file))
        assert config.config_file == config_file

    def test_config_creation_with_nonexistent_file(self, tmp_path: Path) -> None:
        """Test creating Config with non-existent file doesn't fail until load()."""
        config = Config(config_file=tmp_path / "nonexistent.yaml")
        assert "not loaded" in repr(config)


class TestConfigLoading:
    """Tests for loading options from YAML files."""

    def test_load_nested_config(self, tmp_path: Path) -> None:
        """Test loading options with nested structures."""
        config_file = tmp_path / "mvnsettings.yaml"
        config_file.write_text("""
maven:
  user_settings_file: /home/dev/.m2/settings.yaml
  active_profiles:
    - nexus
    - ci
  export_build_props: false
""")

        config = Config(config_file=config_file, env_prefix=None)
        config.load()

        assert config.get("maven.user_settings_file") == "/home/dev/.m2/settings.yaml"
        assert config.get("maven.active_profiles") == ["nexus", "ci"]
        assert config.get("maven.export_build_props") is False

    def test_load_from_nonexistent_required_file(self, tmp_path: Path) -> None:
        """Test loading a missing required file raises ConfigError."""
        config = Config(config_file=tmp_path / "nonexistent.yaml")

        with pytest.raises(ConfigError, match="Configuration file not found"):
            config.load()

    def test_load_from_nonexistent_optional_file(self, tmp_path: Path) -> None:
        """Test loading a missing optional file yields empty options."""
        config = Config(config_file=tmp_path / "nonexistent.yaml", env_prefix=None, required=False)
        config.load()

        assert config.get("maven", default="fallback") == "fallback"

    def test_load_invalid_yaml(self, tmp_path: Path) -> None:
        """Test loading invalid YAML raises ConfigError."""
        config_file = tmp_path / "mvnsettings.yaml"
        config_file.write_text("invalid: yaml: content:\n  - bad\n  indentation")

        config = Config(config_file=config_file)

        with pytest.raises(ConfigError, match="Failed to parse"):
            config.load()

    def test_load_non_mapping_root(self, tmp_path: Path) -> None:
        """Test a YAML list at the root is rejected."""
        config_file = tmp_path / "mvnsettings.yaml"
        config_file.write_text("- one\n- two\n")

        config = Config(config_file=config_file)

        with pytest.raises(ConfigError, match="must contain a mapping"):
            config.load()

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        """Test loading empty YAML file results in empty options."""
        config_file = tmp_path / "mvnsettings.yaml"
        config_file.write_text("")

        config = Config(config_file=config_file)
        config.load()

        assert config.get("anything", default="default") == "default"

    def test_load_can_be_called_multiple_times(self, tmp_path: Path) -> None:
        """Test that load() can be called multiple times (reloads options)."""
        config_file = tmp_path / "mvnsettings.yaml"
        config_file.write_text("maven:\n  export_build_props: true\n")

        config = Config(config_file=config_file, env_prefix=None)
        config.load()
        assert config.get("maven.export_build_props") is True

        config_file.write_text("maven:\n  export_build_props: false\n")
        config.load()
        assert config.get("maven.export_build_props") is False


class TestConfigGet:
    """Tests for retrieving option values."""

    @pytest.fixture
    def loaded_config(self, tmp_path: Path) -> Config:
        """Provide loaded options for testing."""
        config_file = tmp_path / "mvnsettings.yaml"
        config_file.write_text("""
maven:
  security_file: /secure/settings-security.yaml
  export_build_props: true
  retries: 3
""")
        config = Config(config_file=config_file, env_prefix=None)
        config.load()
        return config

    def test_get_nested_value(self, loaded_config: Config) -> None:
        """Test getting a nested option value."""
        assert loaded_config.get("maven.security_file") == "/secure/settings-security.yaml"

    def test_get_nonexistent_value_returns_none(self, loaded_config: Config) -> None:
        """Test getting non-existent value returns None by default."""
        assert loaded_config.get("maven.nothing") is None

    def test_get_with_default_value(self, loaded_config: Config) -> None:
        """Test getting non-existent value with default."""
        assert loaded_config.get("nonexistent.key", default=42) == 42

    def test_get_through_scalar_returns_default(self, loaded_config: Config) -> None:
        """Test descending into a scalar value returns the default."""
        assert loaded_config.get("maven.retries.count", default="x") == "x"

    def test_get_before_load_raises_error(self, tmp_path: Path) -> None:
        """Test that get() before load() raises ConfigError."""
        config = Config(config_file=tmp_path / "mvnsettings.yaml")

        with pytest.raises(ConfigError, match="Configuration not loaded"):
            config.get("maven")

    def test_get_with_empty_key_raises_error(self, loaded_config: Config) -> None:
        """Test that get() with empty key raises ValueError."""
        with pytest.raises(ValueError, match="Key cannot be empty"):
            loaded_config.get("")


class TestEnvironmentVariableOverrides:
    """Tests for environment variable overrides."""

    def test_env_override_simple_value(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test environment variable overrides a string option."""
        config_file = tmp_path / "mvnsettings.yaml"
        config_file.write_text("maven:\n  security_file: /a.yaml\n")

        monkeypatch.setenv("MVNSETTINGS_MAVEN__SECURITY_FILE", "/b.yaml")

        config = Config(config_file=config_file)
        config.load()

        assert config.get("maven.security_file") == "/b.yaml"

    def test_env_override_converts_types(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test environment overrides are converted to the existing value's type."""
        config_file = tmp_path / "mvnsettings.yaml"
        config_file.write_text("""
maven:
  export_build_props: true
  retries: 3
  ratio: 0.5
  active_profiles: [nexus]
""")

        monkeypatch.setenv("MVNSETTINGS_MAVEN__EXPORT_BUILD_PROPS", "false")
        monkeypatch.setenv("MVNSETTINGS_MAVEN__RETRIES", "5")
        monkeypatch.setenv("MVNSETTINGS_MAVEN__RATIO", "0.75")
        monkeypatch.setenv("MVNSETTINGS_MAVEN__ACTIVE_PROFILES", "nexus, ci")

        config = Config(config_file=config_file)
        config.load()

        assert config.get("maven.export_build_props") is False
        assert config.get("maven.retries") == 5
        assert config.get("maven.ratio") == 0.75
        assert config.get("maven.active_profiles") == ["nexus", "ci"]

    def test_env_override_keeps_unconvertible_string(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a value that cannot be converted is kept as a string."""
        config_file = tmp_path / "mvnsettings.yaml"
        config_file.write_text("maven:\n  retries: 3\n")

        monkeypatch.setenv("MVNSETTINGS_MAVEN__RETRIES", "many")

        config = Config(config_file=config_file)
        config.load()

        assert config.get("maven.retries") == "many"

    def test_env_override_without_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test environment variables apply even when the optional file is missing."""
        monkeypatch.setenv("MVNSETTINGS_MAVEN__SECURITY_FILE", "/secure.yaml")

        config = Config(config_file=tmp_path / "missing.yaml", required=False)
        config.load()

        assert config.get("maven.security_file") == "/secure.yaml"

    def test_no_env_prefix_disables_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that env_prefix=None disables environment overrides."""
        config_file = tmp_path / "mvnsettings.yaml"
        config_file.write_text("maven:\n  security_file: /a.yaml\n")

        monkeypatch.setenv("MVNSETTINGS_MAVEN__SECURITY_FILE", "/b.yaml")

        config = Config(config_file=config_file, env_prefix=None)
        config.load()

        assert config.get("maven.security_file") == "/a.yaml"

    def test_env_override_does_not_replace_scalar_with_section(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test an override nested under a scalar value is ignored."""
        config_file = tmp_path / "mvnsettings.yaml"
        config_file.write_text("maven: plain\n")

        monkeypatch.setenv("MVNSETTINGS_MAVEN__SECURITY_FILE", "/b.yaml")

        config = Config(config_file=config_file)
        config.load()

        assert config.get("maven") == "plain"
