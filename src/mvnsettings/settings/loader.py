# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Loading and merging of layered settings documents.

Two YAML documents are combined into one effective :class:`Settings`:
- The global document (installation wide, e.g. ``$M2_HOME/conf/settings.yaml``)
- The user document (e.g. ``~/.m2/settings.yaml``)

Merge rules:
- Scalar fields come from whichever document defines them, the user
  document winning on conflict
- Servers, mirrors and profiles are unioned by id, user entries first; a user
  entry masks the global entry with the same id
- Plugin groups and active profile ids are unioned without duplicates

Example:
    >>> loader = SettingsLoader()
    >>> settings, warnings = loader.load(global_file, user_file)
    >>> for warning in warnings:
    ...     print(warning)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, TypeVar

import yaml

from mvnsettings.errors import SettingsParseError, SettingsWarning
from mvnsettings.settings.model import (
    Activation,
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

logger = logging.getLogger(__name__)

SCALAR_KEYS = ("localRepository", "interactiveMode", "offline")
COLLECTION_KEYS = ("servers", "mirrors", "profiles", "pluginGroups", "activeProfiles")
IGNORED_KEYS = ("proxies", "usePluginRegistry")

ACTIVATION_KEYS = ("activeByDefault", "jdk", "os", "property", "file")

_NULLS = ("", "~", "null", "Null", "NULL")
_TRUE = ("true", "yes", "on")
_FALSE = ("false", "no", "off")

_T = TypeVar("_T", Server, Mirror, Profile)


class SettingsLoader:
    """
    Reads the global and user settings documents and merges them.

    Missing documents are not an error: an absent file simply contributes
    nothing to the effective settings.
    """

    def load(
        self,
        global_settings_file: str | Path | None,
        user_settings_file: str | Path | None,
    ) -> tuple[Settings, list[SettingsWarning]]:
        """
        Load and merge the global and user settings documents.

        Args:
            global_settings_file: Path to the global document, or None
            user_settings_file: Path to the user document, or None

        Returns:
            Tuple of effective settings and the non-fatal warnings collected

        Raises:
            SettingsParseError: If a present document cannot be read or parsed
        """
        warnings: list[SettingsWarning] = []

        global_data = self._read_document(global_settings_file, "global")
        user_data = self._read_document(user_settings_file, "user")

        global_source = str(global_settings_file) if global_settings_file else "global"
        user_source = str(user_settings_file) if user_settings_file else "user"

        global_settings = self._build(global_data, global_source, warnings)
        user_settings = self._build(user_data, user_source, warnings)

        settings = merge_settings(user_settings, global_settings)

        # Scalars are merged on the raw documents so an undefined user value
        # never hides a defined global one.
        for key in SCALAR_KEYS:
            if key in user_data:
                value = user_data[key]
            elif key in global_data:
                value = global_data[key]
            else:
                continue
            self._set_scalar(settings, key, value, user_source if key in user_data else global_source, warnings)

        for warning in warnings:
            logger.warning(f"Settings problem: {warning}")

        return settings, warnings

    def _read_document(self, path: str | Path | None, kind: str) -> dict[str, Any]:
        """Read one YAML document, returning an empty mapping if it is absent."""
        if path is None:
            logger.info(f"No {kind} settings file configured")
            return {}

        path = Path(path)
        if not path.exists():
            logger.info(f"No {kind} settings file found at {path}")
            return {}
        if path.is_dir():
            raise SettingsParseError(f"Settings path {path} is a directory", source=str(path))

        try:
            with open(path, encoding="utf-8") as file:
                content = file.read()
        except OSError as err:
            raise SettingsParseError(
                f"Failed to open settings file {path}: {err}", source=str(path)
            ) from err

        try:
            data = yaml.load(content, Loader=yaml.BaseLoader)
        except yaml.YAMLError as err:
            raise SettingsParseError(
                f"Failed to parse settings file {path}: {err}", source=str(path)
            ) from err

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SettingsParseError(
                f"Settings file {path} must contain a mapping, got {type(data).__name__}",
                source=str(path),
            )

        logger.info(f"Using {kind} settings file: {path.absolute()}")
        return data

    def _build(
        self,
        data: dict[str, Any],
        source: str,
        warnings: list[SettingsWarning],
    ) -> Settings:
        """Build the collection sections of a single document."""
        for key in data:
            if key not in SCALAR_KEYS and key not in COLLECTION_KEYS and key not in IGNORED_KEYS:
                warnings.append(SettingsWarning(f"Unknown settings key '{key}' ignored", source))

        settings = Settings()
        settings.servers = self._build_entries(data, "servers", source, warnings, self._build_server)
        settings.mirrors = self._build_entries(data, "mirrors", source, warnings, self._build_mirror)
        settings.profiles = self._build_entries(data, "profiles", source, warnings, self._build_profile)
        settings.plugin_groups = _unique(
            _text(item) for item in _section_list(data, "pluginGroups", source) if _text(item)
        )
        settings.active_profiles = _unique(
            _text(item) for item in _section_list(data, "activeProfiles", source) if _text(item)
        )
        return settings

    def _build_entries(self, data, key, source, warnings, builder):
        entries = []
        seen: set[str] = set()
        for index, raw in enumerate(_section_list(data, key, source)):
            where = f"{key}[{index}]"
            if not isinstance(raw, dict):
                warnings.append(SettingsWarning(f"{where} is not a mapping and was skipped", source))
                continue
            if not _text(raw.get("id")):
                warnings.append(SettingsWarning(f"{where} has no id and was skipped", source))
                continue

            entry = builder(raw, where, source, warnings)
            if entry is None:
                continue
            if entry.id in seen:
                warnings.append(
                    SettingsWarning(f"Duplicate id '{entry.id}' in {key}, first occurrence kept", source)
                )
                continue
            seen.add(entry.id)
            entries.append(entry)
        return entries

    def _build_server(
        self, raw: dict[str, Any], where: str, source: str, warnings: list[SettingsWarning]
    ) -> Server:
        configuration = None
        if "configuration" in raw:
            configuration = self._build_server_configuration(raw["configuration"], where, source, warnings)

        return Server(
            id=_text(raw["id"]),
            username=_text(raw.get("username")),
            password=_text(raw.get("password")),
            passphrase=_text(raw.get("passphrase")),
            private_key=_text(raw.get("privateKey")),
            configuration=configuration,
        )

    def _build_server_configuration(
        self, raw: Any, where: str, source: str, warnings: list[SettingsWarning]
    ) -> ServerConfiguration:
        configuration = ServerConfiguration()
        if _is_null(raw):
            return configuration
        if not isinstance(raw, dict):
            warnings.append(SettingsWarning(f"{where}.configuration is not a mapping", source))
            return configuration

        headers = raw.get("httpHeaders")
        if _is_null(headers):
            return configuration
        if not isinstance(headers, list):
            warnings.append(SettingsWarning(f"{where}.configuration.httpHeaders is not a list", source))
            return configuration

        for index, header in enumerate(headers):
            if not isinstance(header, dict):
                warnings.append(
                    SettingsWarning(f"{where}.configuration.httpHeaders[{index}] is not a mapping", source)
                )
                continue
            configuration.http_headers.append(
                HttpHeader(name=_text(header.get("name")), value=_text(header.get("value")))
            )
        return configuration

    def _build_mirror(
        self, raw: dict[str, Any], where: str, source: str, warnings: list[SettingsWarning]
    ) -> Mirror | None:
        url = _text(raw.get("url"))
        mirror_of = _text(raw.get("mirrorOf"))
        if not url or not mirror_of:
            warnings.append(SettingsWarning(f"{where} requires both 'url' and 'mirrorOf' and was skipped", source))
            return None
        return Mirror(id=_text(raw["id"]), url=url, mirror_of=mirror_of, name=_text(raw.get("name")))

    def _build_profile(
        self, raw: dict[str, Any], where: str, source: str, warnings: list[SettingsWarning]
    ) -> Profile:
        profile = Profile(id=_text(raw["id"]))

        properties = raw.get("properties")
        if isinstance(properties, dict):
            profile.properties = {
                str(key): (_text(value) or "") for key, value in properties.items()
            }
        elif not _is_null(properties):
            warnings.append(SettingsWarning(f"{where}.properties is not a mapping and was ignored", source))

        profile.repositories = self._build_repositories(raw, "repositories", where, source, warnings)
        profile.plugin_repositories = self._build_repositories(raw, "pluginRepositories", where, source, warnings)

        if "activation" in raw and not _is_null(raw["activation"]):
            profile.activation = self._build_activation(raw["activation"], where, source, warnings)
        return profile

    def _build_repositories(
        self, raw: dict[str, Any], key: str, where: str, source: str, warnings: list[SettingsWarning]
    ) -> list[Repository]:
        entries = raw.get(key)
        if _is_null(entries):
            return []
        if not isinstance(entries, list):
            warnings.append(SettingsWarning(f"{where}.{key} is not a list and was ignored", source))
            return []

        repositories = []
        for index, entry in enumerate(entries):
            entry_where = f"{where}.{key}[{index}]"
            if not isinstance(entry, dict) or not _text(entry.get("id")) or not _text(entry.get("url")):
                warnings.append(SettingsWarning(f"{entry_where} requires 'id' and 'url' and was skipped", source))
                continue
            repositories.append(
                Repository(
                    id=_text(entry["id"]),
                    url=_text(entry["url"]),
                    name=_text(entry.get("name")),
                    layout=_text(entry.get("layout")) or "default",
                    releases_enabled=_policy_enabled(entry.get("releases")),
                    snapshots_enabled=_policy_enabled(entry.get("snapshots")),
                )
            )
        return repositories

    def _build_activation(
        self, raw: Any, where: str, source: str, warnings: list[SettingsWarning]
    ) -> Activation:
        if not isinstance(raw, dict):
            warnings.append(SettingsWarning(f"{where}.activation is not a mapping and was ignored", source))
            return Activation(malformed=True)

        activation = Activation()
        for key in raw:
            if key not in ACTIVATION_KEYS:
                warnings.append(SettingsWarning(f"Unknown activation key '{key}' in {where} ignored", source))
                activation.malformed = True

        if "activeByDefault" in raw:
            active_by_default = _to_bool(raw["activeByDefault"])
            if active_by_default is None:
                warnings.append(
                    SettingsWarning(f"{where}.activation.activeByDefault must be a boolean", source)
                )
                active_by_default = False
            activation.active_by_default = active_by_default

        jdk = _text(raw.get("jdk"))
        if jdk:
            activation.predicates.append(JdkVersion(range=jdk))
        elif "jdk" in raw:
            warnings.append(SettingsWarning(f"{where}.activation.jdk is empty", source))
            activation.malformed = True

        os_block = raw.get("os")
        os_predicate = None
        if isinstance(os_block, dict):
            os_predicate = OperatingSystem(
                name=_text(os_block.get("name")),
                family=_text(os_block.get("family")),
                arch=_text(os_block.get("arch")),
                version=_text(os_block.get("version")),
            )
            if not any((os_predicate.name, os_predicate.family, os_predicate.arch, os_predicate.version)):
                os_predicate = None
        if os_predicate is not None:
            activation.predicates.append(os_predicate)
        elif "os" in raw:
            warnings.append(
                SettingsWarning(f"{where}.activation.os requires 'name', 'family', 'arch' or 'version'", source)
            )
            activation.malformed = True

        property_block = raw.get("property")
        if isinstance(property_block, dict) and _text(property_block.get("name")):
            activation.predicates.append(
                Property(name=_text(property_block["name"]), value=_text(property_block.get("value")))
            )
        elif "property" in raw:
            warnings.append(SettingsWarning(f"{where}.activation.property requires a 'name'", source))
            activation.malformed = True

        file_block = raw.get("file")
        if isinstance(file_block, dict) and _text(file_block.get("exists")):
            activation.predicates.append(FileExists(path=_text(file_block["exists"])))
        elif isinstance(file_block, dict) and _text(file_block.get("missing")):
            activation.predicates.append(FileExists(path=_text(file_block["missing"]), negate=True))
        elif "file" in raw:
            warnings.append(
                SettingsWarning(f"{where}.activation.file requires 'exists' or 'missing'", source)
            )
            activation.malformed = True

        return activation

    @staticmethod
    def _set_scalar(
        settings: Settings, key: str, value: Any, source: str, warnings: list[SettingsWarning]
    ) -> None:
        if key == "localRepository":
            settings.local_repository = _text(value)
            return

        flag = _to_bool(value)
        if flag is None:
            warnings.append(SettingsWarning(f"'{key}' must be a boolean, got {value!r}", source))
            return
        if key == "interactiveMode":
            settings.interactive_mode = flag
        else:
            settings.offline = flag


def merge_settings(dominant: Settings, recessive: Settings) -> Settings:
    """
    Merge two settings values, ``dominant`` winning on id conflicts.

    Scalar fields are taken from ``dominant``. Neither input is mutated.

    Args:
        dominant: Settings with precedence (the user document)
        recessive: Settings filling the gaps (the global document)

    Returns:
        A new merged Settings
    """
    return Settings(
        local_repository=dominant.local_repository,
        interactive_mode=dominant.interactive_mode,
        offline=dominant.offline,
        plugin_groups=_unique(dominant.plugin_groups + recessive.plugin_groups),
        servers=_merge_by_id(dominant.servers, recessive.servers),
        mirrors=_merge_by_id(dominant.mirrors, recessive.mirrors),
        profiles=_merge_by_id(dominant.profiles, recessive.profiles),
        active_profiles=_unique(dominant.active_profiles + recessive.active_profiles),
    )


def _merge_by_id(dominant: list[_T], recessive: list[_T]) -> list[_T]:
    ids = {entry.id for entry in dominant}
    return list(dominant) + [entry for entry in recessive if entry.id not in ids]


def _section_list(data: dict[str, Any], key: str, source: str) -> list[Any]:
    value = data.get(key)
    if _is_null(value):
        return []
    if not isinstance(value, list):
        raise SettingsParseError(
            f"Section '{key}' in {source} must be a list, got {type(value).__name__}",
            source=source,
        )
    return value


def _unique(values) -> list[str]:
    result: list[str] = []
    for value in values:
        if value not in result:
            result.append(value)
    return result


def _is_null(value: Any) -> bool:
    """Documents are read without type resolution, so YAML nulls arrive as text."""
    return value is None or (isinstance(value, str) and value in _NULLS)


def _text(value: Any) -> str | None:
    """Return a scalar exactly as written, or None for a YAML null."""
    if _is_null(value):
        return None
    return value if isinstance(value, str) else str(value)


def _to_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
    return None


def _policy_enabled(policy: Any) -> bool | None:
    """Read ``{enabled: ...}`` from a releases/snapshots policy block."""
    if not isinstance(policy, dict) or "enabled" not in policy:
        return None
    enabled = _to_bool(policy["enabled"])
    return True if enabled is None else enabled
