# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Typed model of an effective settings document.

The model mirrors the sections of a Maven ``settings.xml`` file:
- Servers (credentials keyed by repository id)
- Mirrors (repository substitution rules)
- Profiles (properties and repositories, optionally conditionally activated)
- Explicitly active profile ids

Activation conditions form a closed set of predicate types:
:class:`JdkVersion`, :class:`OperatingSystem`, :class:`Property` and
:class:`FileExists`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

# Server configuration


@dataclass(frozen=True)
class HttpHeader:
    """A single HTTP header declared in a server configuration block."""

    name: str | None
    value: str | None


@dataclass
class ServerConfiguration:
    """
    Typed view of a server's free-form ``configuration`` block.

    Only HTTP headers are understood. A configuration block that declares no
    headers still counts as present.

    Attributes:
        http_headers: Headers in declaration order
    """

    http_headers: list[HttpHeader] = field(default_factory=list)


@dataclass
class Server:
    """
    Credentials for the repository (or mirror) with the same id.

    Attributes:
        id: Repository id this server applies to
        username: Login user name
        password: Login password, possibly encrypted (``{...}``) or an
                  ``${env.NAME}`` placeholder
        passphrase: Private key passphrase, same formats as password
        private_key: Path to a private key file
        configuration: Optional header configuration block
    """

    id: str
    username: str | None = None
    password: str | None = None
    passphrase: str | None = None
    private_key: str | None = None
    configuration: ServerConfiguration | None = None


@dataclass
class Mirror:
    """
    Repository substitution rule.

    Attributes:
        id: Id of the repository created for the mirror
        url: Mirror URL
        mirror_of: Comma-separated list of patterns (``*``, ``external:*``,
                   ``central``, ``!name``, ``name``)
        name: Optional display name
    """

    id: str
    url: str
    mirror_of: str
    name: str | None = None


# Activation predicates


@dataclass(frozen=True)
class JdkVersion:
    """Active when the JDK version matches a prefix, ``!prefix`` or range list."""

    range: str


@dataclass(frozen=True)
class OperatingSystem:
    """Active when every given attribute matches the running platform."""

    name: str | None = None
    family: str | None = None
    arch: str | None = None
    version: str | None = None


@dataclass(frozen=True)
class Property:
    """Active when a property is defined (and optionally has a given value)."""

    name: str
    value: str | None = None


@dataclass(frozen=True)
class FileExists:
    """Active when a file exists, or is missing when ``negate`` is set."""

    path: str
    negate: bool = False


ActivationPredicate = Union[JdkVersion, OperatingSystem, Property, FileExists]


@dataclass
class Activation:
    """
    Activation condition of a profile.

    All predicates must hold for the profile to be active, and
    ``activeByDefault: true`` switches it on by itself. A block with a
    malformed predicate, or with no predicate at all, holds only through
    ``activeByDefault``.

    Attributes:
        predicates: Predicates that must all hold
        active_by_default: Value of ``activeByDefault``, None when not declared
        malformed: True when a declared predicate could not be read
    """

    predicates: list[ActivationPredicate] = field(default_factory=list)
    active_by_default: bool | None = None
    malformed: bool = False

    def is_empty(self) -> bool:
        """Return True if the block declares nothing at all."""
        return not self.predicates and self.active_by_default is None and not self.malformed


# Profiles


@dataclass
class Repository:
    """
    Repository declared inside a profile.

    ``releases_enabled`` and ``snapshots_enabled`` are None when the
    corresponding policy was not declared (which means enabled).
    """

    id: str
    url: str
    name: str | None = None
    layout: str = "default"
    releases_enabled: bool | None = None
    snapshots_enabled: bool | None = None


@dataclass
class Profile:
    """
    Named bundle of properties and repositories.

    Attributes:
        id: Profile id
        properties: Properties in declaration order
        repositories: Artifact repositories
        plugin_repositories: Plugin repositories
        activation: Activation condition, None when not declared
    """

    id: str
    properties: dict[str, str] = field(default_factory=dict)
    repositories: list[Repository] = field(default_factory=list)
    plugin_repositories: list[Repository] = field(default_factory=list)
    activation: Activation | None = None

    def has_activation_condition(self) -> bool:
        """Return True if the profile declares an activation block with any content."""
        return self.activation is not None and not self.activation.is_empty()


# Settings


@dataclass
class Settings:
    """
    Effective settings merged from the global and user documents.

    Created by the settings loader, decrypted in place once, and read-only
    afterwards.
    """

    local_repository: str | None = None
    interactive_mode: bool = True
    offline: bool = False
    plugin_groups: list[str] = field(default_factory=list)
    servers: list[Server] = field(default_factory=list)
    mirrors: list[Mirror] = field(default_factory=list)
    profiles: list[Profile] = field(default_factory=list)
    active_profiles: list[str] = field(default_factory=list)

    def get_server(self, server_id: str) -> Server | None:
        """Return the server with the given id, or None."""
        for server in self.servers:
            if server.id == server_id:
                return server
        return None

    def get_mirror(self, mirror_id: str) -> Mirror | None:
        """Return the mirror with the given id, or None."""
        for mirror in self.mirrors:
            if mirror.id == mirror_id:
                return mirror
        return None

    def get_profile(self, profile_id: str) -> Profile | None:
        """Return the profile with the given id, or None."""
        for profile in self.profiles:
            if profile.id == profile_id:
                return profile
        return None
