# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Exception hierarchy shared by all resolution stages.

Fatal problems are raised as one of these exceptions and always keep the
originating exception as ``__cause__``. Non-fatal problems are never raised;
they are collected as :class:`SettingsWarning` values instead.
"""

from __future__ import annotations

from dataclasses import dataclass


class MavenSettingsError(Exception):
    """Base exception for settings resolution errors."""

    pass


class SettingsParseError(MavenSettingsError):
    """
    Raised when a settings document cannot be read or parsed.

    Raised when:
    - The file exists but cannot be opened
    - The YAML is malformed
    - The document root or a section has the wrong type
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class MissingMasterPasswordError(MavenSettingsError):
    """Raised when an encrypted secret is found but no master password is available."""

    pass


class DecryptionError(MavenSettingsError):
    """Raised when decryption fails."""

    pass


class SettingsResolutionError(MavenSettingsError):
    """
    Raised by the resolution pipeline when any stage fails fatally.

    The failing stage's exception is available as ``__cause__``.
    """

    pass


@dataclass(frozen=True)
class SettingsWarning:
    """
    A non-fatal problem found while resolving settings.

    Attributes:
        message: Human-readable description of the problem
        source: Document or component the problem came from, if known
    """

    message: str
    source: str | None = None

    def __str__(self) -> str:
        if self.source:
            return f"{self.source}: {self.message}"
        return self.message
