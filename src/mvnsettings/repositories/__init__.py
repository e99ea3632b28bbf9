# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Build-side repositories, mirror substitution and credential injection.
"""

from __future__ import annotations

from mvnsettings.repositories.credentials import HEADER_AUTHENTICATION, CredentialInjector
from mvnsettings.repositories.mirrors import MirrorResolution, MirrorResolver, is_local_host
from mvnsettings.repositories.model import (
    MAVEN_CENTRAL_REPO_NAME,
    MAVEN_CENTRAL_URL,
    MAVEN_LOCAL_REPO_NAME,
    ArtifactRepository,
    Credentials,
    FlatDirectoryRepository,
    HttpHeaderCredentials,
    MavenArtifactRepository,
    PasswordCredentials,
    RepositoryContainer,
)

__all__ = [
    # Model
    "ArtifactRepository",
    "MavenArtifactRepository",
    "FlatDirectoryRepository",
    "RepositoryContainer",
    "Credentials",
    "PasswordCredentials",
    "HttpHeaderCredentials",
    "MAVEN_LOCAL_REPO_NAME",
    "MAVEN_CENTRAL_REPO_NAME",
    "MAVEN_CENTRAL_URL",
    # Mirrors
    "MirrorResolver",
    "MirrorResolution",
    "is_local_host",
    # Credentials
    "CredentialInjector",
    "HEADER_AUTHENTICATION",
]
