# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Attaching server credentials to repositories.

A repository receives the credentials of the server whose id equals the
repository name:
- username and password become basic credentials
- otherwise the last HTTP header of the server configuration becomes header
  credentials, provided both its name and value are non-blank

The ``header`` authentication scheme is added whenever the server has a
configuration block, even if no usable header was found.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from mvnsettings.repositories.model import (
    ArtifactRepository,
    HttpHeaderCredentials,
    MavenArtifactRepository,
    PasswordCredentials,
)
from mvnsettings.settings.model import Server, Settings

logger = logging.getLogger(__name__)

HEADER_AUTHENTICATION = "header"


class CredentialInjector:
    """Attaches credentials from settings servers to matching repositories."""

    def inject(self, settings: Settings, repositories: Iterable[ArtifactRepository] | None) -> None:
        """
        Attach credentials to every repository with a matching server.

        Args:
            settings: Decrypted settings
            repositories: Repositories to update in place (None is ignored)
        """
        if repositories is None:
            return

        for repository in repositories:
            if not isinstance(repository, MavenArtifactRepository):
                continue
            for server in settings.servers:
                if server.id == repository.name:
                    self.add_credentials(server, repository)

    def add_credentials(self, server: Server, repository: MavenArtifactRepository) -> None:
        """Attach one server's credentials to one repository."""
        if server.username is not None and server.password is not None:
            repository.credentials = PasswordCredentials(username=server.username, password=server.password)
            logger.info(f"Added credentials '{server.username}' on repository {repository.name}")
            return

        if server.configuration is None:
            return

        header_name: str | None = None
        header_value: str | None = None
        for header in server.configuration.http_headers:
            header_name = header.name
            header_value = header.value

        if header_name and header_name.strip() and header_value and header_value.strip():
            repository.credentials = HttpHeaderCredentials(name=header_name, value=header_value)
            logger.info(f"Added credentials '{header_name}' in headers on repository {repository.name}")

        if HEADER_AUTHENTICATION not in repository.authentication:
            repository.authentication.append(HEADER_AUTHENTICATION)
