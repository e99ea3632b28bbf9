# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Mirror matching and repository substitution.

A mirror's ``mirrorOf`` is a comma-separated list of tokens read left to
right:
- ``*`` matches any repository
- ``external:*`` matches repositories that are neither file based nor on
  this machine
- ``central`` matches the default central repository URL
- ``!name`` rejects the repository called ``name`` immediately
- ``name`` accepts the repository called ``name`` immediately
- anything else is ignored

Resolution is computed on a snapshot of the repositories and returned as a
:class:`MirrorResolution`, which is then applied to the container in one go.

Example:
    >>> resolver = MirrorResolver()
    >>> resolution = resolver.resolve(settings.mirrors, container)
    >>> resolution.apply(container)
"""

from __future__ import annotations

import ipaddress
import logging
import socket
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from mvnsettings.repositories.model import (
    MAVEN_CENTRAL_URL,
    MAVEN_LOCAL_REPO_NAME,
    ArtifactRepository,
    MavenArtifactRepository,
    RepositoryContainer,
)
from mvnsettings.settings.model import Mirror

logger = logging.getLogger(__name__)

WILDCARD = "*"
EXTERNAL_WILDCARD = "external:*"
CENTRAL = "central"


def _local_interface_addresses() -> set[str]:
    addresses = {"127.0.0.1", "::1"}
    try:
        for info in socket.getaddrinfo(socket.gethostname(), None):
            addresses.add(str(info[4][0]))
    except OSError:
        pass
    return addresses


def is_local_host(host: str) -> bool:
    """
    Check whether a host name refers to this machine.

    Loopback names and addresses, and addresses of local interfaces, are
    local. Host names that cannot be resolved are not.
    """
    host = host.strip("[]").lower()
    if not host or host == "localhost" or host.endswith(".localhost"):
        return True

    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        try:
            address = ipaddress.ip_address(socket.gethostbyname(host))
        except OSError:
            logger.debug(f"Unable to resolve host {host}, treating it as external")
            return False

    if address.is_loopback or address.is_unspecified:
        return True
    return str(address) in _local_interface_addresses()


@dataclass
class MirrorResolution:
    """
    Outcome of mirror resolution.

    Attributes:
        repositories: Repositories after substitution, in order
        added: Mirror repositories created
        removed: Source repositories replaced by a mirror
        replacements: Source repository name to winning mirror id
    """

    repositories: list[ArtifactRepository] = field(default_factory=list)
    added: list[ArtifactRepository] = field(default_factory=list)
    removed: list[ArtifactRepository] = field(default_factory=list)
    replacements: dict[str, str] = field(default_factory=dict)

    def apply(self, container: RepositoryContainer) -> None:
        """Apply the removals and additions to a container."""
        for repository in self.removed:
            container.remove(repository)
        for repository in self.added:
            container.add(repository)


class MirrorResolver:
    """
    Matches repositories against mirrors and computes substitutions.

    Attributes:
        is_local_host: Predicate deciding whether a host is this machine
    """

    def __init__(self, is_local_host: Callable[[str], bool] = is_local_host) -> None:
        self.is_local_host = is_local_host

    def matches(self, mirror: Mirror, repository: ArtifactRepository) -> bool:
        """
        Check whether a mirror's ``mirrorOf`` matches a repository.

        Wildcard tokens only set a tentative match; ``!name`` and ``name``
        decide immediately.
        """
        matched = False
        for token in mirror.mirror_of.split(","):
            token = token.strip()
            if not token:
                continue
            if token == WILDCARD:
                matched = True
            elif token == EXTERNAL_WILDCARD:
                matched = matched or self._is_external(repository)
            elif token == CENTRAL:
                matched = matched or _is_central(repository)
            elif token.startswith("!"):
                if token[1:] == repository.name:
                    return False
            elif token == repository.name:
                return True
        return matched

    def find_mirror(self, repository: ArtifactRepository, mirrors: Sequence[Mirror]) -> Mirror | None:
        """Return the first mirror matching the repository, or None."""
        for mirror in mirrors:
            if self.matches(mirror, repository):
                return mirror
        return None

    def resolve(
        self,
        mirrors: Sequence[Mirror],
        repositories: Iterable[ArtifactRepository],
    ) -> MirrorResolution:
        """
        Compute the repositories after mirror substitution.

        The input is not modified.

        Args:
            mirrors: Mirrors in declaration order
            repositories: Current repositories

        Returns:
            The substitution outcome
        """
        snapshot = list(repositories)
        names = {repository.name for repository in snapshot}
        resolution = MirrorResolution()

        for repository in snapshot:
            if repository.name == MAVEN_LOCAL_REPO_NAME:
                continue

            mirror = self.find_mirror(repository, mirrors)
            if mirror is None or mirror.id == repository.name:
                continue

            if mirror.id not in names:
                resolution.added.append(MavenArtifactRepository(name=mirror.id, url=mirror.url))
                names.add(mirror.id)
                logger.info(f"Replaced '{repository.name}' with mirror {mirror.id} at {mirror.url}")
            else:
                logger.info(f"Replaced '{repository.name}' with mirror {mirror.id} (already created)")

            resolution.removed.append(repository)
            resolution.replacements[repository.name] = mirror.id

        removed = {id(repository) for repository in resolution.removed}
        resolution.repositories = [
            repository for repository in snapshot if id(repository) not in removed
        ] + resolution.added
        return resolution

    def _is_external(self, repository: ArtifactRepository) -> bool:
        if not isinstance(repository, MavenArtifactRepository):
            return False
        if repository.scheme == "file":
            return False
        return not self.is_local_host(repository.host)


def _is_central(repository: ArtifactRepository) -> bool:
    if not isinstance(repository, MavenArtifactRepository):
        return False
    return repository.url.rstrip("/") == MAVEN_CENTRAL_URL.rstrip("/")
