# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Build-side repository records.

These types stand for the repositories owned by the build tool. The
resolution stages only read them, add or remove them from a
:class:`RepositoryContainer`, and attach credentials to them.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union
from urllib.parse import urlparse

MAVEN_LOCAL_REPO_NAME = "MavenLocal"
MAVEN_CENTRAL_REPO_NAME = "MavenRepo"
MAVEN_CENTRAL_URL = "https://repo.maven.apache.org/maven2/"


@dataclass
class PasswordCredentials:
    """Basic authentication credentials."""

    username: str
    password: str


@dataclass
class HttpHeaderCredentials:
    """Credentials sent as a single HTTP header."""

    name: str
    value: str


Credentials = Union[PasswordCredentials, HttpHeaderCredentials]


@dataclass
class ArtifactRepository:
    """Base type for build-side repositories."""

    name: str


@dataclass
class MavenArtifactRepository(ArtifactRepository):
    """
    Remote (or file based) Maven repository.

    Attributes:
        name: Repository name, matched against server and mirror ids
        url: Repository URL
        credentials: Attached credentials, if any
        authentication: Authentication schemes (e.g. ``header``)
        releases_only: Only resolve release versions
        snapshots_only: Only resolve snapshot versions
    """

    url: str = ""
    credentials: Credentials | None = None
    authentication: list[str] = field(default_factory=list)
    releases_only: bool = False
    snapshots_only: bool = False

    @property
    def scheme(self) -> str:
        """URL scheme, lower case."""
        return urlparse(self.url).scheme.lower()

    @property
    def host(self) -> str:
        """URL host name, empty for file URLs."""
        return urlparse(self.url).hostname or ""


@dataclass
class FlatDirectoryRepository(ArtifactRepository):
    """Flat directory repository; never carries credentials."""

    dirs: list[str] = field(default_factory=list)


class RepositoryContainer:
    """
    Ordered collection of repositories, addressable by name.

    Example:
        >>> repositories = RepositoryContainer()
        >>> repositories.maven_local()
        >>> repositories.maven("internal", "https://repo.example.com/maven2")
        >>> repositories.names
        ['MavenLocal', 'internal']
    """

    def __init__(self, repositories: Iterable[ArtifactRepository] | None = None) -> None:
        self._repositories: list[ArtifactRepository] = []
        for repository in repositories or ():
            self.add(repository)

    def add(self, repository: ArtifactRepository) -> ArtifactRepository:
        """
        Append a repository.

        Raises:
            ValueError: If a repository with the same name already exists
        """
        if repository.name in self:
            raise ValueError(f"Repository with name '{repository.name}' already exists")
        self._repositories.append(repository)
        return repository

    def remove(self, repository: ArtifactRepository) -> bool:
        """Remove a repository, returning False if it was not present."""
        for index, existing in enumerate(self._repositories):
            if existing is repository:
                del self._repositories[index]
                return True
        return False

    def get(self, name: str) -> ArtifactRepository | None:
        """Return the repository with the given name, or None."""
        for repository in self._repositories:
            if repository.name == name:
                return repository
        return None

    @property
    def names(self) -> list[str]:
        """Repository names in order."""
        return [repository.name for repository in self._repositories]

    def maven(self, name: str, url: str) -> MavenArtifactRepository:
        """Add a Maven repository."""
        repository = MavenArtifactRepository(name=name, url=url)
        self.add(repository)
        return repository

    def maven_local(self, path: Path | None = None) -> MavenArtifactRepository:
        """Add the local cache repository."""
        path = path or Path.home() / ".m2" / "repository"
        return self.maven(MAVEN_LOCAL_REPO_NAME, path.absolute().as_uri())

    def maven_central(self) -> MavenArtifactRepository:
        """Add the default central repository."""
        return self.maven(MAVEN_CENTRAL_REPO_NAME, MAVEN_CENTRAL_URL)

    def flat_dir(self, name: str, dirs: Iterable[str]) -> FlatDirectoryRepository:
        """Add a flat directory repository."""
        repository = FlatDirectoryRepository(name=name, dirs=list(dirs))
        self.add(repository)
        return repository

    def __iter__(self) -> Iterator[ArtifactRepository]:
        return iter(list(self._repositories))

    def __len__(self) -> int:
        return len(self._repositories)

    def __contains__(self, name: object) -> bool:
        return any(repository.name == name for repository in self._repositories)

    def __repr__(self) -> str:
        return f"RepositoryContainer({self.names})"
