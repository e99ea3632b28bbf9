# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Tests for mvnsettings.repositories.credentials module.
"""

from __future__ import annotations

import pytest

from mvnsettings.repositories.credentials import HEADER_AUTHENTICATION, CredentialInjector
from mvnsettings.repositories.model import (
    HttpHeaderCredentials,
    MavenArtifactRepository,
    PasswordCredentials,
    RepositoryContainer,
)
from mvnsettings.settings.model import HttpHeader, Server, ServerConfiguration, Settings


@pytest.fixture
def injector() -> CredentialInjector:
    """Provide a credential injector."""
    return CredentialInjector()


def _header_server(server_id: str, *headers: tuple[str | None, str | None]) -> Server:
    return Server(
        id=server_id,
        configuration=ServerConfiguration([HttpHeader(name, value) for name, value in headers]),
    )


class TestInject:
    """Tests for attaching server credentials to repositories."""

    def test_basic_credentials(self, injector: CredentialInjector) -> None:
        """Test a server with username and password credentials exactly its repository."""
        repositories = RepositoryContainer()
        nexus = repositories.maven("nexus", "https://nexus.example.com")
        other = repositories.maven("other", "https://other.example.com")
        settings = Settings(servers=[Server(id="nexus", username="deployer", password="secret")])

        injector.inject(settings, repositories)

        assert nexus.credentials == PasswordCredentials(username="deployer", password="secret")
        assert nexus.authentication == []
        assert other.credentials is None

    def test_basic_credentials_win_over_headers(self, injector: CredentialInjector) -> None:
        """Test username and password take precedence over a configuration block."""
        repository = MavenArtifactRepository(name="nexus", url="https://nexus.example.com")
        server = _header_server("nexus", ("Private-Token", "abc"))
        server.username = "deployer"
        server.password = "secret"

        injector.inject(Settings(servers=[server]), [repository])

        assert isinstance(repository.credentials, PasswordCredentials)
        assert repository.authentication == []

    def test_header_credentials(self, injector: CredentialInjector) -> None:
        """Test a header configuration attaches header credentials and scheme."""
        repository = MavenArtifactRepository(name="gitlab", url="https://gitlab.example.com")
        settings = Settings(servers=[_header_server("gitlab", ("Private-Token", "abc"))])

        injector.inject(settings, [repository])

        assert repository.credentials == HttpHeaderCredentials(name="Private-Token", value="abc")
        assert repository.authentication == [HEADER_AUTHENTICATION]

    def test_last_header_wins(self, injector: CredentialInjector) -> None:
        """Test only the last declared header is used."""
        repository = MavenArtifactRepository(name="gitlab", url="https://gitlab.example.com")
        settings = Settings(servers=[_header_server("gitlab", ("First", "1"), ("Job-Token", "2"))])

        injector.inject(settings, [repository])

        assert repository.credentials == HttpHeaderCredentials(name="Job-Token", value="2")

    @pytest.mark.parametrize("header", [("Private-Token", " "), ("", "abc"), (None, None)])
    def test_blank_header_still_sets_scheme(
        self, injector: CredentialInjector, header: tuple[str | None, str | None]
    ) -> None:
        """Test a blank header attaches no credentials but still the header scheme."""
        repository = MavenArtifactRepository(name="gitlab", url="https://gitlab.example.com")
        settings = Settings(servers=[_header_server("gitlab", header)])

        injector.inject(settings, [repository])

        assert repository.credentials is None
        assert repository.authentication == [HEADER_AUTHENTICATION]

    def test_empty_configuration_sets_scheme(self, injector: CredentialInjector) -> None:
        """Test a configuration block without headers still sets the scheme."""
        repository = MavenArtifactRepository(name="gitlab", url="https://gitlab.example.com")
        settings = Settings(servers=[_header_server("gitlab")])

        injector.inject(settings, [repository])

        assert repository.credentials is None
        assert repository.authentication == [HEADER_AUTHENTICATION]

    def test_scheme_not_duplicated(self, injector: CredentialInjector) -> None:
        """Test injecting twice adds the scheme once."""
        repository = MavenArtifactRepository(name="gitlab", url="https://gitlab.example.com")
        settings = Settings(servers=[_header_server("gitlab", ("Private-Token", "abc"))])

        injector.inject(settings, [repository])
        injector.inject(settings, [repository])

        assert repository.authentication == [HEADER_AUTHENTICATION]

    def test_server_without_credentials(self, injector: CredentialInjector) -> None:
        """Test a server with only a username leaves the repository untouched."""
        repository = MavenArtifactRepository(name="nexus", url="https://nexus.example.com")

        injector.inject(Settings(servers=[Server(id="nexus", username="deployer")]), [repository])

        assert repository.credentials is None
        assert repository.authentication == []

    def test_flat_directory_untouched(self, injector: CredentialInjector) -> None:
        """Test flat directory repositories never receive credentials."""
        repositories = RepositoryContainer()
        flat = repositories.flat_dir("libs", ["libs"])
        settings = Settings(servers=[Server(id="libs", username="u", password="p")])

        injector.inject(settings, repositories)

        assert not hasattr(flat, "credentials")

    def test_none_repositories_ignored(self, injector: CredentialInjector) -> None:
        """Test a missing publishing container is ignored."""
        injector.inject(Settings(servers=[Server(id="x", username="u", password="p")]), None)
