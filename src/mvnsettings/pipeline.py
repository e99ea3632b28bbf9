# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

End-to-end settings resolution for one build project.

Stages run strictly in order:
1. Load and merge the global and user settings documents
2. Decrypt server credentials
3. Select the active profiles
4. Apply active profiles (properties and repositories) to the project
5. Substitute repositories with mirrors
6. Attach server credentials to project and publishing repositories

Example:
    >>> project = BuildProject(project_dir=Path.cwd())
    >>> project.repositories.maven_central()
    >>> result = SettingsResolver(SettingsOptions()).resolve(project)
    >>> project.repositories.names
    ['nexus']
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mvnsettings.config.options import SettingsOptions
from mvnsettings.errors import MavenSettingsError, SettingsResolutionError, SettingsWarning
from mvnsettings.profiles.activation import interpolate
from mvnsettings.profiles.context import ActivationContext
from mvnsettings.profiles.selector import ProfileSelector
from mvnsettings.repositories.credentials import CredentialInjector
from mvnsettings.repositories.mirrors import MirrorResolution, MirrorResolver
from mvnsettings.repositories.model import MavenArtifactRepository, RepositoryContainer
from mvnsettings.security.audit import CredentialAuditLogger
from mvnsettings.security.decryptor import CredentialDecryptor
from mvnsettings.settings.loader import SettingsLoader
from mvnsettings.settings.model import Profile, Repository, Settings

logger = logging.getLogger(__name__)


@dataclass
class BuildProject:
    """
    The parts of a build project that settings resolution reads and updates.

    Attributes:
        project_dir: Project base directory
        properties: Project property namespace, receives profile properties
        repositories: Repositories used for dependency resolution
        publishing_repositories: Repositories used for publishing, if any
    """

    project_dir: Path = field(default_factory=Path.cwd)
    properties: dict[str, Any] = field(default_factory=dict)
    repositories: RepositoryContainer = field(default_factory=RepositoryContainer)
    publishing_repositories: RepositoryContainer | None = None


@dataclass
class ResolutionResult:
    """
    Outcome of a successful resolution.

    Attributes:
        settings: Merged, decrypted settings
        active_profiles: Profiles that were applied, in order
        warnings: Non-fatal problems from every stage
        mirror_resolution: Mirror substitutions applied to the project
    """

    settings: Settings
    active_profiles: list[Profile] = field(default_factory=list)
    warnings: list[SettingsWarning] = field(default_factory=list)
    mirror_resolution: MirrorResolution = field(default_factory=MirrorResolution)


class SettingsResolver:
    """
    Runs every resolution stage for a project.

    Attributes:
        options: Resolution options
        environ: Environment used for placeholders and activation
        loader: Settings document loader
        decryptor: Credential decryptor
        selector: Profile selector
        mirror_resolver: Mirror resolver
        injector: Credential injector
    """

    def __init__(
        self,
        options: SettingsOptions | None = None,
        environ: Mapping[str, str] | None = None,
        mirror_resolver: MirrorResolver | None = None,
        decryptor: CredentialDecryptor | None = None,
    ) -> None:
        self.options = options or SettingsOptions()
        self.environ = os.environ if environ is None else environ
        self.loader = SettingsLoader()
        self.decryptor = decryptor or CredentialDecryptor(
            environ=self.environ, audit=CredentialAuditLogger(self.options.audit_file)
        )
        self.selector = ProfileSelector()
        self.mirror_resolver = mirror_resolver or MirrorResolver()
        self.injector = CredentialInjector()

    def resolve(self, project: BuildProject) -> ResolutionResult:
        """
        Resolve settings and apply them to the project.

        The project is updated in place. A failure in a late stage can
        leave the project partially updated.

        Args:
            project: Project to update

        Returns:
            The resolution outcome

        Raises:
            SettingsResolutionError: If any stage fails; the stage's
                                     exception is kept as ``__cause__``
        """
        try:
            return self._resolve(project)
        except MavenSettingsError as err:
            if isinstance(err, SettingsResolutionError):
                raise
            raise SettingsResolutionError(f"Unable to read local Maven settings: {err}") from err

    def _resolve(self, project: BuildProject) -> ResolutionResult:
        settings, warnings = self.loader.load(
            self.options.global_settings_file,
            self.options.user_settings_file,
        )

        self.decryptor.decrypt(settings, self.options.security_file, warnings)

        context = ActivationContext.from_environment(
            project_directory=project.project_dir,
            user_properties=project.properties if self.options.export_build_props else None,
            environ=self.environ,
        )
        explicit_ids = list(self.options.active_profiles) + list(settings.active_profiles)
        active_profiles = self.selector.select_active(settings.profiles, explicit_ids, context)

        for profile in active_profiles:
            self._apply_profile(profile, project, context, warnings)

        mirror_resolution = self.mirror_resolver.resolve(settings.mirrors, project.repositories)
        mirror_resolution.apply(project.repositories)

        self.injector.inject(settings, project.repositories)
        self.injector.inject(settings, project.publishing_repositories)

        return ResolutionResult(
            settings=settings,
            active_profiles=active_profiles,
            warnings=warnings,
            mirror_resolution=mirror_resolution,
        )

    def _apply_profile(
        self,
        profile: Profile,
        project: BuildProject,
        context: ActivationContext,
        warnings: list[SettingsWarning],
    ) -> None:
        logger.info(f"Applying maven profile {profile.id}")

        for key, value in profile.properties.items():
            logger.info(f"Applying property {key}")
            project.properties[key] = interpolate(value, context)
            logger.debug(f"Property applied with value {project.properties[key]}")

        for declared in profile.repositories:
            if declared.id in project.repositories:
                warning = SettingsWarning(
                    f"Repository {declared.id} from profile {profile.id} is already declared, skipping",
                    source="profiles",
                )
                logger.warning(str(warning))
                warnings.append(warning)
                continue

            repository = to_maven_repository(declared)
            project.repositories.add(repository)
            logger.info(f"Imported repository {repository.name} from active profile {profile.id}")


def to_maven_repository(declared: Repository) -> MavenArtifactRepository:
    """
    Create a build repository from a profile repository.

    Releases enabled with snapshots disabled gives a releases-only
    repository; the reverse gives a snapshots-only one.
    """
    releases = declared.releases_enabled is not False
    snapshots = declared.snapshots_enabled is not False
    return MavenArtifactRepository(
        name=declared.id,
        url=declared.url,
        releases_only=releases and not snapshots,
        snapshots_only=snapshots and not releases,
    )
