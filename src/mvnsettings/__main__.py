# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Main entry point for the command line interface.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, NoReturn

import yaml

from mvnsettings import __version__
from mvnsettings.config.config import Config, ConfigError, ConfigValidationError
from mvnsettings.config.options import SettingsOptions
from mvnsettings.errors import MavenSettingsError, SettingsResolutionError
from mvnsettings.pipeline import BuildProject, ResolutionResult, SettingsResolver
from mvnsettings.repositories.model import (
    MAVEN_CENTRAL_REPO_NAME,
    MAVEN_LOCAL_REPO_NAME,
    ArtifactRepository,
    FlatDirectoryRepository,
    HttpHeaderCredentials,
    MavenArtifactRepository,
    PasswordCredentials,
    RepositoryContainer,
)
from mvnsettings.security.cipher import PlexusCipher
from mvnsettings.security.decryptor import SecurityFileError, read_master_password

DEFAULT_CONFIG_FILE = "mvnsettings.yaml"


def parse_arguments() -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="mvnsettings",
        description="mvnsettings - Maven settings resolution for build tooling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  Options can be overridden using environment variables with the
  MVNSETTINGS_ prefix. Use double underscores (__) to separate nested keys:

    MVNSETTINGS_MAVEN__ACTIVE_PROFILES=nexus,ci   # Overrides maven.active_profiles
    MVNSETTINGS_MAVEN__SECURITY_FILE=/secure.yaml # Overrides maven.security_file

Examples:
  mvnsettings                                   # Resolve with default settings files
  mvnsettings -s settings.yaml -r repos.yaml
  mvnsettings -P nexus,ci -d /path/to/project
  mvnsettings --encrypt-master-password secret
        """,
    )

    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help=f"Path to options file (default: {DEFAULT_CONFIG_FILE} if present)",
    )
    parser.add_argument("-s", "--settings", type=str, default=None, help="User settings file")
    parser.add_argument("-gs", "--global-settings", type=str, default=None, help="Global settings file")
    parser.add_argument("--security", type=str, default=None, help="Security file holding the master password")
    parser.add_argument("--audit-file", type=str, default=None, help="File receiving credential audit records")
    parser.add_argument(
        "-P",
        "--activate-profiles",
        type=str,
        default=None,
        help="Comma-separated list of profile ids to activate",
    )
    parser.add_argument(
        "-d",
        "--project-dir",
        type=str,
        default=None,
        help="Project directory (default: current directory)",
    )
    parser.add_argument(
        "-r",
        "--repositories",
        type=str,
        default=None,
        help="YAML file declaring the project's repositories and properties",
    )
    parser.add_argument(
        "--encrypt-master-password",
        metavar="PASSWORD",
        default=None,
        help="Print an encrypted master password and exit",
    )
    parser.add_argument(
        "--encrypt-password",
        metavar="PASSWORD",
        default=None,
        help="Print a password encrypted with the master password and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"mvnsettings version {__version__}",
        help="Show version information and exit",
    )

    return parser.parse_args()


def configure_logging(verbosity: int) -> None:
    """Send log records to stderr at a level chosen by verbosity."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logging.getLogger().setLevel(level)


def load_options(args: argparse.Namespace) -> SettingsOptions:
    """
    Build resolution options from the options file and command line.

    Command line values take precedence over the options file.

    Raises:
        ConfigError: If an explicitly given options file is missing or invalid
    """
    if args.config is not None:
        config = Config(config_file=args.config, env_prefix="MVNSETTINGS_")
    else:
        config = Config(config_file=DEFAULT_CONFIG_FILE, env_prefix="MVNSETTINGS_", required=False)
    config.load()

    options = SettingsOptions.from_config(config)
    if args.settings is not None:
        options.user_settings_file = Path(args.settings).expanduser()
    if args.global_settings is not None:
        options.global_settings_file = Path(args.global_settings).expanduser()
    if args.security is not None:
        options.security_file = Path(args.security).expanduser()
    if args.audit_file is not None:
        options.audit_file = Path(args.audit_file).expanduser()
    if args.activate_profiles:
        options.active_profiles += [
            profile.strip() for profile in args.activate_profiles.split(",") if profile.strip()
        ]
    return options


def load_project(repositories_file: str | None, project_dir: Path) -> BuildProject:
    """
    Build the project to resolve settings for.

    Without a repositories file, the project uses the local cache and the
    central repository. The file has the form:

        properties:
          key: value
        repositories:
          - name: MavenLocal
          - name: internal
            url: https://repo.example.com/maven2
          - name: libs
            dirs: [libs]
        publishing:
          - name: releases
            url: https://repo.example.com/releases

    Raises:
        ConfigError: If the file cannot be read or is malformed
    """
    project = BuildProject(project_dir=project_dir)

    if repositories_file is None:
        project.repositories.maven_local()
        project.repositories.maven_central()
        return project

    path = Path(repositories_file)
    try:
        with open(path, encoding="utf-8") as file:
            data = yaml.safe_load(file.read()) or {}
    except OSError as err:
        raise ConfigError(f"Failed to open repositories file {path}: {err}") from err
    except yaml.YAMLError as err:
        raise ConfigError(f"Failed to parse repositories file {path}: {err}") from err

    if not isinstance(data, dict):
        raise ConfigError(f"Repositories file {path} must contain a mapping")

    properties = data.get("properties") or {}
    if not isinstance(properties, dict):
        raise ConfigError(f"'properties' in {path} must be a mapping")
    project.properties.update({str(key): value for key, value in properties.items()})

    _add_repositories(project.repositories, data.get("repositories"), path)
    if "publishing" in data:
        project.publishing_repositories = RepositoryContainer()
        _add_repositories(project.publishing_repositories, data.get("publishing"), path)

    return project


def _add_repositories(container: RepositoryContainer, entries: Any, path: Path) -> None:
    if entries is None:
        return
    if not isinstance(entries, list):
        raise ConfigError(f"Repository sections in {path} must be lists")

    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("name"):
            raise ConfigError(f"Every repository in {path} needs a name")
        name = str(entry["name"])
        try:
            if "dirs" in entry:
                container.flat_dir(name, [str(directory) for directory in entry["dirs"] or []])
            elif "url" in entry:
                container.maven(name, str(entry["url"]))
            elif name == MAVEN_LOCAL_REPO_NAME:
                container.maven_local()
            elif name == MAVEN_CENTRAL_REPO_NAME:
                container.maven_central()
            else:
                raise ConfigError(f"Repository {name} in {path} needs a url or dirs")
        except ValueError as err:
            raise ConfigError(f"Invalid repository in {path}: {err}") from err


def describe_repository(repository: ArtifactRepository) -> dict[str, Any]:
    """Describe a repository for output, without secret values."""
    if isinstance(repository, FlatDirectoryRepository):
        return {"name": repository.name, "dirs": list(repository.dirs)}

    description: dict[str, Any] = {"name": repository.name}
    if isinstance(repository, MavenArtifactRepository):
        description["url"] = repository.url
        if isinstance(repository.credentials, PasswordCredentials):
            description["credentials"] = {"username": repository.credentials.username}
        elif isinstance(repository.credentials, HttpHeaderCredentials):
            description["credentials"] = {"header": repository.credentials.name}
        if repository.authentication:
            description["authentication"] = list(repository.authentication)
        if repository.releases_only:
            description["content"] = "releases"
        elif repository.snapshots_only:
            description["content"] = "snapshots"
    return description


def create_report(project: BuildProject, result: ResolutionResult) -> dict[str, Any]:
    """
    Create the printable outcome of a resolution.

    Args:
        project: Resolved project
        result: Resolution outcome

    Returns:
        Mapping ready to be dumped as YAML
    """
    report: dict[str, Any] = {
        "activeProfiles": [profile.id for profile in result.active_profiles],
        "repositories": [describe_repository(repository) for repository in project.repositories],
    }
    if project.publishing_repositories is not None:
        report["publishing"] = [
            describe_repository(repository) for repository in project.publishing_repositories
        ]
    if result.mirror_resolution.replacements:
        report["mirrored"] = dict(result.mirror_resolution.replacements)
    report["properties"] = {key: str(value) for key, value in project.properties.items()}
    report["warnings"] = [str(warning) for warning in result.warnings]
    return report


def encrypt_password(password: str, options: SettingsOptions) -> str:
    """
    Encrypt a server password with the master password of the security file.

    Raises:
        SecurityFileError: If no master password can be read
    """
    if options.security_file is None:
        raise SecurityFileError("No security file configured")
    cipher = PlexusCipher()
    master_password = read_master_password(options.security_file, cipher)
    return cipher.encrypt_decorated(password, master_password)


def main() -> int:
    """
    Main entry point for the mvnsettings command.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        # Parse command line arguments
        args = parse_arguments()
        configure_logging(args.verbose)

        if args.encrypt_master_password is not None:
            print(PlexusCipher().encrypt_master_password(args.encrypt_master_password))
            return 0

        options = load_options(args)

        if args.encrypt_password is not None:
            print(encrypt_password(args.encrypt_password, options))
            return 0

        project_dir = Path(args.project_dir).absolute() if args.project_dir else Path.cwd()
        project = load_project(args.repositories, project_dir)

        result = SettingsResolver(options).resolve(project)

        print(yaml.safe_dump(create_report(project, result), sort_keys=False, default_flow_style=False), end="")
        return 0

    except ConfigValidationError as err:
        print(f"Error: Configuration validation failed: {err}", file=sys.stderr)
        return 1

    except ConfigError as err:
        print(f"Error: Configuration error: {err}", file=sys.stderr)
        return 1

    except SecurityFileError as err:
        print(f"Error: Security file error: {err}", file=sys.stderr)
        return 1

    except SettingsResolutionError as err:
        print(f"Error: {err}", file=sys.stderr)
        if err.__cause__ is not None:
            print(f"Caused by: {type(err.__cause__).__name__}: {err.__cause__}", file=sys.stderr)
        return 1

    except MavenSettingsError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130

    except Exception as err:
        print(f"Error: Unexpected error: {err}", file=sys.stderr)
        import traceback

        traceback.print_exc()
        return 1


def run() -> NoReturn:
    """
    Run the application and exit with appropriate code.

    This is used by the console script entry point.
    """
    sys.exit(main())


if __name__ == "__main__":
    run()
