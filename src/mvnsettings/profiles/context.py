# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Context for evaluating profile activation conditions.

The context describes the build environment a profile is activated in:
- System properties (including ``env.*`` entries for environment variables)
- User properties (build properties, only when exported)
- Project directory (base for relative file paths)
- JDK version
- Operating system attributes
"""

from __future__ import annotations

import os
import platform
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

_OS_NAMES = {"darwin": "Mac OS X"}
_OS_ARCHES = {"x86_64": "amd64", "amd64": "amd64", "arm64": "aarch64", "i686": "x86", "i386": "x86"}


@dataclass(frozen=True)
class OsAttributes:
    """
    Operating system attributes, named the way the JVM reports them.

    Examples:
        >>> OsAttributes(name="Linux", arch="amd64", version="6.1.0")
        >>> OsAttributes.from_platform()  # attributes of the running machine
    """

    name: str = ""
    arch: str = ""
    version: str = ""

    @classmethod
    def from_platform(cls) -> OsAttributes:
        """Describe the running platform."""
        system = platform.system()
        machine = platform.machine()
        return cls(
            name=_OS_NAMES.get(system.lower(), system),
            arch=_OS_ARCHES.get(machine.lower(), machine.lower()),
            version=platform.release(),
        )


@dataclass
class ActivationContext:
    """
    Read-only inputs for profile activation.

    Examples:
        >>> context = ActivationContext(
        ...     system_properties={"myprop": "true"},
        ...     project_directory=Path("/work/project"),
        ...     jdk_version="17.0.2",
        ... )
        >>> context.get_property("myprop")
        'true'

        >>> # Context of the running process
        >>> context = ActivationContext.from_environment(Path.cwd())
    """

    system_properties: dict[str, str] = field(default_factory=dict)
    user_properties: dict[str, str] | None = None
    project_directory: Path | None = None
    jdk_version: str | None = None
    os_attributes: OsAttributes = field(default_factory=OsAttributes)

    @classmethod
    def from_environment(
        cls,
        project_directory: Path | None = None,
        user_properties: Mapping[str, object] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> ActivationContext:
        """
        Build a context from the running process.

        Environment variables become ``env.NAME`` system properties. The JDK
        version is taken from ``JAVA_VERSION`` when set.

        Args:
            project_directory: Project base directory
            user_properties: Build properties, or None when not exported
            environ: Environment to read (defaults to os.environ)

        Returns:
            A new ActivationContext
        """
        environ = os.environ if environ is None else environ
        os_attributes = OsAttributes.from_platform()

        system_properties = {f"env.{key}": value for key, value in environ.items()}
        system_properties.update(
            {
                "os.name": os_attributes.name,
                "os.arch": os_attributes.arch,
                "os.version": os_attributes.version,
                "user.home": str(Path.home()),
                "user.dir": os.getcwd(),
            }
        )

        jdk_version = environ.get("JAVA_VERSION")
        if jdk_version:
            system_properties["java.version"] = jdk_version

        return cls(
            system_properties=system_properties,
            user_properties=(
                {str(key): str(value) for key, value in user_properties.items()}
                if user_properties is not None
                else None
            ),
            project_directory=project_directory,
            jdk_version=jdk_version,
            os_attributes=os_attributes,
        )

    def get_property(self, name: str) -> str | None:
        """
        Look up a property, user properties taking precedence.

        Args:
            name: Property name

        Returns:
            The property value, or None if undefined
        """
        if self.user_properties is not None and name in self.user_properties:
            return self.user_properties[name]
        return self.system_properties.get(name)

