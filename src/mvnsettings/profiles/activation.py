# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Evaluation of profile activation predicates.

The predicate set is closed: :class:`JdkVersion`, :class:`OperatingSystem`,
:class:`Property` and :class:`FileExists`. :func:`evaluate` dispatches on the
predicate type; :func:`is_active` requires every predicate of an activation
to hold.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from mvnsettings.profiles.context import ActivationContext, OsAttributes
from mvnsettings.profiles.versions import jdk_matches
from mvnsettings.settings.model import (
    Activation,
    ActivationPredicate,
    FileExists,
    JdkVersion,
    OperatingSystem,
    Property,
)

logger = logging.getLogger(__name__)

_EXPRESSION = re.compile(r"\$\{([^}]+)\}")


def evaluate(predicate: ActivationPredicate, context: ActivationContext) -> bool:
    """
    Evaluate a single activation predicate.

    Args:
        predicate: Predicate to evaluate
        context: Activation context

    Returns:
        True if the predicate holds

    Raises:
        TypeError: If the predicate is not one of the supported types
    """
    if isinstance(predicate, JdkVersion):
        return _evaluate_jdk(predicate, context)
    if isinstance(predicate, OperatingSystem):
        return _evaluate_os(predicate, context.os_attributes)
    if isinstance(predicate, Property):
        return _evaluate_property(predicate, context)
    if isinstance(predicate, FileExists):
        return _evaluate_file(predicate, context)
    raise TypeError(f"Unsupported activation predicate: {predicate!r}")


def is_active(activation: Activation, context: ActivationContext) -> bool:
    """
    Return True if the activation holds for the context.

    ``activeByDefault: true`` always holds. Otherwise every predicate must
    hold, and a block that is malformed or has no predicate never does.
    """
    if activation.active_by_default:
        return True
    if activation.malformed or not activation.predicates:
        return False
    return all(evaluate(predicate, context) for predicate in activation.predicates)


def _evaluate_jdk(predicate: JdkVersion, context: ActivationContext) -> bool:
    version = context.jdk_version or context.system_properties.get("java.version")
    if not version:
        logger.debug(f"No JDK version known, jdk condition '{predicate.range}' does not match")
        return False
    return jdk_matches(predicate.range, version)


def _negatable(expected: str, test) -> bool:
    """Apply ``test`` to ``expected``, honoring a leading ``!``."""
    negate = expected.startswith("!")
    if negate:
        expected = expected[1:]
    return test(expected.lower()) != negate


def _family_matches(family: str, os_attributes: OsAttributes) -> bool:
    name = os_attributes.name.lower()
    path_separator = ";" if "windows" in name or "os/2" in name else ":"

    if family == "windows":
        return "windows" in name
    if family == "mac":
        return "mac" in name
    if family == "unix":
        return path_separator == ":" and ("mac" not in name or name.endswith("x"))
    if family == "dos":
        return path_separator == ";"
    if family == "os/2":
        return "os/2" in name
    return False


def _evaluate_os(predicate: OperatingSystem, os_attributes: OsAttributes) -> bool:
    if predicate.name and not _negatable(predicate.name, lambda v: os_attributes.name.lower() == v):
        return False
    if predicate.family and not _negatable(predicate.family, lambda v: _family_matches(v, os_attributes)):
        return False
    if predicate.arch and not _negatable(predicate.arch, lambda v: os_attributes.arch.lower() == v):
        return False
    if predicate.version and not _negatable(predicate.version, lambda v: os_attributes.version.lower() == v):
        return False
    return True


def _evaluate_property(predicate: Property, context: ActivationContext) -> bool:
    name = predicate.name
    absent = name.startswith("!")
    if absent:
        name = name[1:]

    actual = context.get_property(name)

    if predicate.value is None:
        defined = actual is not None and actual != ""
        return defined != absent

    expected = predicate.value
    negate = expected.startswith("!")
    if negate:
        expected = expected[1:]
    return (actual == expected) != negate


def interpolate(text: str, context: ActivationContext) -> str:
    """
    Replace ``${...}`` expressions with context values.

    ``${basedir}`` and ``${project.basedir}`` resolve to the project
    directory; other names are looked up as properties (environment
    variables are available as ``env.NAME``). Unknown expressions are kept.
    """

    def replace(match: re.Match) -> str:
        key = match.group(1)
        if key in ("basedir", "project.basedir") and context.project_directory is not None:
            return str(context.project_directory)
        value = context.get_property(key)
        return match.group(0) if value is None else value

    return _EXPRESSION.sub(replace, text)


def _evaluate_file(predicate: FileExists, context: ActivationContext) -> bool:
    path = Path(interpolate(predicate.path, context)).expanduser()
    if not path.is_absolute() and context.project_directory is not None:
        path = context.project_directory / path

    exists = path.exists()
    logger.debug(f"File activation: {path} exists={exists} negate={predicate.negate}")
    return exists != predicate.negate
