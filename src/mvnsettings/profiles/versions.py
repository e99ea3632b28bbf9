# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
JDK version matching for ``jdk`` activation conditions.

Supported forms:
- Prefix: ``1.8`` matches ``1.8.0_292``
- Negated prefix: ``!1.8`` matches anything not starting with ``1.8``
- Range: ``[1.8,11)``, ``(,1.8]``, ``[17,)``; brackets are inclusive,
  parentheses exclusive, an empty bound is unbounded
- Range list: ``[1.6,1.7),[9,)`` matches if any of its ranges does

Versions are compared on their first three numeric parts, separated by
``.``, ``-`` or ``_``, with missing parts counting as zero.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_NON_VERSION_CHARS = re.compile(r"[^\d._-]")
_VERSION_SEPARATORS = re.compile(r"[._-]")
_RANGE = re.compile(r"[\[(][^\])]*[\])]")

_UNBOUNDED_UPPER = "99999999"
_COMPARED_PARTS = 3


@dataclass(frozen=True)
class RangeBound:
    """One side of a version range."""

    value: str
    closed: bool


def is_range(spec: str) -> bool:
    """Return True if the value uses range syntax."""
    return spec.startswith("[") or spec.startswith("(")


def parse_range(spec: str) -> tuple[RangeBound, RangeBound]:
    """
    Parse a range into lower and upper bounds.

    A range with a single bound (``[1.8``) has no upper limit.
    """
    bounds: list[RangeBound] = []
    for token in spec.split(","):
        token = token.strip()
        if token.startswith("["):
            bounds.append(RangeBound(token.strip("[]"), True))
        elif token.startswith("("):
            bounds.append(RangeBound(token.strip("()"), False))
        elif token.endswith("]"):
            bounds.append(RangeBound(token.rstrip("]"), True))
        elif token.endswith(")"):
            bounds.append(RangeBound(token.rstrip(")"), False))
        elif not token:
            bounds.append(RangeBound("", False))

    if len(bounds) < 2:
        bounds.append(RangeBound(_UNBOUNDED_UPPER, False))
    return bounds[0], bounds[1]


def _parts(version: str) -> list[int]:
    tokens = _VERSION_SEPARATORS.split(_NON_VERSION_CHARS.sub("", version))
    parts = [int(token) if token.isdigit() else 0 for token in tokens[:_COMPARED_PARTS]]
    return parts + [0] * (_COMPARED_PARTS - len(parts))


def _relation(version: str, bound: RangeBound, is_lower: bool) -> int:
    """Order ``version`` relative to ``bound``: -1 below, 0 on, 1 above."""
    if not bound.value:
        return 1 if is_lower else -1

    for ours, theirs in zip(_parts(version), _parts(bound.value)):
        if ours < theirs:
            return -1
        if ours > theirs:
            return 1

    if not bound.closed:
        return -1 if is_lower else 1
    return 0


def in_range(version: str, spec: str) -> bool:
    """Return True if ``version`` lies inside the range ``spec``."""
    lower, upper = parse_range(spec)

    lower_relation = _relation(version, lower, True)
    if lower_relation == 0:
        return True
    if lower_relation < 0:
        return False
    return _relation(version, upper, False) <= 0


def jdk_matches(spec: str, version: str) -> bool:
    """
    Check a ``jdk`` activation value against a JDK version.

    Args:
        spec: Prefix, ``!prefix``, range or range list
        version: JDK version (e.g. ``17.0.2`` or ``1.8.0_292``)

    Returns:
        True if the version satisfies the condition

    Examples:
        >>> jdk_matches("1.8", "1.8.0_292")
        True
        >>> jdk_matches("!1.8", "11.0.1")
        True
        >>> jdk_matches("[1.8,11)", "11.0.1")
        False
    """
    spec = spec.strip()
    negate = spec.startswith("!")
    if negate:
        spec = spec[1:]

    if is_range(spec):
        ranges = _RANGE.findall(spec) or [spec]
        result = any(in_range(version, item) for item in ranges)
    else:
        result = version.startswith(spec)

    return result != negate
