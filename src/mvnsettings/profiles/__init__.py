# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Profile activation: context, predicate evaluation and selection.
"""

from __future__ import annotations

from mvnsettings.profiles.activation import evaluate, interpolate, is_active
from mvnsettings.profiles.context import ActivationContext, OsAttributes
from mvnsettings.profiles.selector import ProfileSelector
from mvnsettings.profiles.versions import jdk_matches

__all__ = [
    "ActivationContext",
    "OsAttributes",
    "ProfileSelector",
    "evaluate",
    "interpolate",
    "is_active",
    "jdk_matches",
]
