# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Selection of active profiles.

A profile is active when:
- Its id is explicitly listed as active, or
- It declares no activation condition, or
- Its activation condition holds for the context
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from mvnsettings.profiles.activation import is_active
from mvnsettings.profiles.context import ActivationContext
from mvnsettings.settings.model import Profile

logger = logging.getLogger(__name__)


class ProfileSelector:
    """Selects the active subset of a list of profiles."""

    def select_active(
        self,
        profiles: Sequence[Profile],
        explicit_active_ids: Iterable[str],
        context: ActivationContext,
    ) -> list[Profile]:
        """
        Return the active profiles in declaration order.

        Profiles sharing an id are collapsed, keeping the first occurrence.

        Args:
            profiles: Declared profiles
            explicit_active_ids: Ids to activate regardless of conditions
            context: Context the conditions are evaluated against

        Returns:
            Active profiles in declaration order
        """
        explicit = set(explicit_active_ids)
        seen: set[str] = set()
        active: list[Profile] = []

        for profile in profiles:
            if profile.id in seen:
                continue
            seen.add(profile.id)

            if self._is_selected(profile, explicit, context):
                active.append(profile)

        logger.info(f"Active profiles: {[profile.id for profile in active]}")
        return active

    @staticmethod
    def _is_selected(profile: Profile, explicit: set[str], context: ActivationContext) -> bool:
        if profile.id in explicit:
            logger.debug(f"Profile {profile.id} is explicitly active")
            return True
        if not profile.has_activation_condition():
            return True

        assert profile.activation is not None
        return is_active(profile.activation, context)
