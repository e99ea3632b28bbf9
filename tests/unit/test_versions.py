# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Tests for mvnsettings.profiles.versions module.
"""

from __future__ import annotations

import pytest

from mvnsettings.profiles.versions import RangeBound, is_range, jdk_matches, parse_range


class TestParseRange:
    """Tests for range parsing."""

    def test_closed_open(self) -> None:
        """Test brackets are inclusive and parentheses exclusive."""
        assert parse_range("[1.8,11)") == (RangeBound("1.8", True), RangeBound("11", False))

    def test_unbounded_lower(self) -> None:
        """Test an empty lower bound."""
        assert parse_range("(,1.8]") == (RangeBound("", False), RangeBound("1.8", True))

    def test_single_bound(self) -> None:
        """Test a range with only a lower bound has no upper limit."""
        lower, upper = parse_range("[1.8")

        assert lower == RangeBound("1.8", True)
        assert upper.closed is False

    def test_is_range(self) -> None:
        """Test range syntax detection."""
        assert is_range("[11,)")
        assert is_range("(,1.8]")
        assert not is_range("1.8")


class TestJdkMatches:
    """Tests for jdk activation values."""

    @pytest.mark.parametrize(
        ("spec", "version", "expected"),
        [
            ("1.8", "1.8.0_292", True),
            ("1.8", "11.0.2", False),
            ("11", "11.0.2", True),
            ("!1.8", "11.0.1", True),
            ("!1.8", "1.8.0_292", False),
            ("[1.8,11)", "1.8.0_292", True),
            ("[1.8,11)", "9.0.4", True),
            ("[1.8,11)", "11.0.1", False),
            ("[1.8,11)", "17", False),
            ("(1.8,11)", "1.8", False),
            ("(,1.8]", "1.7.0_80", True),
            ("(,1.8]", "1.8", True),
            ("(,1.8]", "9", False),
            ("[17,)", "21.0.1", True),
            ("[17,)", "11.0.2", False),
            ("[1.6,1.7),[9,)", "1.6.0_45", True),
            ("[1.6,1.7),[9,)", "1.8.0_292", False),
            ("[1.6,1.7),[9,)", "11", True),
            ("![1.8,11)", "17.0.2", True),
        ],
    )
    def test_jdk_matches(self, spec: str, version: str, expected: bool) -> None:
        """Test prefix, negation, range and range list matching."""
        assert jdk_matches(spec, version) is expected
