"""Tests for prerelease identifier evolution."""

from __future__ import annotations

import re

import pytest

from release_flow.core.prerelease import evolve_prerelease, parse_prerelease, prerelease_type


class TestParsePrerelease:
    """Tests for parse_prerelease()."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("alpha.1", ("alpha", 1)),
            ("beta-4", ("beta", 4)),
            ("rc3", ("rc", 3)),
            ("beta", ("beta", 1)),
            ("RC.2", ("rc", 2)),
            ("dev.build.7", ("dev.build.7", 1)),
        ],
    )
    def test_shapes(self, text: str, expected: tuple[str, int]):
        assert parse_prerelease(text) == expected

    def test_prerelease_type(self):
        assert prerelease_type("beta.3") == "beta"
        assert prerelease_type("") == ""


class TestEvolvePrerelease:
    """Tests for evolve_prerelease()."""

    def test_same_type_increments(self):
        assert evolve_prerelease("alpha.1", False, "alpha") == "alpha.2"

    def test_higher_type_resets(self):
        assert evolve_prerelease("alpha.3", False, "beta") == "beta.1"

    @pytest.mark.parametrize("base_changed", [True, False])
    def test_empty_current_starts_at_one(self, base_changed: bool):
        assert evolve_prerelease("", base_changed, "alpha") == "alpha.1"

    def test_base_change_resets(self):
        assert evolve_prerelease("beta.2", True, "alpha") == "alpha.1"
        assert evolve_prerelease("beta.2", True, "beta") == "beta.1"

    def test_lower_type_resets(self):
        assert evolve_prerelease("rc.2", False, "beta") == "beta.1"

    def test_other_shapes_continue(self):
        assert evolve_prerelease("rc5", False, "rc") == "rc.6"
        assert evolve_prerelease("beta", False, "beta") == "beta.2"

    def test_unknown_target_same_type_increments(self):
        assert evolve_prerelease("canary.4", False, "canary") == "canary.5"

    def test_unknown_target_different_type_resets(self):
        assert evolve_prerelease("beta.4", False, "canary") == "canary.1"

    def test_unknown_current_known_target_resets(self):
        assert evolve_prerelease("canary.4", False, "alpha") == "alpha.1"

    def test_target_is_lowercased(self):
        assert evolve_prerelease("beta.1", False, "BETA") == "beta.2"

    def test_empty_target_defaults_to_alpha(self):
        assert evolve_prerelease("", False, "") == "alpha.1"

    @pytest.mark.parametrize(
        ("current", "base_changed", "target"),
        [
            ("alpha.1", False, "rc"),
            ("x", False, "y"),
            ("beta.9", False, "beta"),
            ("", True, "preview"),
        ],
    )
    def test_result_shape(self, current: str, base_changed: bool, target: str):
        """The result is always identifier.positive-integer."""
        assert re.fullmatch(r"[a-z]+\.[1-9]\d*", evolve_prerelease(current, base_changed, target))
