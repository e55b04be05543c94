"""Core version logic for release-flow.

This package contains the version decision engine:
- Semantic version parsing and increments
- Conventional commit classification and aggregation
- Prerelease identifier evolution
- Next version calculation
- Changelog entry rendering
"""

from __future__ import annotations

from release_flow.core.calculator import Calculation, CalculationOptions, VersionCalculator
from release_flow.core.changelog import (
    ChangelogFormat,
    format_entry,
    prepend_entry,
    write_changelog,
)
from release_flow.core.commits import (
    ParsedCommit,
    ParseOptions,
    PreReleaseMode,
    calculate_increment,
    classify_commit,
    parse_commits,
)
from release_flow.core.prerelease import evolve_prerelease
from release_flow.core.version import Increment, Version, parse_version

__all__ = [
    # Version
    "Increment",
    "Version",
    "parse_version",
    # Commits
    "ParseOptions",
    "ParsedCommit",
    "PreReleaseMode",
    "calculate_increment",
    "classify_commit",
    "parse_commits",
    # Prerelease
    "evolve_prerelease",
    # Calculation
    "Calculation",
    "CalculationOptions",
    "VersionCalculator",
    # Changelog
    "ChangelogFormat",
    "format_entry",
    "prepend_entry",
    "write_changelog",
]
