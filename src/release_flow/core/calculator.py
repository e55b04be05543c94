"""Next version calculation.

Combines the latest version tag, the commits made since it, and the
requested pre-release options into the next semantic version. The same
tags, commits and options always produce the same result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from release_flow.core.commits import (
    DEFAULT_PATCH_TYPES,
    ParseOptions,
    PreReleaseMode,
    calculate_increment,
)
from release_flow.core.prerelease import DEFAULT_PRERELEASE_TYPE, evolve_prerelease, prerelease_type
from release_flow.core.version import Increment, Version, validate_identifiers

if TYPE_CHECKING:
    from release_flow.vcs.git import Commit, GitRepository

logger = structlog.get_logger(__name__)

TAG_GLOB = "*.*.*"

# Starting point when the repository carries no version tag yet
INITIAL_VERSION = Version(prefix="v")


@dataclass(frozen=True, slots=True)
class CalculationOptions:
    """Inputs that shape the next version besides tags and commits."""

    prerelease: str = ""
    metadata: str = ""
    prerelease_mode: PreReleaseMode = PreReleaseMode.NONE
    prerelease_type: str = DEFAULT_PRERELEASE_TYPE
    patch_types: tuple[str, ...] = field(default=DEFAULT_PATCH_TYPES)
    trim_header: bool = False
    no_prefix: bool = False
    ignore_existing_prerelease: bool = False
    filter_on_prerelease: bool = False

    @property
    def parse_options(self) -> ParseOptions:
        return ParseOptions(
            trim_header=self.trim_header,
            prerelease_mode=self.prerelease_mode,
            patch_types=self.patch_types,
        )

    @property
    def tag_suffix(self) -> str:
        """Suffix a tag must carry when filtering on the requested pre-release."""
        if not self.prerelease:
            return ""
        suffix = f"-{self.prerelease}"
        if self.metadata:
            suffix = f"{suffix}+{self.metadata}"
        return suffix


@dataclass(frozen=True, slots=True)
class Calculation:
    """Outcome of a version calculation."""

    current_version: Version
    increment: Increment
    next_version: Version | None = None
    tag: str | None = None

    @property
    def no_version_changed(self) -> bool:
        return self.next_version is None


def find_latest_tag(tags: list[str], suffix: str = "") -> str | None:
    """Pick the first tag, or the first one ending with ``suffix``.

    ``tags`` must already be ordered newest first.
    """
    for tag in tags:
        if not suffix or tag.endswith(suffix):
            return tag
    return None


def next_version(current: Version, increment: Increment, options: CalculationOptions) -> Version:
    """Apply an increment to ``current`` following the pre-release rules.

    Args:
        current: Version the increment applies to
        increment: Increment from the commit range, never NONE
        options: Requested pre-release, metadata and prefix handling

    Returns:
        The next version
    """
    base = current
    if options.no_prefix:
        base = base.without_v_prefix()
    if options.ignore_existing_prerelease:
        logger.info("stripped existing prerelease metadata from version")
        base = base.with_prerelease("").with_metadata("")

    if increment is Increment.PRERELEASE and base.is_zero and not base.is_prerelease:
        # A prerelease needs a base version to attach to; 0.0.0-alpha.1 already has one
        bumped = base.bump(Increment.PATCH)
    else:
        bumped = base.bump(increment)

    if increment.is_prerelease:
        target_type = prerelease_type(options.prerelease) or options.prerelease_type
        base_changed = bumped.base != base.base
        identifier = evolve_prerelease(base.prerelease, base_changed, target_type)
        logger.debug(
            "evolved prerelease",
            current=base.prerelease,
            next=identifier,
            base_changed=base_changed,
        )
        bumped = bumped.with_prerelease(identifier)
    elif options.prerelease:
        bumped = bumped.with_prerelease(options.prerelease)

    if options.metadata:
        bumped = bumped.with_metadata(options.metadata)

    return bumped


class VersionCalculator:
    """Computes the next version of a repository from its tags and log."""

    def __init__(self, repo: GitRepository) -> None:
        self.repo = repo

    def latest_tag(self, suffix: str = "") -> str | None:
        return find_latest_tag(self.repo.tags(TAG_GLOB), suffix)

    def commits_since(self, tag: str | None) -> list[Commit]:
        return self.repo.log(since=tag)

    def calculate(self, options: CalculationOptions | None = None) -> Calculation:
        """Calculate the next version.

        Raises:
            VersionParseError: If the latest tag is not a valid version
            PrereleaseValidationError: If the requested pre-release is invalid
            GitError: If the tag or log query fails
        """
        options = options or CalculationOptions()
        if options.prerelease:
            validate_identifiers(options.prerelease, "prerelease")
        if options.metadata:
            validate_identifiers(options.metadata, "metadata")

        suffix = options.tag_suffix if options.filter_on_prerelease else ""
        tag = self.latest_tag(suffix)
        if tag is None:
            logger.debug("repository not tagged with version")
            current = Version.ZERO
        else:
            logger.debug("identified latest version within repository", version=tag)
            current = Version.parse(tag)

        commits = self.commits_since(tag)
        increment = calculate_increment(commits, options.parse_options)
        logger.info("detected increment", increment=str(increment), commits=len(commits))

        if increment is Increment.NONE:
            logger.warning("no commits trigger a change in semantic version")
            return Calculation(current_version=current, increment=increment, tag=tag)

        if (
            options.prerelease_mode is not PreReleaseMode.NONE
            and current.is_prerelease
            and not options.ignore_existing_prerelease
            and not increment.is_prerelease
        ):
            increment = increment.as_prerelease()
            logger.debug("continuing pre-release cycle", increment=str(increment))

        start = current if tag is not None else INITIAL_VERSION
        nxt = next_version(start, increment, options)
        logger.info("identified next semantic version", version=nxt.raw)

        return Calculation(current_version=current, increment=increment, next_version=nxt, tag=tag)
