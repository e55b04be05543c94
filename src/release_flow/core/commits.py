"""Conventional commit classification.

A commit is classified when its message holds a type token followed by a
literal colon-space, e.g. ``feat(api)!: drop v1 endpoints``. Classification
yields the increment the commit contributes:

- breaking (``!`` suffix or a ``BREAKING CHANGE: `` footer) -> Major
- ``feat`` -> Minor
- a patch type (``fix``, ``perf``, ``security`` plus configured extras) -> Patch
- anything else -> None

See https://www.conventionalcommits.org/
"""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING

import structlog

from release_flow.core.version import Increment

if TYPE_CHECKING:
    from release_flow.vcs.git import Commit

logger = structlog.get_logger(__name__)

COLON_SPACE = ": "
BREAKING_MARKERS = ("BREAKING CHANGE: ", "BREAKING-CHANGE: ")
BREAKING_SUFFIX = "!"
FEATURE_TYPE = "feat"

DEFAULT_PATCH_TYPES = ("fix", "perf", "security")

PRERELEASE_TYPES = ("alpha", "beta", "rc", "dev", "canary", "preview", "snapshot")

PRERELEASE_PHRASES = (
    "pre-release",
    "prerelease",
    "alpha release",
    "beta release",
    "rc release",
    "preview release",
    "experimental",
    "unstable",
    "dev build",
    "canary",
    "snapshot",
)

_PRERELEASE_PATTERN = re.compile(r"(alpha|beta|rc|dev|canary|preview|snapshot)\.?\d*")

_INCREMENT_DESCRIPTIONS = {
    Increment.NONE: "No version change",
    Increment.PATCH: "Patch version increment (bug fixes, performance improvements)",
    Increment.PRE_PATCH: "Patch version increment within a pre-release cycle",
    Increment.MINOR: "Minor version increment (new features)",
    Increment.PRE_MINOR: "Minor version increment within a pre-release cycle",
    Increment.MAJOR: "Major version increment (breaking changes)",
    Increment.PRE_MAJOR: "Major version increment within a pre-release cycle",
    Increment.PRERELEASE: "Pre-release version increment",
}


class PreReleaseMode(str, Enum):
    """How commits may trigger pre-release increments."""

    NONE = ""
    AUTO = "auto"
    ALWAYS = "always"


@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Options controlling commit classification."""

    trim_header: bool = False
    prerelease_mode: PreReleaseMode = PreReleaseMode.NONE
    patch_types: tuple[str, ...] = field(default=DEFAULT_PATCH_TYPES)


@dataclass(frozen=True, slots=True)
class ParsedCommit:
    """Classification of a single commit message."""

    message: str
    commit_type: str | None = None
    scope: str | None = None
    description: str = ""
    is_breaking: bool = False
    has_prerelease_context: bool = False
    increment: Increment = Increment.NONE
    sha: str = ""

    @property
    def is_conventional(self) -> bool:
        return self.commit_type is not None

    @classmethod
    def from_commit(cls, commit: Commit, options: ParseOptions | None = None) -> ParsedCommit:
        return replace(classify_commit(commit.message, options), sha=commit.sha)


def find_type_start(message: str) -> int:
    """Index where the type token starts when leading lines are trimmed.

    Searches backward from the first colon-space for the nearest line break.
    """
    colon_idx = message.find(COLON_SPACE)
    if colon_idx == -1:
        return 0
    return message.rfind("\n", 0, colon_idx) + 1


def extract_type_token(message: str, trim_header: bool = False) -> str | None:
    """Return the raw type token (``feat(api)!``) or None if unclassifiable."""
    colon_idx = message.find(COLON_SPACE)
    if colon_idx == -1:
        return None

    start = find_type_start(message) if trim_header else 0
    if start >= colon_idx:
        return None

    return message[start:colon_idx]


def split_type_token(token: str) -> tuple[str, str | None]:
    """Split ``feat(api)!`` into ``("feat", "api")``."""
    cleaned = token.removesuffix(BREAKING_SUFFIX)
    open_idx = cleaned.find("(")
    if open_idx == -1:
        return cleaned, None

    close_idx = cleaned.find(")", open_idx)
    scope = cleaned[open_idx + 1 : close_idx] if close_idx != -1 else cleaned[open_idx + 1 :]
    return cleaned[:open_idx], scope


def is_breaking_change(token: str, message: str) -> bool:
    if token.endswith(BREAKING_SUFFIX):
        return True
    return any(marker in message for marker in BREAKING_MARKERS)


def has_prerelease_context(scope: str | None, message: str) -> bool:
    """Whether a commit signals pre-release intent through its scope or text."""
    if scope:
        scope_lower = scope.lower()
        if any(pre_type in scope_lower for pre_type in PRERELEASE_TYPES):
            return True

    message_lower = message.lower()
    if any(phrase in message_lower for phrase in PRERELEASE_PHRASES):
        return True

    return _PRERELEASE_PATTERN.search(message_lower) is not None


def merge_patch_types(patch_types: Iterable[str] = ()) -> tuple[str, ...]:
    """Merge the default patch types with user supplied ones.

    Entries are trimmed and de-duplicated case-insensitively; the first
    spelling wins and blank entries are dropped.
    """
    seen: set[str] = set()
    merged: list[str] = []
    for patch_type in (*DEFAULT_PATCH_TYPES, *patch_types):
        key = patch_type.strip().lower()
        if key and key not in seen:
            seen.add(key)
            merged.append(patch_type.strip())
    return tuple(merged)


def classify_commit(message: str, options: ParseOptions | None = None) -> ParsedCommit:
    """Classify a commit message against the conventional commit rules."""
    options = options or ParseOptions()

    token = extract_type_token(message, options.trim_header)
    if token is None:
        return ParsedCommit(message=message, description=message.split("\n", 1)[0].strip())

    commit_type, scope = split_type_token(token)
    header_end = message.find("\n", message.find(COLON_SPACE))
    header = message[: header_end if header_end != -1 else len(message)]
    description = header.split(COLON_SPACE, 1)[1].strip() if COLON_SPACE in header else ""

    breaking = is_breaking_change(token, message)
    prerelease_context = options.prerelease_mode is PreReleaseMode.AUTO and has_prerelease_context(
        scope, message
    )

    if breaking:
        increment = Increment.MAJOR
    else:
        type_lower = commit_type.lower()
        patch_types = {patch_type.lower() for patch_type in merge_patch_types(options.patch_types)}
        if type_lower == FEATURE_TYPE:
            increment = Increment.MINOR
        elif type_lower in patch_types:
            increment = Increment.PATCH
        else:
            increment = Increment.NONE

    return ParsedCommit(
        message=message,
        commit_type=commit_type.lower(),
        scope=scope,
        description=description,
        is_breaking=breaking,
        has_prerelease_context=prerelease_context,
        increment=increment,
    )


def parse_commits(commits: Iterable[Commit], options: ParseOptions | None = None) -> list[ParsedCommit]:
    return [ParsedCommit.from_commit(commit, options) for commit in commits]


def calculate_increment(commits: Iterable[Commit], options: ParseOptions | None = None) -> Increment:
    """Identify the dominant increment across a commit range.

    ALWAYS mode short-circuits to a pre-release increment. Otherwise the
    first breaking commit without pre-release context returns Major
    immediately; every other classified commit is accumulated into a
    running maximum. Under AUTO mode any commit with pre-release context
    forces the final result to a pre-release increment.

    Args:
        commits: Commits to inspect, in log order
        options: Classification options

    Returns:
        The increment to apply; Increment.NONE when nothing qualifies
    """
    options = options or ParseOptions()
    if options.prerelease_mode is PreReleaseMode.ALWAYS:
        return Increment.PRERELEASE

    prerelease_indicated = False
    result = Increment.NONE

    for commit in commits:
        parsed = classify_commit(commit.message, options)
        if not parsed.is_conventional:
            continue

        if parsed.has_prerelease_context:
            prerelease_indicated = True
        elif parsed.is_breaking:
            logger.debug("breaking change detected", sha=commit.sha, type=parsed.commit_type)
            return Increment.MAJOR

        result = max(result, parsed.increment)

    if prerelease_indicated:
        return Increment.PRERELEASE

    return result


def describe_increment(increment: Increment) -> str:
    return _INCREMENT_DESCRIPTIONS.get(increment, "Unknown increment type")


def group_commits_by_type(commits: Sequence[ParsedCommit]) -> dict[str, list[ParsedCommit]]:
    """Group parsed commits by commit type; non-conventional ones go under ``other``."""
    grouped: dict[str, list[ParsedCommit]] = defaultdict(list)
    for pc in commits:
        grouped[pc.commit_type or "other"].append(pc)
    return dict(grouped)


def get_breaking_changes(commits: Sequence[ParsedCommit]) -> list[ParsedCommit]:
    return [pc for pc in commits if pc.is_breaking]
