"""Semantic version parsing and manipulation.

Versions follow ``PREFIX MAJOR.MINOR.PATCH[-PRERELEASE][+METADATA]`` where
the prefix is an optional literal such as ``v`` or ``release-``. The
canonical text of a version is always derived from its fields, so it
parses back to the same numbers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import ClassVar

from release_flow.exceptions import PrereleaseValidationError, VersionParseError

_VERSION_RE = re.compile(
    r"^(?P<prefix>[^\d]*)"
    r"(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(?:-(?P<prerelease>[0-9A-Za-z.-]+))?"
    r"(?:\+(?P<metadata>[0-9A-Za-z.-]+))?$"
)

_IDENTIFIER_RE = re.compile(r"^[0-9A-Za-z-]+$")


class Increment(Enum):
    """Magnitude of a version bump.

    Members are totally ordered. The ``PRE_*`` members are the
    prerelease-flavoured counterparts of the base increments and rank
    directly above them; ``PRERELEASE`` is a pure prerelease increment
    that does not touch the base version.
    """

    NONE = "None"
    PATCH = "Patch"
    PRE_PATCH = "PrePatch"
    MINOR = "Minor"
    PRE_MINOR = "PreMinor"
    MAJOR = "Major"
    PRE_MAJOR = "PreMajor"
    PRERELEASE = "PreRelease"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @property
    def base(self) -> Increment:
        """The Major/Minor/Patch component, or NONE for a pure prerelease."""
        return _BASES[self]

    @property
    def is_prerelease(self) -> bool:
        return self in (
            Increment.PRE_PATCH,
            Increment.PRE_MINOR,
            Increment.PRE_MAJOR,
            Increment.PRERELEASE,
        )

    def as_prerelease(self) -> Increment:
        """Promote a base increment to its prerelease-flavoured variant."""
        return _PRERELEASE_VARIANTS.get(self, self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Increment):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Increment):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Increment):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Increment):
            return NotImplemented
        return self.rank >= other.rank

    def __str__(self) -> str:
        return self.value


_RANKS = {increment: rank for rank, increment in enumerate(Increment)}

_BASES = {
    Increment.NONE: Increment.NONE,
    Increment.PATCH: Increment.PATCH,
    Increment.PRE_PATCH: Increment.PATCH,
    Increment.MINOR: Increment.MINOR,
    Increment.PRE_MINOR: Increment.MINOR,
    Increment.MAJOR: Increment.MAJOR,
    Increment.PRE_MAJOR: Increment.MAJOR,
    Increment.PRERELEASE: Increment.NONE,
}

_PRERELEASE_VARIANTS = {
    Increment.PATCH: Increment.PRE_PATCH,
    Increment.MINOR: Increment.PRE_MINOR,
    Increment.MAJOR: Increment.PRE_MAJOR,
}


@dataclass(frozen=True, slots=True)
class Version:
    """A semantic version with an optional literal prefix."""

    major: int = 0
    minor: int = 0
    patch: int = 0
    prerelease: str = ""
    metadata: str = ""
    prefix: str = ""

    ZERO: ClassVar[Version]

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string such as ``v1.2.3-beta.1+build.5``.

        Raises:
            VersionParseError: If the text does not match the grammar
        """
        match = _VERSION_RE.match(text.strip()) if text else None
        if match is None:
            raise VersionParseError(text)

        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=match.group("prerelease") or "",
            metadata=match.group("metadata") or "",
            prefix=match.group("prefix"),
        )

    @property
    def base(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    @property
    def is_zero(self) -> bool:
        return self.base == (0, 0, 0)

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    @property
    def raw(self) -> str:
        """Canonical text, including the prefix."""
        return f"{self.prefix}{self.semver}"

    @property
    def semver(self) -> str:
        """Canonical text without the prefix."""
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text = f"{text}-{self.prerelease}"
        if self.metadata:
            text = f"{text}+{self.metadata}"
        return text

    def bump(self, increment: Increment) -> Version:
        """Apply the base component of an increment.

        A base change clears any prerelease and metadata. Increments without
        a base component return the version unchanged.
        """
        match increment.base:
            case Increment.MAJOR:
                bumped = replace(self, major=self.major + 1, minor=0, patch=0)
            case Increment.MINOR:
                bumped = replace(self, minor=self.minor + 1, patch=0)
            case Increment.PATCH:
                bumped = replace(self, patch=self.patch + 1)
            case _:
                return self
        return replace(bumped, prerelease="", metadata="")

    def with_prerelease(self, prerelease: str) -> Version:
        return replace(self, prerelease=prerelease)

    def with_metadata(self, metadata: str) -> Version:
        return replace(self, metadata=metadata)

    def with_prefix(self, prefix: str) -> Version:
        return replace(self, prefix=prefix)

    def without_v_prefix(self) -> Version:
        """Drop a leading ``v`` from the prefix, if present."""
        if self.prefix.startswith("v"):
            return replace(self, prefix=self.prefix[1:])
        return self

    def __str__(self) -> str:
        return self.raw


Version.ZERO = Version()


def parse_version(text: str) -> Version:
    """Parse a version string.

    Args:
        text: Version text, optionally prefixed (e.g. ``v1.2.3``)

    Returns:
        Parsed Version

    Raises:
        VersionParseError: If the text is not a valid version
    """
    return Version.parse(text)


def validate_identifiers(text: str, component: str) -> None:
    """Check dot-separated SemVer identifiers.

    Raises:
        PrereleaseValidationError: If any identifier is empty, contains
            characters outside ``[0-9A-Za-z-]`` or is numeric with a
            leading zero
    """
    for identifier in text.split("."):
        if not identifier:
            raise PrereleaseValidationError(f"empty identifier in {component} {text!r}")
        if not _IDENTIFIER_RE.match(identifier):
            raise PrereleaseValidationError(
                f"invalid character in {component} identifier {identifier!r}"
            )
        leading_zero = identifier.isdigit() and len(identifier) > 1 and identifier.startswith("0")
        if component == "prerelease" and leading_zero:
            raise PrereleaseValidationError(
                f"numeric {component} identifier {identifier!r} has a leading zero"
            )


def parse_prerelease_argument(text: str) -> tuple[str, str]:
    """Split an explicit ``--prerelease`` value into prerelease and metadata.

    Accepts ``beta.1``, ``-beta.1`` and ``beta.1+build.7``.

    Returns:
        Tuple of (prerelease, metadata); metadata may be empty

    Raises:
        PrereleaseValidationError: If either component is malformed
    """
    value = text.strip().removeprefix("-")
    if not value:
        raise PrereleaseValidationError("prerelease cannot be empty")

    prerelease, _, metadata = value.partition("+")
    validate_identifiers(prerelease, "prerelease")
    if metadata or value.endswith("+"):
        validate_identifiers(metadata, "metadata")

    return prerelease, metadata
