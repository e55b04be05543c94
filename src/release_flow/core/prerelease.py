"""Pre-release identifier evolution.

Pre-release identifiers advance along the hierarchy alpha -> beta -> rc.
Staying on the same identifier increments its counter, moving to another
identifier restarts the counter at 1, and so does any change to the base
``MAJOR.MINOR.PATCH`` triple. Identifiers outside the hierarchy are
unordered: they only increment when repeated.
"""

from __future__ import annotations

import re

DEFAULT_PRERELEASE_TYPE = "alpha"

PRERELEASE_HIERARCHY = {
    "alpha": 1,
    "beta": 2,
    "rc": 3,
}

# Tried in order: alpha.1, alpha-1, alpha1, alpha
_PRERELEASE_PATTERNS = (
    re.compile(r"^([a-zA-Z]+)\.(\d+)$"),
    re.compile(r"^([a-zA-Z]+)-(\d+)$"),
    re.compile(r"^([a-zA-Z]+)(\d+)$"),
    re.compile(r"^([a-zA-Z]+)$"),
)


def parse_prerelease(prerelease: str) -> tuple[str, int]:
    """Split a pre-release identifier into its type and counter.

    A missing counter defaults to 1. Strings matching none of the known
    shapes are treated as a bare type with counter 1.

    >>> parse_prerelease("beta.2")
    ('beta', 2)
    >>> parse_prerelease("RC")
    ('rc', 1)
    """
    for pattern in _PRERELEASE_PATTERNS:
        match = pattern.match(prerelease)
        if match is None:
            continue
        number = int(match.group(2)) if match.lastindex and match.lastindex > 1 else 1
        return match.group(1).lower(), number

    return prerelease.lower(), 1


def prerelease_type(prerelease: str) -> str:
    """The type part of a pre-release identifier, e.g. ``beta`` for ``beta.3``."""
    return parse_prerelease(prerelease)[0] if prerelease else ""


def evolve_prerelease(current: str, base_changed: bool, target_type: str) -> str:
    """Compute the next pre-release identifier.

    Args:
        current: The current pre-release identifier (may be empty)
        base_changed: Whether the ``MAJOR.MINOR.PATCH`` triple changed
        target_type: Requested identifier type (alpha, beta, rc, ...)

    Returns:
        The next identifier, always shaped ``<type>.<positive int>``
    """
    target = (target_type or DEFAULT_PRERELEASE_TYPE).lower()

    if not current or base_changed:
        return f"{target}.1"

    current_type, current_number = parse_prerelease(current)
    current_level = PRERELEASE_HIERARCHY.get(current_type, 0)
    target_level = PRERELEASE_HIERARCHY.get(target, 0)

    if target_level == 0:
        number = current_number + 1 if current_type == target else 1
    elif current_level == 0 or target_level != current_level:
        number = 1
    else:
        number = current_number + 1

    return f"{target}.{max(number, 1)}"
