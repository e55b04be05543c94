"""Version bumping within project files.

Files are patched with targeted regex replacements rather than parsed and
rewritten, so formatting and comments survive untouched.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog

from release_flow.exceptions import ProjectError, VersionNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

logger = structlog.get_logger(__name__)

VERSION_TOKEN = "{version}"

# Any version the calculator can produce, with or without a "v" prefix
SEMVER_PATTERN = r"v?\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?"

# Tables holding the project version, in lookup order
PYPROJECT_SECTIONS = ("project", "tool.poetry")

_VERSION_KEY = re.compile(r'^(version\s*=\s*)["\'][^"\']+["\']', re.MULTILINE)


def _read(path: Path) -> str:
    if not path.is_file():
        raise ProjectError(f"File to bump not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ProjectError(f"Cannot read {path}: {e}") from e


def _write(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ProjectError(f"Cannot write {path}: {e}") from e


def compile_bump_pattern(regex: str) -> re.Pattern[str]:
    """Turn a user regex holding ``{version}`` into a compiled pattern.

    Raises:
        ProjectError: If the token is missing or the result is not a valid regex
    """
    if VERSION_TOKEN not in regex:
        raise ProjectError(f"Bump regex {regex!r} does not contain {VERSION_TOKEN}")
    try:
        return re.compile(regex.replace(VERSION_TOKEN, f"(?P<version>{SEMVER_PATTERN})", 1))
    except re.error as e:
        raise ProjectError(f"Invalid bump regex {regex!r}: {e}") from e


def bump_file(path: Path, regex: str, new_version: str, count: int = 0) -> bool:
    """Replace the version matched by ``regex`` within ``path``.

    Args:
        path: File to patch
        regex: Regex with a ``{version}`` token marking the version text
        new_version: Version written in place of each match
        count: Maximum number of replacements; 0 replaces every match

    Returns:
        Whether the file content changed

    Raises:
        VersionNotFoundError: If ``regex`` matches nothing
        ProjectError: If the file cannot be read or written
    """
    pattern = compile_bump_pattern(regex)
    content = _read(path)

    def replace(match: re.Match[str]) -> str:
        start, end = match.span("version")
        offset = match.start()
        text = match.group(0)
        return text[: start - offset] + new_version + text[end - offset :]

    new_content, replaced = pattern.subn(replace, content, count=count)
    if replaced == 0:
        raise VersionNotFoundError(f"Could not find version matching {regex!r} in {path}")

    if new_content == content:
        logger.debug("version already up to date", file=str(path), version=new_version)
        return False

    _write(path, new_content)
    logger.debug("bumped file", file=str(path), version=new_version, replacements=replaced)
    return True


def _section_body(content: str, section: str) -> re.Match[str] | None:
    # The table header up to the next table or end of file
    header = re.escape(f"[{section}]")
    return re.search(rf"^{header}.*?(?=^\[|\Z)", content, re.MULTILINE | re.DOTALL)


def update_pyproject_version(path: Path, new_version: str) -> bool:
    """Set the ``[project]`` or ``[tool.poetry]`` version of a pyproject.toml.

    Returns:
        Whether the file content changed

    Raises:
        VersionNotFoundError: If neither table declares a version
        ProjectError: If the file cannot be read or written
    """
    content = _read(path)

    for section in PYPROJECT_SECTIONS:
        body = _section_body(content, section)
        if body is None or not _VERSION_KEY.search(body.group(0)):
            continue

        patched = _VERSION_KEY.sub(rf'\g<1>"{new_version}"', body.group(0), count=1)
        new_content = content[: body.start()] + patched + content[body.end() :]
        if new_content == content:
            logger.debug("version already up to date", file=str(path), version=new_version)
            return False

        _write(path, new_content)
        logger.debug("bumped pyproject", file=str(path), section=section, version=new_version)
        return True

    raise VersionNotFoundError(
        f"Could not find version to update in {path}. "
        "Expected [project].version or [tool.poetry].version."
    )
