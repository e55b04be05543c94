"""Changelog entry generation.

An entry lists the commits of one release grouped by conventional commit
type, breaking changes first. Entries are prepended to the changelog file
so the newest release is always on top.
"""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from release_flow.core.commits import (
    ParseOptions,
    find_type_start,
    get_breaking_changes,
    group_commits_by_type,
    parse_commits,
)
from release_flow.exceptions import ChangelogError

if TYPE_CHECKING:
    from pathlib import Path

    from release_flow.core.commits import ParsedCommit
    from release_flow.core.version import Version
    from release_flow.vcs.git import Commit

CHANGELOG_HEADER = (
    "# Changelog\n\nAll notable changes to this project will be documented in this file.\n"
)

SORT_ASC = "asc"
SORT_DESC = "desc"

TYPE_LABELS = {
    "feat": "### ✨ Features",
    "fix": "### 🐛 Bug Fixes",
    "perf": "### ⚡ Performance",
    "security": "### 🔒 Security",
    "docs": "### 📚 Documentation",
    "refactor": "### ♻️ Refactoring",
    "test": "### 🧪 Tests",
    "build": "### 📦 Build",
    "ci": "### 🔧 CI",
    "style": "### 💄 Style",
    "chore": "### 🔨 Chores",
    "other": "### 📝 Other",
}

BREAKING_LABEL = "### ⚠️ Breaking Changes"

_ENTRY_HEADING = re.compile(r"^## ", re.MULTILINE)


@dataclass(frozen=True, slots=True)
class ChangelogFormat:
    """How commits are selected and rendered within an entry."""

    include: Sequence[str] = field(default_factory=tuple)
    exclude: Sequence[str] = field(default_factory=tuple)
    sort: str = ""
    multiline: bool = False
    trim_header: bool = False


def select_commits(
    commits: Sequence[Commit],
    include: Sequence[str] = (),
    exclude: Sequence[str] = (),
) -> list[Commit]:
    """Filter commits by regexes searched within the full message.

    With ``include`` patterns only commits matching at least one are kept;
    ``exclude`` then drops any commit matching one of its patterns.
    """
    included = [re.compile(p) for p in include]
    excluded = [re.compile(p) for p in exclude]

    selected = []
    for commit in commits:
        if included and not any(p.search(commit.message) for p in included):
            continue
        if any(p.search(commit.message) for p in excluded):
            continue
        selected.append(commit)
    return selected


def sort_commits(commits: Sequence[Commit], sort: str = "") -> list[Commit]:
    """Order commits for display.

    ``commits`` come newest first from the log; ``asc`` reverses them.
    """
    if sort == SORT_ASC:
        return list(reversed(commits))
    return list(commits)


def _body(pc: ParsedCommit, trim_header: bool) -> list[str]:
    message = pc.message
    if trim_header and pc.is_conventional:
        message = message[find_type_start(message) :]
    return [line.rstrip() for line in message.split("\n")[1:] if line.strip()]


def _format_line(pc: ParsedCommit, fmt: ChangelogFormat) -> list[str]:
    scope = f"**{pc.scope}:** " if pc.scope else ""
    sha = f" (`{pc.sha[:7]}`)" if pc.sha else ""
    lines = [f"- {scope}{pc.description}{sha}"]
    if fmt.multiline:
        lines.extend(f"  {line}" for line in _body(pc, fmt.trim_header))
    return lines


def format_entry(
    version: Version,
    commits: Sequence[Commit],
    fmt: ChangelogFormat | None = None,
    *,
    on: date | None = None,
) -> str:
    """Render the changelog entry for ``version``.

    Args:
        version: Version the entry is written for
        commits: Commits of the release, newest first
        fmt: Selection and rendering options
        on: Release date (defaults to today, UTC)

    Returns:
        Markdown entry, or an empty string when no commit is selected

    Raises:
        ChangelogError: If an include or exclude pattern is not a valid regex
    """
    fmt = fmt or ChangelogFormat()
    try:
        selected = select_commits(commits, fmt.include, fmt.exclude)
    except re.error as e:
        raise ChangelogError(f"invalid commit filter pattern: {e}") from e

    if not selected:
        return ""

    ordered = sort_commits(selected, fmt.sort)
    parsed = parse_commits(ordered, ParseOptions(trim_header=fmt.trim_header))
    released = on or datetime.now(UTC).date()

    lines = [f"## [{version.raw}] - {released.isoformat()}", ""]

    breaking = get_breaking_changes(parsed)
    if breaking:
        lines.append(BREAKING_LABEL)
        lines.append("")
        for pc in breaking:
            lines.extend(_format_line(pc, fmt))
        lines.append("")

    # Unlabelled types are listed with the non-conventional commits
    sections: dict[str, list[ParsedCommit]] = defaultdict(list)
    grouped = group_commits_by_type([pc for pc in parsed if not pc.is_breaking])
    for commit_type, pcs in grouped.items():
        sections[commit_type if commit_type in TYPE_LABELS else "other"].extend(pcs)

    for commit_type, label in TYPE_LABELS.items():
        commits_of_type = sections.get(commit_type)
        if commits_of_type:
            lines.append(label)
            lines.append("")
            for pc in commits_of_type:
                lines.extend(_format_line(pc, fmt))
            lines.append("")

    return "\n".join(lines)


def prepend_entry(path: Path, entry: str) -> None:
    """Insert ``entry`` above the newest entry of the changelog at ``path``.

    A missing file is created with a standard header.

    Raises:
        ChangelogError: If the file cannot be read or written
    """
    try:
        existing = path.read_text(encoding="utf-8") if path.exists() else CHANGELOG_HEADER
    except OSError as e:
        raise ChangelogError(f"cannot read {path}: {e}") from e

    entry = entry.rstrip("\n") + "\n"
    match = _ENTRY_HEADING.search(existing)
    if match:
        content = existing[: match.start()] + entry + "\n" + existing[match.start() :]
    else:
        content = existing.rstrip("\n") + "\n\n" + entry

    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ChangelogError(f"cannot write {path}: {e}") from e


def write_changelog(path: Path, entries: Sequence[str]) -> None:
    """Replace the changelog at ``path`` with ``entries``, newest first.

    Raises:
        ChangelogError: If the file cannot be written
    """
    body = "\n".join(entry.rstrip("\n") + "\n" for entry in entries)
    content = CHANGELOG_HEADER + "\n" + body if body else CHANGELOG_HEADER

    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ChangelogError(f"cannot write {path}: {e}") from e
