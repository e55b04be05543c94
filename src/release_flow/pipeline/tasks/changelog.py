"""Changelog tasks."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from release_flow.core.calculator import TAG_GLOB
from release_flow.core.changelog import (
    ChangelogFormat,
    format_entry,
    prepend_entry,
    write_changelog,
)
from release_flow.core.version import Version
from release_flow.pipeline.task import Task
from release_flow.vcs.git import HEAD

if TYPE_CHECKING:
    from pathlib import Path

    from release_flow.pipeline.context import Context

logger = structlog.get_logger(__name__)


def _is_prerelease_tag(tag: str) -> bool:
    return Version.parse(tag).is_prerelease


def previous_release_tag(tags: Sequence[str], skip_prerelease: bool = False) -> str | None:
    """First tag of ``tags`` (newest first), ignoring prereleases if asked."""
    for tag in tags:
        if not skip_prerelease or not _is_prerelease_tag(tag):
            return tag
    return None


def resolve_latest_release(ctx: Context) -> None:
    """Point the Context at the most recent tag for an after-the-fact changelog.

    The newest tag becomes the next version and the tag before it the
    current one. A repository without tags has nothing to log. When the
    whole history is requested there is no previous tag.
    """
    tags = ctx.repo.tags(TAG_GLOB)
    if not tags:
        logger.warning("repository not tagged with version, no changelog to generate")
        ctx.no_version_changed = True
        return

    ctx.next_version = Version.parse(tags[0])
    if ctx.changelog.all:
        ctx.latest_tag = None
    else:
        ctx.latest_tag = previous_release_tag(tags[1:], ctx.changelog.skip_prerelease)
    ctx.current_version = Version.parse(ctx.latest_tag) if ctx.latest_tag else Version.ZERO
    ctx.changelog.pre_tag = False
    logger.debug("resolved latest release", tag=tags[0], previous=ctx.latest_tag)


def _format(ctx: Context) -> ChangelogFormat:
    options = ctx.changelog
    return ChangelogFormat(
        include=options.include,
        exclude=options.exclude,
        sort=options.sort,
        multiline=options.multiline,
        trim_header=options.trim_header,
    )


def build_entry(ctx: Context) -> str:
    """Render the entry for ``ctx.next_version`` from the matching commit range."""
    options = ctx.changelog
    if options.pre_tag:
        head = HEAD
        since = ctx.latest_tag
        if since and options.skip_prerelease and _is_prerelease_tag(since):
            since = previous_release_tag(ctx.repo.tags(TAG_GLOB), skip_prerelease=True)
    else:
        head = ctx.next_version.raw
        since = ctx.latest_tag

    commits = ctx.repo.log(head=head, since=since)
    return format_entry(ctx.next_version, commits, _format(ctx))


def build_history(ctx: Context) -> list[str]:
    """Render one entry per tag, newest first, covering the whole history.

    Each entry spans the commits between a tag and the tag before it;
    the oldest tag takes everything up to it. Entries are dated after the
    newest commit of their range. Prerelease tags are folded into the
    next release when ``skip_prerelease`` is set.
    """
    options = ctx.changelog
    fmt = _format(ctx)
    tags = ctx.repo.tags(TAG_GLOB)

    entries = []
    for i, tag in enumerate(tags):
        if options.skip_prerelease and _is_prerelease_tag(tag):
            continue
        since = previous_release_tag(tags[i + 1 :], options.skip_prerelease)
        commits = ctx.repo.log(head=tag, since=since)
        released = commits[0].date.date() if commits and commits[0].date else None
        entry = format_entry(Version.parse(tag), commits, fmt, on=released)
        if entry:
            entries.append(entry)

    logger.debug("built changelog history", tags=len(tags), entries=len(entries))
    return entries


def _no_release(ctx: Context) -> bool:
    return ctx.no_version_changed or ctx.next_version is None


def _changelog_path(ctx: Context) -> Path:
    path = ctx.changelog.path
    return path if path.is_absolute() else ctx.root / path


class ChangelogTask(Task):
    """Prepends an entry for the next version to the changelog file.

    With ``all`` set the file is rewritten from the entire tag history.
    """

    def describe(self) -> str:
        return "generating changelog"

    def skip(self, ctx: Context) -> bool:
        if ctx.skip_changelog or _no_release(ctx):
            return True
        if ctx.changelog.all:
            return False
        return ctx.changelog.skip_prerelease and ctx.next_version.is_prerelease

    def run(self, ctx: Context) -> None:
        if ctx.changelog.all:
            self._regenerate(ctx)
            return

        entry = build_entry(ctx)
        if not entry:
            logger.warning("no commits selected for changelog entry", version=ctx.next_version.raw)
            return

        if ctx.dry_run:
            logger.info("would write changelog entry", file=str(ctx.changelog.path))
            return

        path = _changelog_path(ctx)
        prepend_entry(path, entry)
        ctx.record_modified(path)
        logger.info("updated changelog", file=str(ctx.changelog.path), version=ctx.next_version.raw)

    def _regenerate(self, ctx: Context) -> None:
        entries = build_history(ctx)
        if not entries:
            logger.warning("no commits selected for any changelog entry")
            return

        if ctx.dry_run:
            logger.info(
                "would regenerate changelog", file=str(ctx.changelog.path), entries=len(entries)
            )
            return

        path = _changelog_path(ctx)
        write_changelog(path, entries)
        ctx.record_modified(path)
        logger.info("regenerated changelog", file=str(ctx.changelog.path), entries=len(entries))


class ChangelogDiffTask(Task):
    """Prints the changelog entry instead of writing it."""

    def describe(self) -> str:
        return "changelog diff"

    def skip(self, ctx: Context) -> bool:
        return _no_release(ctx)

    def run(self, ctx: Context) -> None:
        if ctx.changelog.all:
            entries = build_history(ctx)
        else:
            entry = build_entry(ctx)
            entries = [entry] if entry else []

        if not entries:
            logger.warning("no commits selected for changelog entry", version=ctx.next_version.raw)
            return
        for entry in entries:
            ctx.out.print(entry, markup=False, highlight=False)
