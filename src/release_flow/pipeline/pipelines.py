"""Task sequences for each command."""

from __future__ import annotations

from release_flow.pipeline.task import Task
from release_flow.pipeline.tasks import hooks
from release_flow.pipeline.tasks.bump import BumpTask
from release_flow.pipeline.tasks.changelog import ChangelogDiffTask, ChangelogTask
from release_flow.pipeline.tasks.git import FetchTagTask, GitCheckTask, GitCommitTask, GitTagTask
from release_flow.pipeline.tasks.gpg import GpgImportTask
from release_flow.pipeline.tasks.version import NextCommitTask, NextSemverTask

BUMP: tuple[Task, ...] = (
    GitCheckTask(),
    hooks.BEFORE,
    GpgImportTask(),
    NextSemverTask(),
    NextCommitTask(),
    hooks.BEFORE_BUMP,
    BumpTask(),
    hooks.AFTER_BUMP,
    GitCommitTask(),
    hooks.AFTER,
)

CHANGELOG: tuple[Task, ...] = (
    GitCheckTask(),
    hooks.BEFORE,
    NextCommitTask(),
    hooks.BEFORE_CHANGELOG,
    ChangelogTask(),
    hooks.AFTER_CHANGELOG,
    GitCommitTask(),
    hooks.AFTER,
)

CHANGELOG_DIFF: tuple[Task, ...] = (
    GitCheckTask(),
    hooks.BEFORE,
    ChangelogDiffTask(),
    hooks.AFTER,
)

RELEASE: tuple[Task, ...] = (
    GitCheckTask(),
    hooks.BEFORE,
    GpgImportTask(),
    FetchTagTask(),
    NextSemverTask(),
    NextCommitTask(),
    hooks.BEFORE_BUMP,
    BumpTask(),
    hooks.AFTER_BUMP,
    hooks.BEFORE_CHANGELOG,
    ChangelogTask(),
    hooks.AFTER_CHANGELOG,
    GitCommitTask(),
    hooks.BEFORE_TAG,
    GitTagTask(),
    hooks.AFTER_TAG,
    hooks.AFTER,
)

TAG: tuple[Task, ...] = (
    GitCheckTask(),
    hooks.BEFORE,
    GpgImportTask(),
    FetchTagTask(),
    NextSemverTask(),
    hooks.BEFORE_TAG,
    GitTagTask(),
    hooks.AFTER_TAG,
    hooks.AFTER,
)

# Only report whether a release would happen
RELEASE_CHECK: tuple[Task, ...] = (NextSemverTask(),)
TAG_CHECK: tuple[Task, ...] = (NextSemverTask(),)
