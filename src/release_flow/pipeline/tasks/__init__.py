"""Workflow tasks."""

from __future__ import annotations

from release_flow.pipeline.tasks.bump import BumpTask
from release_flow.pipeline.tasks.changelog import ChangelogDiffTask, ChangelogTask
from release_flow.pipeline.tasks.git import FetchTagTask, GitCheckTask, GitCommitTask, GitTagTask
from release_flow.pipeline.tasks.gpg import GpgImportTask
from release_flow.pipeline.tasks.hooks import HookTask
from release_flow.pipeline.tasks.version import NextCommitTask, NextSemverTask

__all__ = [
    "BumpTask",
    "ChangelogDiffTask",
    "ChangelogTask",
    "FetchTagTask",
    "GitCheckTask",
    "GitCommitTask",
    "GitTagTask",
    "GpgImportTask",
    "HookTask",
    "NextCommitTask",
    "NextSemverTask",
]
