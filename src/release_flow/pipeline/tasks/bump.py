"""Bumping the version held in project files."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from release_flow.pipeline.task import Task
from release_flow.project.files import bump_file, update_pyproject_version

if TYPE_CHECKING:
    from release_flow.pipeline.context import Context

logger = structlog.get_logger(__name__)


class BumpTask(Task):
    """Writes the next version into every configured file."""

    def describe(self) -> str:
        return "bumping files"

    def skip(self, ctx: Context) -> bool:
        return ctx.skip_bumps or ctx.no_version_changed or not ctx.config.bumps

    def run(self, ctx: Context) -> None:
        for bump in ctx.config.bumps:
            path = bump.file if bump.file.is_absolute() else ctx.root / bump.file
            # pyproject versions never carry a prefix
            use_semver = bump.semver or bump.regex is None
            version = ctx.next_version.semver if use_semver else ctx.next_version.raw

            if ctx.dry_run:
                logger.info("would bump file", file=str(bump.file), version=version)
                continue

            if bump.regex is None:
                changed = update_pyproject_version(path, version)
            else:
                changed = bump_file(path, bump.regex, version, count=bump.count)

            if changed:
                ctx.record_modified(path)
                logger.info("bumped file", file=str(bump.file), version=version)
            else:
                logger.info("file already at version", file=str(bump.file), version=version)
