"""Repository tasks: precondition checks, tag fetching, committing and tagging."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from release_flow.exceptions import GitError
from release_flow.pipeline.task import Task

if TYPE_CHECKING:
    from release_flow.pipeline.context import Context

logger = structlog.get_logger(__name__)


class GitCheckTask(Task):
    """Ensures the working directory is a repository fit for releasing."""

    def describe(self) -> str:
        return "checking git"

    def skip(self, ctx: Context) -> bool:
        return False

    def run(self, ctx: Context) -> None:
        repo = ctx.repo
        if not repo.is_repository():
            raise GitError(["rev-parse"], stderr=f"{ctx.root} is not a git repository")

        if not ctx.ignore_detached and repo.is_detached():
            raise GitError(
                ["symbolic-ref", "HEAD"],
                stderr="HEAD is detached; check out a branch or pass --ignore-detached",
            )

        if not ctx.ignore_shallow and repo.is_shallow():
            raise GitError(
                ["rev-parse", "--is-shallow-repository"],
                stderr="shallow clone detected; fetch full history or pass --ignore-shallow",
            )


class FetchTagTask(Task):
    """Fetches every tag from the remote so the latest version is known."""

    def describe(self) -> str:
        return "fetching all tags"

    def skip(self, ctx: Context) -> bool:
        return not ctx.fetch_tags

    def run(self, ctx: Context) -> None:
        if ctx.dry_run:
            logger.info("would fetch all tags from remote")
            return
        ctx.repo.fetch_tags()
        logger.info("fetched all tags from remote")


class GitCommitTask(Task):
    """Stages files modified during the run, commits and pushes them."""

    def describe(self) -> str:
        return "committing changes"

    def skip(self, ctx: Context) -> bool:
        return ctx.no_version_changed or ctx.dry_run or not ctx.modified_files

    def run(self, ctx: Context) -> None:
        if ctx.no_stage:
            logger.info("skipping staging of modified files", files=len(ctx.modified_files))
            return

        ctx.repo.stage(ctx.modified_files)
        logger.debug("staged files", files=[str(p) for p in ctx.modified_files])

        ctx.repo.commit(
            ctx.commit.message,
            author_name=ctx.commit.author_name,
            author_email=ctx.commit.author_email,
        )
        logger.info("committed changes", message=ctx.commit.message)

        if ctx.no_push:
            logger.info("skipping push of commit")
            return
        ctx.repo.push(options=ctx.config.git.push_options)
        logger.info("pushed commit to remote")


class GitTagTask(Task):
    """Tags the repository with the next version and pushes the tag."""

    def describe(self) -> str:
        return "tagging repository"

    def skip(self, ctx: Context) -> bool:
        return ctx.no_version_changed

    def run(self, ctx: Context) -> None:
        tag = ctx.next_version.raw
        if ctx.dry_run:
            logger.info("would tag repository", tag=tag)
            return

        message = tag if ctx.config.annotated_tags else None
        ctx.repo.tag(tag, message)
        logger.info("tagged repository", tag=tag, annotated=message is not None)

        if ctx.no_push:
            logger.info("skipping push of tag", tag=tag)
            return
        ctx.repo.push(ref=tag, options=ctx.config.git.push_options)
        logger.info("pushed tag to remote", tag=tag)
