"""Version calculation and release commit details."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from release_flow.core.calculator import VersionCalculator
from release_flow.pipeline.task import Task

if TYPE_CHECKING:
    from release_flow.pipeline.context import Context

logger = structlog.get_logger(__name__)


class NextSemverTask(Task):
    """Works out the current and next version and records them on the Context."""

    def describe(self) -> str:
        return "next semantic version"

    def skip(self, ctx: Context) -> bool:
        return False

    def run(self, ctx: Context) -> None:
        calculation = VersionCalculator(ctx.repo).calculate(ctx.calculation_options())

        ctx.current_version = calculation.current_version
        ctx.latest_tag = calculation.tag
        ctx.increment = calculation.increment
        ctx.next_version = calculation.next_version
        ctx.no_version_changed = calculation.no_version_changed


class NextCommitTask(Task):
    """Resolves the author and message of the release commit."""

    def describe(self) -> str:
        return "building next commit"

    def skip(self, ctx: Context) -> bool:
        return ctx.no_version_changed

    def run(self, ctx: Context) -> None:
        config = ctx.config.commit
        commit = ctx.commit

        # An identity set earlier (imported gpg key) takes precedence
        commit.author_name = (
            commit.author_name or config.author_name or ctx.repo.config_get("user.name")
        )
        commit.author_email = (
            commit.author_email or config.author_email or ctx.repo.config_get("user.email")
        )

        version = ctx.next_version.raw if ctx.next_version is not None else ""
        commit.message = config.message.replace("{version}", version)

        logger.debug(
            "prepared release commit",
            author=commit.author_name,
            email=commit.author_email,
            message=commit.message,
        )
