"""Hook tasks: configured shell commands run at fixed workflow stages."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from release_flow.pipeline.task import Task

if TYPE_CHECKING:
    from release_flow.pipeline.context import Context


def _never(ctx: Context) -> bool:
    return False


def _bump_gate(ctx: Context) -> bool:
    return ctx.skip_bumps or ctx.no_version_changed


def _changelog_gate(ctx: Context) -> bool:
    return ctx.skip_changelog or ctx.no_version_changed


def _tag_gate(ctx: Context) -> bool:
    return ctx.no_version_changed


@dataclass(frozen=True)
class HookTask(Task):
    """Runs the commands configured for one hook stage.

    Attributes:
        stage: Field name on HooksConfig holding the commands
        label: Description shown in logs and errors
        gate: Extra skip condition on top of "no commands configured"
    """

    stage: str
    label: str
    gate: Callable[[Context], bool] = _never

    def describe(self) -> str:
        return self.label

    def commands(self, ctx: Context) -> list[str]:
        return getattr(ctx.config.hooks, self.stage)

    def skip(self, ctx: Context) -> bool:
        return not self.commands(ctx) or self.gate(ctx)

    def run(self, ctx: Context) -> None:
        ctx.hooks.execute(self.commands(ctx), ctx.hook_options())


BEFORE = HookTask("before", "before hooks")
BEFORE_BUMP = HookTask("before_bump", "before bumping files", _bump_gate)
AFTER_BUMP = HookTask("after_bump", "after bumping files", _bump_gate)
BEFORE_CHANGELOG = HookTask("before_changelog", "before generating changelog", _changelog_gate)
AFTER_CHANGELOG = HookTask("after_changelog", "after generating changelog", _changelog_gate)
BEFORE_TAG = HookTask("before_tag", "before tagging repository", _tag_gate)
AFTER_TAG = HookTask("after_tag", "after tagging repository", _tag_gate)
AFTER = HookTask("after", "after hooks")
