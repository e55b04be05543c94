"""Tests for the task executor, hook tasks and pipeline composition."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest
from structlog.testing import capture_logs

from release_flow.config.models import HooksConfig, ReleaseFlowConfig
from release_flow.core.version import Version
from release_flow.exceptions import GitError, TaskError
from release_flow.pipeline import pipelines
from release_flow.pipeline.context import Context
from release_flow.pipeline.task import Task, execute
from release_flow.pipeline.tasks import hooks
from release_flow.pipeline.tasks.bump import BumpTask
from release_flow.pipeline.tasks.changelog import ChangelogDiffTask, ChangelogTask
from release_flow.pipeline.tasks.git import GitCheckTask, GitTagTask
from release_flow.pipeline.tasks.version import NextSemverTask


class RecordingTask(Task):
    def __init__(self, name: str, calls: list[str], *, skipped: bool = False, error=None):
        self.name = name
        self.calls = calls
        self.skipped = skipped
        self.error = error

    def describe(self) -> str:
        return self.name

    def skip(self, ctx: Context) -> bool:
        return self.skipped

    def run(self, ctx: Context) -> None:
        self.calls.append(self.name)
        if self.error is not None:
            raise self.error


class TestExecute:
    """Tests for execute()."""

    def test_runs_in_order(self, make_context: Callable[..., Context]):
        calls: list[str] = []
        pipeline = [RecordingTask("one", calls), RecordingTask("two", calls)]

        execute(make_context(), pipeline)

        assert calls == ["one", "two"]

    def test_skipped_task_not_run(self, make_context: Callable[..., Context]):
        calls: list[str] = []
        pipeline = [RecordingTask("one", calls, skipped=True), RecordingTask("two", calls)]

        with capture_logs() as logs:
            execute(make_context(), pipeline)

        assert calls == ["two"]
        assert {"event": "skipping task", "task": "one", "log_level": "debug"} in logs

    def test_failure_stops_run(self, make_context: Callable[..., Context]):
        """The first failure aborts; later tasks never run."""
        calls: list[str] = []
        pipeline = [
            RecordingTask("one", calls, error=RuntimeError("boom")),
            RecordingTask("two", calls),
        ]

        with pytest.raises(TaskError) as exc_info:
            execute(make_context(), pipeline)

        assert calls == ["one"]
        assert exc_info.value.task == "one"
        assert str(exc_info.value) == "one: boom"
        assert isinstance(exc_info.value.cause, RuntimeError)

    def test_task_error_not_rewrapped(self, make_context: Callable[..., Context]):
        inner = TaskError("inner", ValueError("bad"))
        pipeline = [RecordingTask("outer", [], error=inner)]

        with pytest.raises(TaskError) as exc_info:
            execute(make_context(), pipeline)

        assert exc_info.value is inner

    def test_empty_pipeline(self, make_context: Callable[..., Context]):
        execute(make_context(), [])


class TestHookTask:
    """Tests for HookTask gating and execution."""

    def _config(self, **hooks_config: list[str]) -> ReleaseFlowConfig:
        return ReleaseFlowConfig(hooks=HooksConfig(**hooks_config))

    def test_skipped_without_commands(self, make_context: Callable[..., Context]):
        assert hooks.BEFORE.skip(make_context())

    def test_runs_commands_with_env(
        self, make_context: Callable[..., Context], mock_hooks: MagicMock
    ):
        config = ReleaseFlowConfig(hooks=HooksConfig(before=["make lint"]), env={"CI": "1"})
        ctx = make_context(config, next_version=Version.parse("v1.1.0"), dry_run=True)

        assert not hooks.BEFORE.skip(ctx)
        hooks.BEFORE.run(ctx)

        commands, options = mock_hooks.execute.call_args.args
        assert commands == ["make lint"]
        assert options.dry_run
        assert options.env == {"CI": "1", "CURRENT_VERSION": "0.0.0", "NEXT_VERSION": "v1.1.0"}

    @pytest.mark.parametrize("hook", [hooks.BEFORE_BUMP, hooks.AFTER_BUMP])
    def test_bump_hooks_gated(self, make_context: Callable[..., Context], hook: hooks.HookTask):
        config = self._config(before_bump=["echo a"], after_bump=["echo b"])

        assert not hook.skip(make_context(config))
        assert hook.skip(make_context(config, skip_bumps=True))
        assert hook.skip(make_context(config, no_version_changed=True))

    @pytest.mark.parametrize("hook", [hooks.BEFORE_CHANGELOG, hooks.AFTER_CHANGELOG])
    def test_changelog_hooks_gated(
        self, make_context: Callable[..., Context], hook: hooks.HookTask
    ):
        config = self._config(before_changelog=["echo a"], after_changelog=["echo b"])

        assert not hook.skip(make_context(config))
        assert hook.skip(make_context(config, skip_changelog=True))
        assert hook.skip(make_context(config, no_version_changed=True))

    @pytest.mark.parametrize("hook", [hooks.BEFORE_TAG, hooks.AFTER_TAG])
    def test_tag_hooks_gated(self, make_context: Callable[..., Context], hook: hooks.HookTask):
        config = self._config(before_tag=["echo a"], after_tag=["echo b"])

        assert not hook.skip(make_context(config))
        assert hook.skip(make_context(config, no_version_changed=True))

    def test_before_and_after_always_run(self, make_context: Callable[..., Context]):
        config = self._config(before=["echo a"], after=["echo b"])
        ctx = make_context(config, no_version_changed=True, skip_bumps=True)

        assert not hooks.BEFORE.skip(ctx)
        assert not hooks.AFTER.skip(ctx)

    def test_hook_failure_is_labelled(
        self, make_context: Callable[..., Context], mock_hooks: MagicMock
    ):
        mock_hooks.execute.side_effect = GitError(["status"])
        ctx = make_context(self._config(before_tag=["false"]))

        with pytest.raises(TaskError, match="^before tagging repository: "):
            execute(ctx, [hooks.BEFORE_TAG])


def _types(pipeline: tuple[Task, ...]) -> list[type]:
    return [type(task) for task in pipeline]


class TestPipelines:
    """Tests for the per-command task sequences."""

    def test_every_pipeline_starts_with_checks(self):
        for pipeline in (
            pipelines.BUMP,
            pipelines.CHANGELOG,
            pipelines.CHANGELOG_DIFF,
            pipelines.RELEASE,
            pipelines.TAG,
        ):
            assert isinstance(pipeline[0], GitCheckTask)
            assert pipeline[1] is hooks.BEFORE
            assert pipeline[-1] is hooks.AFTER

    def test_release_order(self):
        labels = [task.describe() for task in pipelines.RELEASE]

        assert labels == [
            "checking git",
            "before hooks",
            "importing gpg key",
            "fetching all tags",
            "next semantic version",
            "building next commit",
            "before bumping files",
            "bumping files",
            "after bumping files",
            "before generating changelog",
            "generating changelog",
            "after generating changelog",
            "committing changes",
            "before tagging repository",
            "tagging repository",
            "after tagging repository",
            "after hooks",
        ]

    def test_tag_does_not_bump_or_commit(self):
        types = _types(pipelines.TAG)

        assert BumpTask not in types
        assert ChangelogTask not in types
        assert GitTagTask in types

    def test_bump_does_not_tag(self):
        types = _types(pipelines.BUMP)

        assert BumpTask in types
        assert GitTagTask not in types

    def test_changelog_diff_only_prints(self):
        assert ChangelogDiffTask in _types(pipelines.CHANGELOG_DIFF)
        assert ChangelogTask not in _types(pipelines.CHANGELOG_DIFF)

    def test_check_pipelines_only_calculate(self):
        assert _types(pipelines.RELEASE_CHECK) == [NextSemverTask]
        assert _types(pipelines.TAG_CHECK) == [NextSemverTask]
