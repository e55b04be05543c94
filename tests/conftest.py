"""Shared fixtures for release-flow tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from release_flow.config.models import ReleaseFlowConfig
from release_flow.hooks import HookExecutor
from release_flow.pipeline.context import Context
from release_flow.vcs.git import Commit, GitRepository
from tests.helpers import make_commit

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def feat_commit() -> Commit:
    return make_commit("feat: add new feature", sha="feat0001")


@pytest.fixture
def fix_commit() -> Commit:
    return make_commit("fix: resolve bug", sha="fix00001")


@pytest.fixture
def breaking_commit() -> Commit:
    return make_commit("feat!: redesign API", sha="break001")


@pytest.fixture
def sample_commits(feat_commit: Commit, fix_commit: Commit) -> list[Commit]:
    return [
        feat_commit,
        fix_commit,
        make_commit("docs: update readme", sha="docs0001"),
        make_commit("chore: tidy up", sha="chore001"),
    ]


@pytest.fixture
def mock_repo(tmp_path: Path) -> MagicMock:
    """A GitRepository double with no tags and no commits."""
    repo = MagicMock(spec=GitRepository)
    repo.path = tmp_path
    repo.is_repository.return_value = True
    repo.is_detached.return_value = False
    repo.is_shallow.return_value = False
    repo.tags.return_value = []
    repo.log.return_value = []
    repo.config_get.return_value = ""
    return repo


@pytest.fixture
def mock_hooks() -> MagicMock:
    return MagicMock(spec=HookExecutor)


@pytest.fixture
def console() -> Console:
    return Console(record=True, width=120)


@pytest.fixture
def make_context(
    mock_repo: MagicMock, mock_hooks: MagicMock, console: Console
) -> Callable[..., Context]:
    """Factory building a Context around the repository and hook doubles."""

    def factory(config: ReleaseFlowConfig | None = None, **fields: object) -> Context:
        return Context(
            config=config or ReleaseFlowConfig(),
            repo=mock_repo,
            hooks=mock_hooks,
            out=console,
            **fields,  # type: ignore[arg-type]
        )

    return factory
