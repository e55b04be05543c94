"""Shared state for a single pipeline run."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from release_flow.config.models import ReleaseFlowConfig
from release_flow.core.calculator import CalculationOptions
from release_flow.core.commits import DEFAULT_PATCH_TYPES, PreReleaseMode, merge_patch_types
from release_flow.core.prerelease import DEFAULT_PRERELEASE_TYPE
from release_flow.core.version import Increment, Version
from release_flow.hooks import HookExecutor, HookOptions

if TYPE_CHECKING:
    from release_flow.vcs.git import GitRepository


@dataclass
class ChangelogOptions:
    """Changelog options resolved from flags and configuration."""

    path: Path = Path("CHANGELOG.md")
    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    sort: str = ""
    multiline: bool = False
    skip_prerelease: bool = False
    trim_header: bool = False
    # Regenerate the whole changelog, one entry per tag
    all: bool = False
    # Whether the entry is written before the release tag exists
    pre_tag: bool = False


@dataclass
class CommitDetails:
    """Author and message of the release commit."""

    author_name: str = ""
    author_email: str = ""
    message: str = ""


@dataclass
class Context:
    """Mutable state threaded through every task of one pipeline run.

    Collaborators are injected by the caller; nothing here is shared
    between runs.
    """

    config: ReleaseFlowConfig
    repo: GitRepository
    hooks: HookExecutor
    out: Console = field(default_factory=Console)

    # Version calculation
    current_version: Version = Version.ZERO
    next_version: Version | None = None
    latest_tag: str | None = None
    increment: Increment = Increment.NONE
    no_version_changed: bool = False
    prerelease: str = ""
    metadata: str = ""
    prerelease_mode: PreReleaseMode = PreReleaseMode.NONE
    prerelease_type: str = DEFAULT_PRERELEASE_TYPE
    patch_types: list[str] = field(default_factory=lambda: list(DEFAULT_PATCH_TYPES))
    no_prefix: bool = False
    ignore_existing_prerelease: bool = False
    filter_on_prerelease: bool = False

    # Execution flags
    dry_run: bool = False
    debug: bool = False
    no_push: bool = False
    no_stage: bool = False
    fetch_tags: bool = False
    skip_bumps: bool = False
    skip_changelog: bool = False
    ignore_detached: bool = False
    ignore_shallow: bool = False

    # Per-stage option bags
    changelog: ChangelogOptions = field(default_factory=ChangelogOptions)
    commit: CommitDetails = field(default_factory=CommitDetails)

    # Files changed during the run, staged by the commit task
    modified_files: list[Path] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.patch_types = list(merge_patch_types(self.patch_types))

    @property
    def root(self) -> Path:
        return self.repo.path

    @property
    def env(self) -> dict[str, str]:
        """Environment for hook commands: configured values plus versions."""
        env = dict(self.config.env)
        env["CURRENT_VERSION"] = self.current_version.raw
        if self.next_version is not None:
            env["NEXT_VERSION"] = self.next_version.raw
        return env

    def calculation_options(self) -> CalculationOptions:
        return CalculationOptions(
            prerelease=self.prerelease,
            metadata=self.metadata,
            prerelease_mode=self.prerelease_mode,
            prerelease_type=self.prerelease_type,
            patch_types=tuple(self.patch_types),
            trim_header=self.changelog.trim_header,
            no_prefix=self.no_prefix,
            ignore_existing_prerelease=self.ignore_existing_prerelease,
            filter_on_prerelease=self.filter_on_prerelease,
        )

    def record_modified(self, path: Path) -> None:
        if path not in self.modified_files:
            self.modified_files.append(path)

    def hook_options(self) -> HookOptions:
        return HookOptions(dry_run=self.dry_run, debug=self.debug, env=self.env)
