"""Shared plumbing for the release-flow commands.

Every command follows the same shape: validate its options, build a
Context from the configuration and the command line, execute a pipeline
and report the outcome. Failures are printed to the error console and
turned into exit code 1.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

from rich.markup import escape

from release_flow.config import load_config
from release_flow.core.changelog import SORT_ASC, SORT_DESC
from release_flow.core.version import parse_prerelease_argument
from release_flow.exceptions import ReleaseFlowError, ValidationError
from release_flow.hooks import HookExecutor
from release_flow.logs import configure_logging
from release_flow.pipeline import ChangelogOptions, CommitDetails, Context, Pipeline, execute
from release_flow.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

# Release commits never show up in a changelog
RELEASE_COMMIT_EXCLUDE = r"^ci\(release-flow\):"


@dataclass
class GlobalOptions:
    """Options shared by every command."""

    root: Path = field(default_factory=Path.cwd)
    config_dir: Path | None = None
    dry_run: bool = False
    debug: bool = False
    silent: bool = False
    no_push: bool = False
    no_stage: bool = False
    ignore_detached: bool = False
    ignore_shallow: bool = False
    ignore_existing_prerelease: bool = False
    filter_on_prerelease: bool = False

    def validate(self) -> None:
        """Raises ValidationError on conflicting flags."""
        if self.debug and self.silent:
            raise ValidationError("cannot use --debug and --silent flags together")

    @property
    def resolved_config_dir(self) -> Path:
        if self.config_dir is None:
            return self.root
        return self.config_dir if self.config_dir.is_absolute() else self.root / self.config_dir


@dataclass
class ChangelogArgs:
    """Changelog flags given on the command line."""

    include: Sequence[str] = ()
    exclude: Sequence[str] = ()
    sort: str = ""
    multiline: bool = False
    skip_prerelease: bool = False
    trim_header: bool = False
    all: bool = False

    def validate(self) -> None:
        """Raises ValidationError on an unknown sort order or a blank pattern."""
        sort = self.sort.lower()
        if sort and sort not in (SORT_ASC, SORT_DESC):
            raise ValidationError(
                f"invalid sort order {self.sort!r}, valid values are: {SORT_ASC}, {SORT_DESC}"
            )
        for kind, patterns in (("include", self.include), ("exclude", self.exclude)):
            if any(not pattern.strip() for pattern in patterns):
                raise ValidationError(f"{kind} pattern cannot be empty")


def build_context(
    options: GlobalOptions,
    console: Console,
    *,
    changelog: ChangelogArgs | None = None,
    prerelease: str | None = None,
) -> Context:
    """Assemble the Context for one run.

    Command-line flags take precedence over configuration; include and
    exclude patterns from both are combined.

    Raises:
        ValidationError: If options or the prerelease argument are malformed
        ConfigValidationError: If the configuration is invalid
    """
    options.validate()
    changelog = changelog or ChangelogArgs()
    changelog.validate()

    pre, metadata = parse_prerelease_argument(prerelease) if prerelease else ("", "")

    config = load_config(options.resolved_config_dir)
    repo = GitRepository(options.root)

    return Context(
        config=config,
        repo=repo,
        hooks=HookExecutor(options.root),
        out=console,
        prerelease=pre,
        metadata=metadata,
        prerelease_mode=config.version.prerelease_mode,
        prerelease_type=config.version.prerelease_type,
        patch_types=list(config.version.patch_types),
        dry_run=options.dry_run,
        debug=options.debug,
        no_push=options.no_push,
        no_stage=options.no_stage,
        ignore_existing_prerelease=options.ignore_existing_prerelease,
        filter_on_prerelease=options.filter_on_prerelease,
        ignore_detached=options.ignore_detached or config.git.ignore_detached,
        ignore_shallow=options.ignore_shallow or config.git.ignore_shallow,
        changelog=ChangelogOptions(
            path=config.changelog.path,
            include=[*changelog.include, *config.changelog.include],
            exclude=[*changelog.exclude, *config.changelog.exclude, RELEASE_COMMIT_EXCLUDE],
            sort=changelog.sort.lower() or config.changelog.sort,
            multiline=changelog.multiline or config.changelog.multiline,
            skip_prerelease=changelog.skip_prerelease or config.changelog.skip_prerelease,
            trim_header=changelog.trim_header or config.changelog.trim_header,
            all=changelog.all,
        ),
        commit=CommitDetails(),
    )


def run_pipeline(ctx: Context, pipeline: Pipeline, err_console: Console) -> None:
    """Execute ``pipeline``, exiting with code 1 on failure."""
    try:
        execute(ctx, pipeline)
    except ReleaseFlowError as e:
        fail(err_console, str(e), e)


def fail(err_console: Console, message: str, error: Exception | None = None) -> NoReturn:
    err_console.print(f"[red]Error:[/] {escape(message)}")
    raise SystemExit(1) from error


def setup_logging(options: GlobalOptions) -> None:
    configure_logging(debug=options.debug, silent=options.silent)


def prepare(
    options: GlobalOptions,
    console: Console,
    err_console: Console,
    *,
    changelog: ChangelogArgs | None = None,
    prerelease: str | None = None,
) -> Context:
    """Configure logging and build the Context, exiting with code 1 on bad input."""
    setup_logging(options)
    try:
        return build_context(options, console, changelog=changelog, prerelease=prerelease)
    except ReleaseFlowError as e:
        fail(err_console, str(e), e)


def report_check(ctx: Context, console: Console, err_console: Console, silent: bool) -> None:
    """Report the outcome of a check run; no release exits with code 1."""
    if ctx.no_version_changed or ctx.next_version is None:
        fail(err_console, "no release detected")
    if not silent:
        console.print(
            f"[green]Release detected:[/] [cyan]{ctx.current_version.raw}[/] "
            f"-> [green]{ctx.next_version.raw}[/] ({ctx.increment})"
        )


def display_path(path: Path, root: Path) -> str:
    return str(path.relative_to(root)) if path.is_relative_to(root) else str(path)
