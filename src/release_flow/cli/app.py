"""release-flow command line application."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from release_flow import __version__
from release_flow.cli.commands import run_bump, run_changelog, run_check, run_release, run_tag
from release_flow.cli.commands.common import ChangelogArgs, GlobalOptions

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Semantic versioning and release automation driven by conventional commits.",
)

_PRERELEASE_HELP = "Append a prerelease suffix to the next version, e.g. beta.1 or beta.1+build.7"
_INCLUDE_HELP = "Regex to cherry-pick commits for the changelog (repeatable)"
_EXCLUDE_HELP = "Regex to exclude commits from the changelog (repeatable)"
_SORT_HELP = "Sort order of commits within a changelog entry (asc/desc)"
_MULTILINE_HELP = "Include multiline commit messages in the changelog"
_TRIM_HEADER_HELP = "Strip lines preceding the conventional commit type"


def _options(ctx: typer.Context) -> GlobalOptions:
    return ctx.ensure_object(GlobalOptions)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    config_dir: Path | None = typer.Option(
        None, "--config-dir", help="Directory holding the configuration (defaults to cwd)"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Run without making any changes"),
    debug: bool = typer.Option(False, "--debug", help="Show everything that happens"),
    silent: bool = typer.Option(False, "--silent", help="Silence all logging"),
    no_push: bool = typer.Option(False, "--no-push", help="Push nothing to the git remote"),
    no_stage: bool = typer.Option(False, "--no-stage", help="Stage no changes"),
    ignore_detached: bool = typer.Option(
        False, "--ignore-detached", help="Ignore a detached HEAD"
    ),
    ignore_shallow: bool = typer.Option(False, "--ignore-shallow", help="Ignore a shallow clone"),
    ignore_existing_prerelease: bool = typer.Option(
        False,
        "--ignore-existing-prerelease",
        help="Ignore any existing prerelease when calculating the next version",
    ),
    filter_on_prerelease: bool = typer.Option(
        False,
        "--filter-on-prerelease",
        help="Only consider tags matching the requested prerelease",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    ctx.obj = GlobalOptions(
        config_dir=config_dir,
        dry_run=dry_run,
        debug=debug,
        silent=silent,
        no_push=no_push,
        no_stage=no_stage,
        ignore_detached=ignore_detached,
        ignore_shallow=ignore_shallow,
        ignore_existing_prerelease=ignore_existing_prerelease,
        filter_on_prerelease=filter_on_prerelease,
    )


@app.command()
def bump(
    ctx: typer.Context,
    prerelease: str | None = typer.Option(None, "--prerelease", help=_PRERELEASE_HELP),
) -> None:
    """Bump the version held in configured files to the next version."""
    run_bump(_options(ctx), prerelease, console, err_console)


@app.command()
def changelog(
    ctx: typer.Context,
    diff_only: bool = typer.Option(False, "--diff-only", help="Print the entry only"),
    all_history: bool = typer.Option(
        False, "--all", help="Regenerate the changelog from the entire history"
    ),
    include: list[str] | None = typer.Option(None, "--include", help=_INCLUDE_HELP),
    exclude: list[str] | None = typer.Option(None, "--exclude", help=_EXCLUDE_HELP),
    sort: str = typer.Option("", "--sort", help=_SORT_HELP),
    multiline: bool = typer.Option(False, "--multiline", help=_MULTILINE_HELP),
    skip_prerelease: bool = typer.Option(
        False, "--skip-prerelease", help="Skip the changelog entry for a prerelease"
    ),
    trim_header: bool = typer.Option(False, "--trim-header", help=_TRIM_HEADER_HELP),
) -> None:
    """Create or amend the changelog with the latest release."""
    args = ChangelogArgs(
        include=include or [],
        exclude=exclude or [],
        sort=sort,
        multiline=multiline,
        skip_prerelease=skip_prerelease,
        trim_header=trim_header,
        all=all_history,
    )
    run_changelog(_options(ctx), args, diff_only, console, err_console)


@app.command()
def check(
    ctx: typer.Context,
    config_file: Path | None = typer.Option(
        None, "--config-file", help="Configuration file to check (overrides auto-detection)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print the parsed configuration"),
) -> None:
    """Check that the configuration file is valid."""
    run_check(_options(ctx), config_file, verbose, console, err_console)


@app.command()
def release(
    ctx: typer.Context,
    prerelease: str | None = typer.Option(None, "--prerelease", help=_PRERELEASE_HELP),
    fetch_all: bool = typer.Option(False, "--fetch-all", help="Fetch all tags from the remote"),
    check: bool = typer.Option(False, "--check", help="Check if a release will be triggered"),
    skip_bumps: bool = typer.Option(False, "--skip-bumps", help="Skip bumping of any files"),
    skip_changelog: bool = typer.Option(
        False, "--skip-changelog", help="Skip creating or amending the changelog"
    ),
    no_prefix: bool = typer.Option(False, "--no-prefix", help="Strip the 'v' prefix"),
    include: list[str] | None = typer.Option(None, "--include", help=_INCLUDE_HELP),
    exclude: list[str] | None = typer.Option(None, "--exclude", help=_EXCLUDE_HELP),
    sort: str = typer.Option("", "--sort", help=_SORT_HELP),
    multiline: bool = typer.Option(False, "--multiline", help=_MULTILINE_HELP),
    skip_changelog_prerelease: bool = typer.Option(
        False,
        "--skip-changelog-prerelease",
        help="Skip the changelog entry for a prerelease",
    ),
    trim_header: bool = typer.Option(False, "--trim-header", help=_TRIM_HEADER_HELP),
) -> None:
    """Release the next semantic version: bump files, update the changelog and tag."""
    args = ChangelogArgs(
        include=include or [],
        exclude=exclude or [],
        sort=sort,
        multiline=multiline,
        skip_prerelease=skip_changelog_prerelease,
        trim_header=trim_header,
    )
    run_release(
        _options(ctx),
        args,
        prerelease,
        fetch_all,
        check,
        skip_bumps,
        skip_changelog,
        no_prefix,
        console,
        err_console,
    )


@app.command()
def tag(
    ctx: typer.Context,
    prerelease: str | None = typer.Option(None, "--prerelease", help=_PRERELEASE_HELP),
    fetch_all: bool = typer.Option(False, "--fetch-all", help="Fetch all tags from the remote"),
    check: bool = typer.Option(False, "--check", help="Check if a tag will be created"),
    next_only: bool = typer.Option(False, "--next", help="Print the next tag without tagging"),
    no_prefix: bool = typer.Option(False, "--no-prefix", help="Strip the 'v' prefix"),
) -> None:
    """Tag the repository with the next semantic version."""
    run_tag(
        _options(ctx),
        prerelease,
        fetch_all,
        check,
        next_only,
        no_prefix,
        console,
        err_console,
    )


def main() -> None:
    app()
