"""Implementation of the 'release' command.

A release bumps configured files, prepends a changelog entry, commits the
changes and tags the repository with the next version.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.panel import Panel

from release_flow.cli.commands.common import (
    ChangelogArgs,
    display_path,
    prepare,
    report_check,
    run_pipeline,
)
from release_flow.pipeline import pipelines

if TYPE_CHECKING:
    from rich.console import Console

    from release_flow.cli.commands.common import GlobalOptions


def run_release(
    options: GlobalOptions,
    changelog: ChangelogArgs,
    prerelease: str | None,
    fetch_all: bool,
    check: bool,
    skip_bumps: bool,
    skip_changelog: bool,
    no_prefix: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the release command.

    Args:
        options: Global options
        changelog: Changelog flags from the command line
        prerelease: Explicit prerelease suffix
        fetch_all: Fetch all tags from the remote first
        check: Only report whether a release would be triggered
        skip_bumps: Do not bump any files
        skip_changelog: Do not create or amend the changelog
        no_prefix: Strip the "v" prefix from the next version
        console: Console for standard output
        err_console: Console for error output
    """
    ctx = prepare(options, console, err_console, changelog=changelog, prerelease=prerelease)
    ctx.fetch_tags = fetch_all
    ctx.skip_bumps = skip_bumps
    ctx.skip_changelog = skip_changelog
    ctx.no_prefix = no_prefix
    # The entry is written before the tag exists
    ctx.changelog.pre_tag = True

    if check:
        run_pipeline(ctx, pipelines.RELEASE_CHECK, err_console)
        report_check(ctx, console, err_console, options.silent)
        return

    run_pipeline(ctx, pipelines.RELEASE, err_console)

    if options.silent:
        return
    if ctx.no_version_changed:
        console.print("[yellow]No commits trigger a new version. Nothing to release.[/]")
        return

    lines = [f"Released [cyan]{ctx.current_version}[/] -> [green]{ctx.next_version}[/]"]
    if ctx.modified_files:
        lines.append("")
        lines.extend(f"  • [cyan]{display_path(p, ctx.root)}[/]" for p in ctx.modified_files)

    if ctx.dry_run:
        console.print(
            Panel(
                "\n".join(lines),
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        return

    console.print(
        Panel(
            "\n".join(lines),
            title="[green]Release Complete[/]",
            border_style="green",
        )
    )
