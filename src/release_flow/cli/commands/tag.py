"""Implementation of the 'tag' command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.panel import Panel

from release_flow.cli.commands.common import prepare, report_check, run_pipeline
from release_flow.pipeline import pipelines

if TYPE_CHECKING:
    from rich.console import Console

    from release_flow.cli.commands.common import GlobalOptions


def run_tag(
    options: GlobalOptions,
    prerelease: str | None,
    fetch_all: bool,
    check: bool,
    next_only: bool,
    no_prefix: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the tag command.

    Args:
        options: Global options
        prerelease: Explicit prerelease suffix
        fetch_all: Fetch all tags from the remote first
        check: Only report whether a new tag would be created
        next_only: Print the next version without tagging
        no_prefix: Strip the "v" prefix from the next version
        console: Console for standard output
        err_console: Console for error output
    """
    ctx = prepare(options, console, err_console, prerelease=prerelease)
    ctx.fetch_tags = fetch_all
    ctx.no_prefix = no_prefix

    if check or next_only:
        run_pipeline(ctx, pipelines.TAG_CHECK, err_console)
        if check:
            report_check(ctx, console, err_console, options.silent)
        elif ctx.next_version is not None:
            # Plain output so scripts can capture it
            console.print(ctx.next_version.raw, markup=False, highlight=False)
        return

    run_pipeline(ctx, pipelines.TAG, err_console)

    if options.silent:
        return
    if ctx.no_version_changed:
        console.print("[yellow]No commits trigger a new version. Nothing to tag.[/]")
        return

    mode = "[yellow]DRY-RUN[/] - " if ctx.dry_run else ""
    console.print(
        Panel(
            f"{mode}Tagged repository with [green]{ctx.next_version}[/]",
            title="[green]Tag Complete[/]",
            border_style="green",
        )
    )
