"""Implementation of the 'changelog' command.

Writes the changelog entry of the latest tagged release, or prints it
with ``--diff-only``. ``--all`` regenerates the file from every tag.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from release_flow.cli.commands.common import ChangelogArgs, fail, prepare, run_pipeline
from release_flow.exceptions import ReleaseFlowError
from release_flow.pipeline import pipelines
from release_flow.pipeline.tasks.changelog import resolve_latest_release

if TYPE_CHECKING:
    from rich.console import Console

    from release_flow.cli.commands.common import GlobalOptions


def run_changelog(
    options: GlobalOptions,
    changelog: ChangelogArgs,
    diff_only: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the changelog command.

    Args:
        options: Global options
        changelog: Changelog flags from the command line
        diff_only: Print the entry instead of writing it
        console: Console for standard output
        err_console: Console for error output
    """
    ctx = prepare(options, console, err_console, changelog=changelog)

    try:
        resolve_latest_release(ctx)
    except ReleaseFlowError as e:
        fail(err_console, f"failed to resolve version tags: {e}", e)

    pipeline = pipelines.CHANGELOG_DIFF if diff_only else pipelines.CHANGELOG
    run_pipeline(ctx, pipeline, err_console)

    if options.silent or diff_only:
        return
    if ctx.no_version_changed:
        console.print("[yellow]Repository has no version tags. Nothing to log.[/]")
        return

    if not ctx.modified_files and not ctx.dry_run:
        console.print("[yellow]No changelog entry written.[/]")
        return

    mode = "[yellow]DRY-RUN[/] - " if ctx.dry_run else ""
    if changelog.all:
        console.print(
            f"{mode}[green]✓[/] Changelog regenerated from the full history "
            f"in [cyan]{ctx.changelog.path}[/]"
        )
        return
    console.print(
        f"{mode}[green]✓[/] Changelog entry for [green]{ctx.next_version}[/] "
        f"in [cyan]{ctx.changelog.path}[/]"
    )
