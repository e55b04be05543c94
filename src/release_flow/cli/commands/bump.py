"""Implementation of the 'bump' command.

Bumps the version held in configured files to the next version and
commits the result, without tagging.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.panel import Panel

from release_flow.cli.commands.common import display_path, prepare, run_pipeline
from release_flow.pipeline import pipelines

if TYPE_CHECKING:
    from rich.console import Console

    from release_flow.cli.commands.common import GlobalOptions


def run_bump(
    options: GlobalOptions,
    prerelease: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the bump command.

    Args:
        options: Global options
        prerelease: Explicit prerelease suffix (e.g. "beta.1" or "beta.1+build.7")
        console: Console for standard output
        err_console: Console for error output
    """
    ctx = prepare(options, console, err_console, prerelease=prerelease)
    run_pipeline(ctx, pipelines.BUMP, err_console)

    if options.silent:
        return
    if ctx.no_version_changed:
        console.print("[yellow]No commits trigger a new version. Nothing to bump.[/]")
        return

    files = "\n".join(f"  • [cyan]{display_path(p, ctx.root)}[/]" for p in ctx.modified_files)
    mode = "[yellow]DRY-RUN[/] - " if ctx.dry_run else ""
    console.print(
        Panel(
            f"{mode}Bumped [cyan]{ctx.current_version}[/] to [green]{ctx.next_version}[/]"
            + (f"\n\n{files}" if files else ""),
            title="[green]Bump Complete[/]",
            border_style="green",
        )
    )
