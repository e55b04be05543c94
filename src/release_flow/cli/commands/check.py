"""Implementation of the 'check' command.

Validates a release-flow configuration file without touching the
repository.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from release_flow.cli.commands.common import display_path, fail, setup_logging
from release_flow.config import load_config_file, locate_config
from release_flow.exceptions import ReleaseFlowError

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from release_flow.cli.commands.common import GlobalOptions


def run_check(
    options: GlobalOptions,
    config_file: Path | None,
    verbose: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the check command.

    Args:
        options: Global options
        config_file: Explicit file to check, relative to the working directory
        verbose: Print the configuration directory and the parsed settings
        console: Console for standard output
        err_console: Console for error output
    """
    setup_logging(options)

    try:
        options.validate()
        if config_file is not None:
            path = config_file if config_file.is_absolute() else options.root / config_file
        else:
            path = locate_config(options.resolved_config_dir)
            if path is None:
                fail(
                    err_console,
                    f"no release-flow configuration found in {options.resolved_config_dir}",
                )

        if not options.silent:
            shown = display_path(path, options.root)
            console.print(f"Checking configuration file: [cyan]{shown}[/]")
            if verbose:
                console.print(f"Using configuration directory: {options.resolved_config_dir}")

        config = load_config_file(path)
    except ReleaseFlowError as e:
        fail(err_console, str(e), e)

    if options.silent:
        return
    if verbose:
        console.print_json(config.model_dump_json(by_alias=True))
    console.print("[green]✓[/] Configuration is valid")
