"""Command implementations, one module per command."""

from __future__ import annotations

from release_flow.cli.commands.bump import run_bump
from release_flow.cli.commands.changelog import run_changelog
from release_flow.cli.commands.check import run_check
from release_flow.cli.commands.release import run_release
from release_flow.cli.commands.tag import run_tag

__all__ = ["run_bump", "run_changelog", "run_check", "run_release", "run_tag"]
