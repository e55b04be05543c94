"""Shell hook execution.

Hooks are arbitrary shell commands configured per workflow stage. They
run one after another in the project directory; the first failing
command stops execution and raises HookError.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from release_flow.exceptions import HookError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class HookOptions:
    """Per-invocation execution flags."""

    dry_run: bool = False
    debug: bool = False
    env: Mapping[str, str] = field(default_factory=dict)


class HookExecutor:
    """Runs hook commands through the system shell."""

    def __init__(self, cwd: Path) -> None:
        self.cwd = cwd

    def execute(self, commands: Sequence[str], options: HookOptions | None = None) -> None:
        """Run ``commands`` in order.

        Args:
            commands: Shell commands to run
            options: Dry-run, debug and extra environment settings

        Raises:
            HookError: On the first command exiting with a non-zero status
        """
        options = options or HookOptions()
        env = {**os.environ, **options.env}

        for command in commands:
            if options.dry_run:
                logger.info("would run hook", command=command)
                continue

            logger.info("running hook", command=command)
            try:
                result = subprocess.run(
                    command,
                    shell=True,
                    cwd=self.cwd,
                    env=env,
                    capture_output=True,
                    text=True,
                    check=True,
                )
            except subprocess.CalledProcessError as e:
                raise HookError(command, e.returncode, stderr=e.stderr) from e

            if options.debug and result.stdout.strip():
                logger.debug("hook output", command=command, stdout=result.stdout.strip())
