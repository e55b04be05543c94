"""Task abstraction and the pipeline executor."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from release_flow.exceptions import TaskError

if TYPE_CHECKING:
    from release_flow.pipeline.context import Context

logger = structlog.get_logger(__name__)


class Task(ABC):
    """One stage of a release workflow.

    Tasks hold no state of their own; everything they read or produce
    lives on the Context passed in.
    """

    @abstractmethod
    def describe(self) -> str:
        """Short label used in logs and error messages."""

    @abstractmethod
    def skip(self, ctx: Context) -> bool:
        """Whether the task should be bypassed for this run."""

    @abstractmethod
    def run(self, ctx: Context) -> None:
        """Perform the task, mutating ``ctx`` as needed."""


Pipeline = Sequence[Task]


def execute(ctx: Context, pipeline: Pipeline) -> None:
    """Run every task of ``pipeline`` in order.

    A skipped task is logged and bypassed. The first failing task stops
    the run; side effects of earlier tasks are left in place.

    Raises:
        TaskError: Wrapping the failure, prefixed with the task label
    """
    for task in pipeline:
        label = task.describe()
        if task.skip(ctx):
            logger.debug("skipping task", task=label)
            continue

        logger.debug("running task", task=label)
        try:
            task.run(ctx)
        except TaskError:
            raise
        except Exception as e:
            raise TaskError(label, e) from e
