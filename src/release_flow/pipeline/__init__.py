"""Release workflow pipelines."""

from __future__ import annotations

from release_flow.pipeline.context import ChangelogOptions, CommitDetails, Context
from release_flow.pipeline.task import Pipeline, Task, execute

__all__ = ["ChangelogOptions", "CommitDetails", "Context", "Pipeline", "Task", "execute"]
