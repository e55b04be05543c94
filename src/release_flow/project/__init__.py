"""Project file handling."""

from __future__ import annotations

from release_flow.project.files import bump_file, update_pyproject_version

__all__ = ["bump_file", "update_pyproject_version"]
