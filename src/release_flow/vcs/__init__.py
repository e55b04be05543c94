"""Version control collaborators."""

from __future__ import annotations

from release_flow.vcs.git import Commit, GitRepository
from release_flow.vcs.gpg import GpgKey, import_gpg_key

__all__ = [
    "Commit",
    "GitRepository",
    "GpgKey",
    "import_gpg_key",
]
