"""Test helpers."""

from __future__ import annotations

from datetime import datetime

from release_flow.vcs.git import Commit


def make_commit(message: str, sha: str = "abc1234def") -> Commit:
    return Commit(
        sha=sha,
        message=message,
        author_name="Test",
        author_email="test@test.com",
        date=datetime(2024, 1, 1),
    )
