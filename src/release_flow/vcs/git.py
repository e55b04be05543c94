"""Git repository operations.

Thin wrapper around the git CLI. Every command runs synchronously via
subprocess; failures raise GitError carrying the command and stderr.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import structlog

from release_flow.exceptions import GitError

logger = structlog.get_logger(__name__)

HEAD = "HEAD"

# Newest first: creation date, then version order for tags sharing a commit date
DEFAULT_TAG_SORT = ("-creatordate", "-version:refname")

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%ae", "%aI", "%B"]) + _RECORD_SEP


@dataclass(frozen=True, slots=True)
class Commit:
    """A single commit read from the repository log."""

    sha: str
    message: str
    author_name: str = ""
    author_email: str = ""
    date: datetime | None = None

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def subject(self) -> str:
        return self.message.split("\n", 1)[0].strip()


class GitRepository:
    """A git working tree rooted at ``path``."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _run(self, *args: str, input: str | None = None) -> str:
        command = ["git", *args]
        logger.debug("running git command", command=" ".join(command))
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                check=True,
                cwd=self.path,
                input=input,
            )
        except FileNotFoundError as e:
            raise GitError(command, stderr="git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(command, stderr=e.stderr) from e
        return result.stdout

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_repository(self) -> bool:
        try:
            return self._run("rev-parse", "--is-inside-work-tree").strip() == "true"
        except GitError:
            return False

    def is_detached(self) -> bool:
        try:
            self._run("symbolic-ref", "-q", HEAD)
        except GitError:
            return True
        return False

    def is_shallow(self) -> bool:
        return self._run("rev-parse", "--is-shallow-repository").strip() == "true"

    def tags(
        self,
        pattern: str = "*.*.*",
        sort: tuple[str, ...] = DEFAULT_TAG_SORT,
    ) -> list[str]:
        """List tags matching a shell glob, ordered by ``sort`` keys.

        git applies the last ``--sort`` key as the primary one, so the keys
        are passed in reverse.
        """
        args = ["tag", "--list", pattern]
        args.extend(f"--sort={key}" for key in reversed(sort))
        return [line.strip() for line in self._run(*args).splitlines() if line.strip()]

    def log(self, head: str = HEAD, since: str | None = None) -> list[Commit]:
        """Commits reachable from ``head`` but not from ``since``, newest first."""
        ref_range = f"{since}..{head}" if since else head
        try:
            output = self._run("log", f"--format={_LOG_FORMAT}", ref_range)
        except GitError:
            if since is None and not self.has_commits():
                return []
            raise

        commits = []
        for record in output.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            sha, author_name, author_email, date, message = record.split(_FIELD_SEP, 4)
            commits.append(
                Commit(
                    sha=sha,
                    message=message.strip(),
                    author_name=author_name,
                    author_email=author_email,
                    date=datetime.fromisoformat(date) if date else None,
                )
            )
        return commits

    def has_commits(self) -> bool:
        try:
            self._run("rev-parse", "--verify", "-q", HEAD)
        except GitError:
            return False
        return True

    def config_get(self, key: str) -> str:
        try:
            return self._run("config", "--get", key).strip()
        except GitError:
            return ""

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def config_set(self, key: str, value: str) -> None:
        self._run("config", key, value)

    def fetch_tags(self) -> None:
        self._run("fetch", "--all", "--tags")

    def stage(self, paths: list[Path]) -> None:
        self._run("add", "--", *(str(p) for p in paths))

    def commit(self, message: str, author_name: str = "", author_email: str = "") -> None:
        args = ["commit", "-m", message]
        if author_name and author_email:
            args.append(f"--author={author_name} <{author_email}>")
        self._run(*args)

    def tag(self, name: str, message: str | None = None) -> None:
        if message:
            self._run("tag", "-a", name, "-m", message)
        else:
            self._run("tag", name)

    def push(self, ref: str | None = None, options: list[str] | None = None) -> None:
        args = ["push"]
        for option in options or []:
            args.extend(["--push-option", option])
        if ref:
            args.extend(["origin", ref])
        self._run(*args)
