"""Exception hierarchy for release-flow.

Every error raised by the package derives from ReleaseFlowError so the
CLI can report failures uniformly. The no-change condition is never an
exception; it is signalled through Context.no_version_changed.
"""

from __future__ import annotations


class ReleaseFlowError(Exception):
    """Base class for all release-flow errors."""


# =============================================================================
# Validation
# =============================================================================


class ValidationError(ReleaseFlowError):
    """User supplied input is malformed."""


class PrereleaseValidationError(ValidationError):
    """An explicit prerelease argument does not follow SemVer."""


class ConfigValidationError(ValidationError):
    """Configuration failed validation."""


class ConfigNotFoundError(ReleaseFlowError):
    """An explicitly requested configuration file does not exist."""


# =============================================================================
# Parsing
# =============================================================================


class VersionParseError(ReleaseFlowError):
    """A tag or version string does not match the version grammar."""

    def __init__(self, text: str, reason: str | None = None) -> None:
        self.text = text
        message = f"invalid semantic version: {text!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


# =============================================================================
# Collaborators
# =============================================================================


class CollaboratorError(ReleaseFlowError):
    """An external collaborator (git, gpg, shell hook) failed."""

    def __init__(self, message: str, *, stderr: str | None = None) -> None:
        self.stderr = stderr
        if stderr and stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


class GitError(CollaboratorError):
    """A git command failed."""

    def __init__(self, command: list[str], *, stderr: str | None = None) -> None:
        self.command = command
        super().__init__(f"git command failed: {' '.join(command)}", stderr=stderr)


class GpgError(CollaboratorError):
    """Importing a GPG key failed."""


class HookError(CollaboratorError):
    """A configured hook command exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, *, stderr: str | None = None) -> None:
        self.command = command
        self.returncode = returncode
        super().__init__(f"hook {command!r} exited with code {returncode}", stderr=stderr)


class ProjectError(CollaboratorError):
    """Updating a project file failed."""


class VersionNotFoundError(ProjectError):
    """No version could be located in a file being bumped."""


class ChangelogError(CollaboratorError):
    """The changelog could not be generated or written."""


# =============================================================================
# Pipeline
# =============================================================================


class TaskError(ReleaseFlowError):
    """A pipeline task failed; the message is prefixed with the task label."""

    def __init__(self, task: str, cause: BaseException) -> None:
        self.task = task
        self.cause = cause
        super().__init__(f"{task}: {cause}")
