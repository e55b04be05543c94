"""Configuration models for release-flow.

All sections are optional; an empty configuration is valid and yields the
defaults below. Keys may be written with dashes or underscores.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from release_flow.core.commits import DEFAULT_PATCH_TYPES, PreReleaseMode, merge_patch_types
from release_flow.core.prerelease import DEFAULT_PRERELEASE_TYPE

DEFAULT_COMMIT_MESSAGE = "ci(release-flow): tagged release {version}"


class _Section(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        alias_generator=lambda name: name.replace("_", "-"),
    )


class HooksConfig(_Section):
    """Shell commands run at fixed points of the release workflow."""

    before: list[str] = Field(default_factory=list)
    before_bump: list[str] = Field(default_factory=list)
    after_bump: list[str] = Field(default_factory=list)
    before_changelog: list[str] = Field(default_factory=list)
    after_changelog: list[str] = Field(default_factory=list)
    before_tag: list[str] = Field(default_factory=list)
    after_tag: list[str] = Field(default_factory=list)
    after: list[str] = Field(default_factory=list)


class ChangelogConfig(_Section):
    """Changelog generation settings."""

    path: Path = Path("CHANGELOG.md")
    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
    sort: Literal["", "asc", "desc"] = ""
    multiline: bool = False
    skip_prerelease: bool = False
    trim_header: bool = False

    @field_validator("sort", mode="before")
    @classmethod
    def _lower_sort(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    @field_validator("include", "exclude")
    @classmethod
    def _valid_patterns(cls, patterns: list[str]) -> list[str]:
        for pattern in patterns:
            if not pattern.strip():
                raise ValueError("pattern cannot be empty")
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid regex {pattern!r}: {e}") from e
        return patterns


class GitConfig(_Section):
    """Git safety checks and push behaviour."""

    ignore_detached: bool = False
    ignore_shallow: bool = False
    push_options: list[str] = Field(default_factory=list)


class VersionConfig(_Section):
    """How commits translate into version increments."""

    prerelease_mode: PreReleaseMode = PreReleaseMode.NONE
    prerelease_type: str = DEFAULT_PRERELEASE_TYPE
    patch_types: list[str] = Field(default_factory=lambda: list(DEFAULT_PATCH_TYPES))

    @field_validator("prerelease_mode", mode="before")
    @classmethod
    def _lower_mode(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    @field_validator("patch_types")
    @classmethod
    def _merge_patch_types(cls, patch_types: list[str]) -> list[str]:
        return list(merge_patch_types(patch_types))


class BumpFileConfig(_Section):
    """A file whose version string is rewritten on release.

    ``regex`` must contain the ``{version}`` token where the version sits,
    e.g. ``__version__ = "{version}"``. Without a regex the file is treated
    as a pyproject.toml and its ``[project]`` or ``[tool.poetry]`` version
    is updated.
    """

    file: Path
    regex: str | None = None
    count: int = Field(default=0, ge=0)
    semver: bool = False

    @field_validator("regex")
    @classmethod
    def _has_version_token(cls, regex: str | None) -> str | None:
        if regex is not None and "{version}" not in regex:
            raise ValueError("regex must contain the {version} token")
        return regex


class CommitConfig(_Section):
    """Identity and message used for the release commit."""

    author_name: str = ""
    author_email: str = ""
    message: str = DEFAULT_COMMIT_MESSAGE


class ReleaseFlowConfig(_Section):
    """Root configuration."""

    annotated_tags: bool = False
    env: dict[str, str] = Field(default_factory=dict)
    bumps: list[BumpFileConfig] = Field(default_factory=list)
    hooks: HooksConfig = Field(default_factory=HooksConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
    commit: CommitConfig = Field(default_factory=CommitConfig)

    @property
    def changelog_path(self) -> Path:
        return self.changelog.path
