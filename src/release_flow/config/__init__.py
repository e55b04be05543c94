"""Configuration management for release-flow."""

from __future__ import annotations

from release_flow.config.loader import load_config, load_config_file, locate_config
from release_flow.config.models import (
    BumpFileConfig,
    ChangelogConfig,
    CommitConfig,
    GitConfig,
    HooksConfig,
    ReleaseFlowConfig,
    VersionConfig,
)

__all__ = [
    "BumpFileConfig",
    "ChangelogConfig",
    "CommitConfig",
    "GitConfig",
    "HooksConfig",
    "ReleaseFlowConfig",
    "VersionConfig",
    "load_config",
    "load_config_file",
    "locate_config",
]
