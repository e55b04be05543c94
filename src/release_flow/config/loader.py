"""Configuration loading.

Configuration is looked up in the config directory in this order:

1. ``release-flow.toml``
2. ``.release-flow.toml``
3. the ``[tool.release-flow]`` table of ``pyproject.toml``

When none of them is present the defaults apply.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from release_flow.config.models import ReleaseFlowConfig
from release_flow.exceptions import ConfigNotFoundError, ConfigValidationError

logger = structlog.get_logger(__name__)

CONFIG_FILE_NAMES = ("release-flow.toml", ".release-flow.toml")
PYPROJECT_TOOL_KEY = "release-flow"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml in ``start`` or any of its parents.

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate

    raise ConfigNotFoundError(f"pyproject.toml not found in {current} or any parent directory")


def load_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_release_flow_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.release-flow]`` table, or an empty dict."""
    return pyproject.get("tool", {}).get(PYPROJECT_TOOL_KEY, {})


def parse_config(data: dict[str, Any], source: Path | None = None) -> ReleaseFlowConfig:
    """Validate raw configuration data.

    Raises:
        ConfigValidationError: If the data does not match the schema
    """
    try:
        return ReleaseFlowConfig.model_validate(data)
    except PydanticValidationError as e:
        where = f" in {source}" if source else ""
        raise ConfigValidationError(f"Invalid configuration{where}:\n{e}") from e


def find_config_file(config_dir: Path) -> Path | None:
    for name in CONFIG_FILE_NAMES:
        candidate = config_dir / name
        if candidate.is_file():
            return candidate
    return None


def locate_config(config_dir: Path) -> Path | None:
    """Path of the configuration ``load_config`` would read, if any.

    A ``pyproject.toml`` only counts when it has a ``[tool.release-flow]`` table.
    """
    config_file = find_config_file(config_dir)
    if config_file is not None:
        return config_file

    pyproject_path = config_dir / "pyproject.toml"
    if pyproject_path.is_file() and extract_release_flow_config(load_toml(pyproject_path)):
        return pyproject_path
    return None


def load_config_file(path: Path) -> ReleaseFlowConfig:
    """Load one configuration file, reading the tool table of a pyproject.toml.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is invalid
    """
    data = load_toml(path)
    if path.name == "pyproject.toml":
        data = extract_release_flow_config(data)
    return parse_config(data, path)


def load_config(config_dir: Path | None = None) -> ReleaseFlowConfig:
    """Load configuration for the project in ``config_dir``.

    Args:
        config_dir: Directory holding the configuration (defaults to cwd)

    Returns:
        Validated configuration, or the defaults when none is found

    Raises:
        ConfigValidationError: If a configuration file is invalid
    """
    config_dir = config_dir or Path.cwd()

    config_file = find_config_file(config_dir)
    if config_file is not None:
        logger.debug("loading configuration", path=str(config_file))
        return parse_config(load_toml(config_file), config_file)

    pyproject_path = config_dir / "pyproject.toml"
    if pyproject_path.is_file():
        data = extract_release_flow_config(load_toml(pyproject_path))
        if data:
            logger.debug("loading configuration", path=str(pyproject_path))
        return parse_config(data, pyproject_path)

    logger.debug("no configuration found, using defaults", config_dir=str(config_dir))
    return ReleaseFlowConfig()
