"""Configuration loading from pyproject.toml.

Settings live in the ``[tool.release-tagger]`` table. Repositories without
a pyproject.toml, or without the table, run with the defaults.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from release_tagger.config.models import ReleaseTaggerConfig
from release_tagger.exceptions import ConfigNotFoundError, ConfigValidationError
from release_tagger.logging import get_logger

logger = get_logger(__name__)

TOOL_NAME = "release-tagger"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml in ``start`` or any of its parents.

    Args:
        start: Directory to start from (defaults to the current directory)

    Returns:
        Path to the nearest pyproject.toml

    Raises:
        ConfigNotFoundError: If no pyproject.toml exists up to the filesystem root
    """
    current = (start or Path.cwd()).resolve()

    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate

    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or any parent directory")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Parse a pyproject.toml file.

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


def extract_release_tagger_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.release-tagger]`` table, or an empty dict."""
    return dict(pyproject.get("tool", {}).get(TOOL_NAME, {}))


def load_config(path: Path | None = None) -> ReleaseTaggerConfig:
    """Load configuration for the project at ``path``.

    Args:
        path: Project directory or pyproject.toml path

    Returns:
        Validated configuration; defaults when no pyproject.toml is found

    Raises:
        ConfigValidationError: If the configuration table is invalid
    """
    if path is not None and path.is_file():
        pyproject_path = path
    else:
        try:
            pyproject_path = find_pyproject_toml(path)
        except ConfigNotFoundError:
            logger.debug("config_defaults", reason="no pyproject.toml", path=str(path))
            return ReleaseTaggerConfig()

    raw = extract_release_tagger_config(load_pyproject_toml(pyproject_path))

    try:
        config = ReleaseTaggerConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid [tool.{TOOL_NAME}] in {pyproject_path}:\n{e}") from e

    logger.debug("config_loaded", path=str(pyproject_path))
    return config
