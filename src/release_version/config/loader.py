"""Configuration loading.

Settings come from the ``[tool.release-version]`` table of the nearest
pyproject.toml, overlaid with the GitHub Actions environment variables.
A missing pyproject.toml is fine: defaults plus environment are used.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from release_version.config.models import ReleaseVersionConfig
from release_version.exceptions import ConfigNotFoundError, ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

TOOL_NAME = "release-version"

# Environment variable -> (section, key). Earlier variables win.
ENVIRONMENT_SETTINGS: list[tuple[str, str, str]] = [
    ("INPUT_GITHUB_TOKEN", "github", "token"),
    ("GITHUB_TOKEN", "github", "token"),
    ("GITHUB_REPOSITORY", "github", "repository"),
    ("GITHUB_API_URL", "github", "api_url"),
    ("GITHUB_EVENT_PATH", "github", "event_path"),
    ("INPUT_BUILD-METADATA", "version", "build_metadata"),
    ("INPUT_BUILD_METADATA", "version", "build_metadata"),
]


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml in ``start`` or one of its parents.

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
    """Read and parse a pyproject.toml file.

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


def extract_release_version_config(pyproject: Mapping[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.release-version]`` table, or an empty dict."""
    return dict(pyproject.get("tool", {}).get(TOOL_NAME, {}))


def apply_environment(data: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    """Overlay GitHub Actions environment variables onto raw config data.

    Empty variables are ignored. Returns a new dict.
    """
    merged = {key: dict(value) if isinstance(value, dict) else value for key, value in data.items()}
    applied: set[tuple[str, str]] = set()
    for variable, section, key in ENVIRONMENT_SETTINGS:
        value = env.get(variable)
        if not value or (section, key) in applied:
            continue
        merged.setdefault(section, {})[key] = value
        applied.add((section, key))
    return merged


def load_config(
    path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> ReleaseVersionConfig:
    """Load configuration for a project.

    Args:
        path: Project directory (or pyproject.toml) to start from; defaults to cwd
        env: Environment mapping; defaults to ``os.environ``

    Returns:
        Validated configuration

    Raises:
        ConfigValidationError: If the configuration is invalid
    """
    data: dict[str, Any] = {}
    try:
        pyproject_path = path if path and path.is_file() else find_pyproject_toml(path)
    except ConfigNotFoundError:
        logger.debug("No pyproject.toml found, using defaults")
    else:
        data = extract_release_version_config(load_pyproject_toml(pyproject_path))

    data = apply_environment(data, os.environ if env is None else env)
    try:
        return ReleaseVersionConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration: {e}") from e
