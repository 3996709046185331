"""Configuration management for release-version."""

from __future__ import annotations

from release_version.config.loader import load_config
from release_version.config.models import (
    CommitsConfig,
    GitHubConfig,
    ReleaseVersionConfig,
    VersionConfig,
)

__all__ = [
    "CommitsConfig",
    "GitHubConfig",
    "ReleaseVersionConfig",
    "VersionConfig",
    "load_config",
]
