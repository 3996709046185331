"""Configuration models for release-version.

All models are pydantic models with defaults matching the behaviour of
the GitHub Action, so an empty ``[tool.release-version]`` table (or no
pyproject.toml at all) yields a working configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from release_version.core.version import BUILDMETADATA_RE, Version
from release_version.exceptions import ConfigValidationError


class CommitsConfig(BaseModel):
    """Conventional commit settings."""

    model_config = ConfigDict(extra="forbid")

    breaking_marker: str = "BREAKING CHANGE"
    prerelease_label: str = "release-candidate"


class VersionConfig(BaseModel):
    """Version settings."""

    model_config = ConfigDict(extra="forbid")

    initial_version: str = "0.0.0"
    build_metadata: str | None = None

    @field_validator("initial_version")
    @classmethod
    def _check_initial_version(cls, value: str) -> str:
        if Version.parse(value) is None:
            raise ValueError(f"initial_version {value!r} is not a valid semantic version")
        return value

    @field_validator("build_metadata")
    @classmethod
    def _check_build_metadata(cls, value: str | None) -> str | None:
        if not value:
            return None
        if not BUILDMETADATA_RE.fullmatch(value):
            raise ValueError(f"Invalid build metadata format: {value}")
        return value

    @property
    def initial(self) -> Version:
        version = Version.parse(self.initial_version)
        if version is None:
            raise ConfigValidationError(
                f"initial_version {self.initial_version!r} is not a valid semantic version"
            )
        return version


class GitHubConfig(BaseModel):
    """GitHub API settings."""

    model_config = ConfigDict(extra="forbid")

    token: str | None = Field(default=None, repr=False)
    repository: str | None = None
    api_url: str = "https://api.github.com"
    event_path: str | None = None
    timeout: float = 30.0
    per_page: int = Field(default=100, ge=1, le=100)

    @field_validator("repository")
    @classmethod
    def _check_repository(cls, value: str | None) -> str | None:
        if value is not None and value.count("/") != 1:
            raise ValueError(f"repository must be 'owner/name', got {value!r}")
        return value

    @property
    def owner(self) -> str | None:
        return self.repository.split("/")[0] if self.repository else None

    @property
    def repo(self) -> str | None:
        return self.repository.split("/")[1] if self.repository else None


class ReleaseVersionConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra="forbid")

    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
