"""Exception hierarchy for release-version.

Every error raised by the package derives from ReleaseVersionError so
callers can catch the whole family at once. Expected malformed input
(version strings, commit titles) is never reported through exceptions;
the parsing helpers return None instead.
"""

from __future__ import annotations


class ReleaseVersionError(Exception):
    """Base class for all release-version errors."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(ReleaseVersionError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml could be located."""


class ConfigValidationError(ConfigError):
    """Configuration values failed validation."""


# =============================================================================
# Versions
# =============================================================================


class VersionError(ReleaseVersionError):
    """Base class for version related errors."""


class InvalidVersionError(VersionError, ValueError):
    """A version was constructed with an invalid prerelease or build metadata."""


class VersionNotFoundError(VersionError):
    """The latest release does not carry a parseable version."""


# =============================================================================
# Impact
# =============================================================================


class ImpactNotDeterminedError(ReleaseVersionError):
    """Neither the change nor any of its commits follow Conventional Commits."""


# =============================================================================
# GitHub
# =============================================================================


class GitHubError(ReleaseVersionError):
    """A GitHub API request failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
