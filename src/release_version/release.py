"""Release planning.

Combines the latest release, the pull request and its commits into the
next version:

1. The latest release gives the baseline (``initial_version`` if none).
2. The pull request title, body and commits give the impact.
3. The baseline is bumped by the impact.
4. Pull requests labelled as release candidates get an ``rcN`` prerelease,
   numbered past the candidates already tagged since the baseline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from release_version.core.candidates import next_release_candidate
from release_version.core.commits import ImpactResult, calculate_impact
from release_version.core.notes import generate_release_notes
from release_version.core.version import Impact, Version
from release_version.exceptions import ImpactNotDeterminedError, VersionNotFoundError

if TYPE_CHECKING:
    from release_version.config.models import ReleaseVersionConfig
    from release_version.vcs.source import ChangeRequest, HistorySource, Release

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleasePlan:
    """The computed next release.

    Attributes:
        previous: Version of the latest release (the baseline)
        version: Next version
        impact: How the impact was determined
        is_prerelease: Whether the next version is a release candidate
        should_release: Whether a release should be published
        release_notes: Markdown notes for the change's commits
    """

    previous: Version
    version: Version
    impact: ImpactResult
    is_prerelease: bool
    should_release: bool
    release_notes: str = ""

    @property
    def warning(self) -> str | None:
        return self.impact.warning

    def outputs(self) -> dict[str, str]:
        """Values to publish as step outputs."""
        return {
            "tag": self.version.as_tag(),
            "version": str(self.version),
            "version-pep-440": self.version.as_pep440(),
            "should-release": str(self.should_release).lower(),
            "is-prerelease": str(self.is_prerelease).lower(),
            "warning": self.warning or "",
        }


def baseline_version(release: Release | None, initial: Version) -> Version:
    """Determine the baseline version from the latest release.

    The release name is tried first, then its tag name.

    Raises:
        VersionNotFoundError: If a release exists but neither name parses
    """
    if release is None:
        logger.info("No previous release found, assuming %s", initial)
        return initial

    for candidate in (release.name, release.tag_name):
        if candidate:
            version = Version.parse(candidate)
            if version is not None:
                logger.info("Previous release found: %s", version)
                return version
    raise VersionNotFoundError(
        f"Could not parse latest release version from {release.name!r} / {release.tag_name!r}"
    )


async def plan_release(
    source: HistorySource,
    change: ChangeRequest,
    config: ReleaseVersionConfig,
) -> ReleasePlan:
    """Compute the next version for a pull request.

    Args:
        source: History source for releases, commits and tags
        change: Pull request being released
        config: Configuration

    Returns:
        ReleasePlan describing the next version

    Raises:
        VersionNotFoundError: If the latest release has no parseable version
        ImpactNotDeterminedError: If neither the pull request nor its commits
            follow Conventional Commits
    """
    previous = baseline_version(await source.get_latest_release(), config.version.initial)

    commits = await source.list_commits_for_change(change.number)
    marker = config.commits.breaking_marker
    impact = calculate_impact(change, commits, marker)
    if impact.final_impact is None:
        raise ImpactNotDeterminedError(
            "No conventional commit impact found in pull request title or commits"
        )

    bumped = previous.bump(impact.final_impact)

    prerelease = None
    is_prerelease = change.has_label(config.commits.prerelease_label)
    if is_prerelease:
        logger.info("Pull request #%d is marked as a release candidate", change.number)
        index = await next_release_candidate(source, previous, bumped)
        prerelease = f"rc{index}"

    version = bumped.bump(Impact.NONE, prerelease, config.version.build_metadata)
    should_release = impact.final_impact > Impact.NONE and (change.merged or is_prerelease)
    logger.info("Bumping version from %s to %s (%s)", previous, version, impact.final_impact)

    return ReleasePlan(
        previous=previous,
        version=version,
        impact=impact,
        is_prerelease=is_prerelease,
        should_release=should_release,
        release_notes=generate_release_notes(commits, marker),
    )
