"""Conventional commit classification.

Parses commit and pull request titles of the form
``type(scope)!: description`` and maps them to an Impact:

- docs, style, test, chore, build, ci -> NONE
- refactor, fix, perf -> PATCH
- feat -> MINOR
- a ``!`` marker, or "BREAKING CHANGE" in the body -> MAJOR

Titles that do not follow the convention are inconclusive and yield
None rather than raising.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from release_version.core.version import Impact, max_impact

if TYPE_CHECKING:
    from collections.abc import Iterable

    from release_version.vcs.source import ChangeRequest, Commit

logger = logging.getLogger(__name__)

DEFAULT_BREAKING_MARKER = "BREAKING CHANGE"

TYPE_IMPACTS: dict[str, Impact] = {
    "docs": Impact.NONE,
    "style": Impact.NONE,
    "test": Impact.NONE,
    "chore": Impact.NONE,
    "build": Impact.NONE,
    "ci": Impact.NONE,
    "refactor": Impact.PATCH,
    "fix": Impact.PATCH,
    "perf": Impact.PATCH,
    "feat": Impact.MINOR,
}

TITLE_RE = re.compile(
    r"^(?P<type>\w+)(?:\((?P<scope>[^)]+)\))?(?P<breaking>!)?:\s*(?P<description>.*)$"
)


@dataclass(frozen=True)
class ClassifiedChange:
    """A title that was successfully classified.

    Attributes:
        type: Conventional commit type (e.g. "feat")
        impact: Resolved impact
        scope: Optional scope from the parentheses
        description: Text after the colon
        breaking: Whether the title carried the ``!`` marker
    """

    type: str
    impact: Impact
    scope: str | None = None
    description: str = ""
    breaking: bool = False


def classify_title(title: str) -> ClassifiedChange | None:
    """Classify a title against the Conventional Commits grammar.

    The type must exactly match one of ``TYPE_IMPACTS`` (case-sensitive).
    A ``!`` marker forces MAJOR whatever the type maps to.

    Args:
        title: Commit or pull request title

    Returns:
        ClassifiedChange, or None when the title is inconclusive
    """
    match = TITLE_RE.match(title)
    if match is None:
        logger.debug("Title does not conform to Conventional Commits: %r", title)
        return None

    commit_type = match["type"]
    impact = TYPE_IMPACTS.get(commit_type)
    if impact is None:
        logger.debug("Commit type %r is not a recognized Conventional Commits type", commit_type)
        return None

    breaking = match["breaking"] is not None
    if breaking:
        logger.debug("Detected breaking change marker '!' in %r", title)
        impact = Impact.MAJOR

    return ClassifiedChange(
        type=commit_type,
        impact=impact,
        scope=match["scope"],
        description=match["description"],
        breaking=breaking,
    )


def classify_body(body: str, marker: str = DEFAULT_BREAKING_MARKER) -> Impact | None:
    """Return MAJOR if the body contains the breaking change marker."""
    if marker in body:
        return Impact.MAJOR
    return None


def resolve_impact(
    title: str,
    body: str | None = None,
    marker: str = DEFAULT_BREAKING_MARKER,
) -> ClassifiedChange | None:
    """Classify a title and body together.

    The title decides whether the change is conventional at all; a body
    marker on an unconventional title is ignored. The body can only raise
    the impact, never lower it.

    Args:
        title: Commit or pull request title
        body: Optional commit message body or pull request description
        marker: Breaking change marker looked for in the body

    Returns:
        ClassifiedChange, or None when the title is inconclusive
    """
    change = classify_title(title)
    if change is None:
        logger.info("Title %r did not conform to Conventional Commits, no impact determined", title)
        return None

    if body:
        body_impact = classify_body(body, marker)
        if body_impact is not None and body_impact > change.impact:
            logger.info(
                "Body indicates higher impact (%s) than title (%s), using body impact",
                body_impact,
                change.impact,
            )
            change = replace(change, impact=body_impact)
    return change


@dataclass
class ImpactResult:
    """Outcome of classifying a change together with its commits.

    Attributes:
        change_impact: Classification of the change itself, if conclusive
        commit_impacts: Classifications of the conclusive commits
        max_commit_impact: Highest commit impact, if any commit was conclusive
        final_impact: Impact to bump with, or None if none could be determined
        warning: Set when the change and its commits disagree
    """

    change_impact: ClassifiedChange | None = None
    commit_impacts: list[ClassifiedChange] = field(default_factory=list)
    max_commit_impact: Impact | None = None
    final_impact: Impact | None = None
    warning: str | None = None


def classify_commits(
    commits: Iterable[Commit],
    marker: str = DEFAULT_BREAKING_MARKER,
) -> list[ClassifiedChange]:
    """Classify commits, skipping the inconclusive ones."""
    classified = []
    for commit in commits:
        change = resolve_impact(commit.title, commit.body, marker)
        logger.debug("Commit %s %r -> %s", commit.sha, commit.title, change)
        if change is not None:
            classified.append(change)
    return classified


def calculate_impact(
    change: ChangeRequest,
    commits: Iterable[Commit],
    marker: str = DEFAULT_BREAKING_MARKER,
) -> ImpactResult:
    """Determine the impact of a change from its title, body and commits.

    When both the change and its commits are conclusive but disagree, the
    change wins and a warning is recorded: the pull request title is the
    contract for the release.

    Args:
        change: Pull request being released
        commits: Commits belonging to the change
        marker: Breaking change marker looked for in bodies

    Returns:
        ImpactResult; ``final_impact`` is None when nothing was conclusive
    """
    change_impact = resolve_impact(change.title, change.body, marker)
    logger.info("Determined impact from change: %s", change_impact.impact if change_impact else None)

    commit_impacts = classify_commits(commits, marker)
    highest = max_impact(c.impact for c in commit_impacts)
    logger.info("Maximum impact from commits: %s", highest)

    result = ImpactResult(
        change_impact=change_impact,
        commit_impacts=commit_impacts,
        max_commit_impact=highest,
    )

    if change_impact is not None and highest is not None and change_impact.impact != highest:
        result.warning = (
            f"Impact from change title ({change_impact.impact}) differs from "
            f"maximum commit impact ({highest}). "
            f"Using change impact ({change_impact.impact}) for version bump."
        )
        logger.warning(result.warning)
        result.final_impact = change_impact.impact
    elif change_impact is not None:
        result.final_impact = change_impact.impact
    elif highest is not None:
        logger.info("Using maximum commit impact (%s) for version bump", highest)
        result.final_impact = highest
    else:
        logger.error("No conventional commit impacts found in change title or commits")

    return result
