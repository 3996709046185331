"""Release notes generation.

Builds a Markdown summary of the commits going into a release, grouped
by their conventional commit impact.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from release_version.core.commits import DEFAULT_BREAKING_MARKER, resolve_impact
from release_version.core.version import Impact

if TYPE_CHECKING:
    from collections.abc import Iterable

    from release_version.vcs.source import Commit

SECTION_TITLES = {
    Impact.MAJOR: "Breaking Changes",
    Impact.MINOR: "New Features",
    Impact.PATCH: "Bug Fixes",
    Impact.NONE: "Other Changes",
}


def format_commit_for_notes(commit: Commit) -> str:
    return f"- {commit.title} ({commit.sha[:7]})"


def group_commits_by_impact(
    commits: Iterable[Commit],
    marker: str = DEFAULT_BREAKING_MARKER,
) -> dict[Impact, list[Commit]]:
    """Group commits by impact; inconclusive commits count as NONE."""
    grouped: dict[Impact, list[Commit]] = {impact: [] for impact in SECTION_TITLES}
    for commit in commits:
        change = resolve_impact(commit.title, commit.body, marker)
        grouped[change.impact if change else Impact.NONE].append(commit)
    return grouped


def generate_release_notes(
    commits: Iterable[Commit],
    marker: str = DEFAULT_BREAKING_MARKER,
) -> str:
    """Generate Markdown release notes.

    Args:
        commits: Commits that have not been released yet
        marker: Breaking change marker looked for in commit bodies

    Returns:
        Release notes; sections without commits are omitted
    """
    grouped = group_commits_by_impact(commits, marker)

    lines = ["# Release Notes", ""]
    for impact, title in SECTION_TITLES.items():
        section = grouped[impact]
        if not section:
            continue
        lines.append(f"## {title}")
        lines.append("")
        lines.extend(format_commit_for_notes(commit) for commit in section)
        lines.append("")

    return "\n".join(lines)
