"""Release candidate lookup.

Walks tag history newest first to collect the release candidate tags
published since the last release, and turns them into the next ``rcN``
ordinal for a version.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from release_version.core.version import Version, has_rc_marker, next_rc_index

if TYPE_CHECKING:
    from release_version.vcs.source import HistorySource, Tag

logger = logging.getLogger(__name__)


async def find_release_candidates(source: HistorySource, baseline: Version) -> list[Tag]:
    """Collect release candidate tags newer than the baseline.

    Tags are assumed to arrive newest first. Scanning stops at the first
    parseable tag that is older than ``baseline``; everything after it is
    taken to be older still and is not fetched.

    Args:
        source: History source to page through
        baseline: Version of the latest release

    Returns:
        Release candidate tags, in the order they were listed
    """
    candidates: list[Tag] = []
    page = 1
    while True:
        tags = await source.list_tags(page)
        if not tags:
            break
        for tag in tags:
            parsed = Version.parse(tag.name)
            if parsed is None:
                continue
            if parsed < baseline:
                logger.debug("Tag %s is older than %s, stopping scan", tag.name, baseline)
                return candidates
            if has_rc_marker(parsed):
                candidates.append(tag)
        page += 1
    return candidates


async def next_release_candidate(
    source: HistorySource,
    baseline: Version,
    target: Version,
) -> int:
    """Return the next unused release candidate ordinal for ``target``.

    Args:
        source: History source to page through
        baseline: Version of the latest release
        target: Version the candidate is for (the bumped baseline)
    """
    candidates = await find_release_candidates(source, baseline)
    index = next_rc_index(target, (tag.name for tag in candidates))
    logger.info(
        "Found %d release candidate tag(s) since %s; next candidate for %s is rc%d",
        len(candidates),
        baseline,
        target,
        index,
    )
    return index
