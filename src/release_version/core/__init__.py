"""Core business logic for release-version.

This module contains the fundamental building blocks:
- Version parsing, comparison and bumping (SemVer)
- Conversion to and from PEP 440
- Conventional commit classification
- Release candidate numbering
- Release notes generation
"""

from __future__ import annotations

from release_version.core.candidates import find_release_candidates, next_release_candidate
from release_version.core.commits import (
    ClassifiedChange,
    ImpactResult,
    calculate_impact,
    classify_body,
    classify_commits,
    classify_title,
    resolve_impact,
)
from release_version.core.notes import generate_release_notes
from release_version.core.pep440 import from_pep440, to_pep440
from release_version.core.version import Impact, Version, max_impact, next_rc_index, parse_version

__all__ = [
    # Version
    "Impact",
    "Version",
    "max_impact",
    "next_rc_index",
    "parse_version",
    # PEP 440
    "from_pep440",
    "to_pep440",
    # Commits
    "ClassifiedChange",
    "ImpactResult",
    "calculate_impact",
    "classify_body",
    "classify_commits",
    "classify_title",
    "resolve_impact",
    # Release candidates
    "find_release_candidates",
    "next_release_candidate",
    # Release notes
    "generate_release_notes",
]
