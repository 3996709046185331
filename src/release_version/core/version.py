"""Semantic version model.

Implements parsing, precedence comparison, bumping and formatting of
``major.minor.patch[-prerelease][+buildmetadata]`` versions, plus the
release-candidate ordinal lookup used when building ``rcN`` prereleases.

Versions are immutable: every transformation returns a new instance.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from release_version.exceptions import InvalidVersionError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

_NUMERIC = r"0|[1-9]\d*"
_PRERELEASE_IDENTIFIER = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_PRERELEASE = rf"{_PRERELEASE_IDENTIFIER}(?:\.{_PRERELEASE_IDENTIFIER})*"
_BUILDMETADATA = r"[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*"

PRERELEASE_RE = re.compile(_PRERELEASE)
BUILDMETADATA_RE = re.compile(_BUILDMETADATA)
SEMVER_RE = re.compile(
    rf"^v?(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<prerelease>{_PRERELEASE}))?"
    rf"(?:\+(?P<buildmetadata>{_BUILDMETADATA}))?$"
)
RC_MARKER_RE = re.compile(r"rc", re.IGNORECASE)
RC_INDEX_RE = re.compile(r"rc[.\-_]?(\d+)", re.IGNORECASE)


class Impact(Enum):
    """Severity of a change, from no impact up to a breaking change.

    Ordering is defined by ``IMPACT_ORDER`` rather than by member values,
    so reordering the members does not change comparisons.
    """

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @property
    def rank(self) -> int:
        return IMPACT_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Impact):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Impact):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Impact):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Impact):
            return NotImplemented
        return self.rank >= other.rank

    def __str__(self) -> str:
        return self.value


# Ascending severity.
IMPACT_ORDER: tuple[Impact, ...] = (Impact.NONE, Impact.PATCH, Impact.MINOR, Impact.MAJOR)


def max_impact(impacts: Iterable[Impact]) -> Impact | None:
    """Return the most severe impact, or None for an empty iterable.

    >>> max_impact([Impact.PATCH, Impact.MINOR])
    <Impact.MINOR: 'minor'>
    """
    return max(impacts, key=lambda impact: impact.rank, default=None)


def _compare_identifiers(left: str, right: str) -> int:
    left_numeric = left.isdigit()
    right_numeric = right.isdigit()
    if left_numeric and right_numeric:
        a, b = int(left), int(right)
        return (a > b) - (a < b)
    # Numeric identifiers always have lower precedence than alphanumeric ones
    if left_numeric:
        return -1
    if right_numeric:
        return 1
    return (left > right) - (left < right)


@dataclass(frozen=True)
class Version:
    """A semantic version.

    Equality compares every field, build metadata included, so two versions
    that differ only in build metadata are unequal even though ``compare``
    gives them the same precedence (and both ``<=`` and ``>=`` hold).

    Attributes:
        major: Major version number
        minor: Minor version number
        patch: Patch version number
        prerelease: Dot-separated prerelease identifiers (e.g. "rc.1")
        buildmetadata: Dot-separated build metadata (e.g. "build.5")

    Raises:
        InvalidVersionError: If a component violates the SemVer grammar
    """

    major: int
    minor: int
    patch: int
    prerelease: str | None = None
    buildmetadata: str | None = None

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise InvalidVersionError(f"Invalid {name} component: {value!r}")
        if self.prerelease is not None and not PRERELEASE_RE.fullmatch(self.prerelease):
            raise InvalidVersionError(f"Invalid prerelease format: {self.prerelease}")
        if self.buildmetadata is not None and not BUILDMETADATA_RE.fullmatch(self.buildmetadata):
            raise InvalidVersionError(f"Invalid build metadata format: {self.buildmetadata}")

    @classmethod
    def parse(cls, text: str) -> Version | None:
        """Parse a SemVer string, with an optional leading ``v``.

        Args:
            text: Version string such as "1.2.3" or "v2.0.0-rc.1+build.7"

        Returns:
            The parsed Version, or None if the text is not valid SemVer
        """
        match = SEMVER_RE.fullmatch(text)
        if match is None:
            logger.debug("Version string %r is not valid SemVer", text)
            return None
        return cls(
            major=int(match["major"]),
            minor=int(match["minor"]),
            patch=int(match["patch"]),
            prerelease=match["prerelease"],
            buildmetadata=match["buildmetadata"],
        )

    @property
    def base(self) -> tuple[int, int, int]:
        """The numeric ``(major, minor, patch)`` triple."""
        return (self.major, self.minor, self.patch)

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    @staticmethod
    def compare(a: Version, b: Version) -> int:
        """Compare two versions by SemVer precedence.

        Build metadata is ignored. A release sorts above any prerelease of
        the same triple; prerelease identifiers compare left to right and a
        shorter list sorts lower when all shared identifiers are equal.

        Returns:
            1 if a > b, -1 if a < b, 0 if they have equal precedence
        """
        if a.base != b.base:
            return 1 if a.base > b.base else -1
        if a.prerelease is None and b.prerelease is None:
            return 0
        if a.prerelease is None:
            return 1
        if b.prerelease is None:
            return -1

        a_parts = a.prerelease.split(".")
        b_parts = b.prerelease.split(".")
        for left, right in zip(a_parts, b_parts, strict=False):
            result = _compare_identifiers(left, right)
            if result:
                return result
        return (len(a_parts) > len(b_parts)) - (len(a_parts) < len(b_parts))

    def compare_to(self, other: Version) -> int:
        return Version.compare(self, other)

    def __lt__(self, other: Version) -> bool:
        return Version.compare(self, other) < 0

    def __le__(self, other: Version) -> bool:
        return Version.compare(self, other) <= 0

    def __gt__(self, other: Version) -> bool:
        return Version.compare(self, other) > 0

    def __ge__(self, other: Version) -> bool:
        return Version.compare(self, other) >= 0

    def bump(
        self,
        impact: Impact,
        prerelease: str | None = None,
        buildmetadata: str | None = None,
    ) -> Version:
        """Return the next version for the given impact.

        The prerelease and build metadata of this version are discarded and
        replaced by the supplied values.

        Args:
            impact: Severity of the change
            prerelease: Prerelease for the new version
            buildmetadata: Build metadata for the new version

        Returns:
            New Version instance
        """
        if impact is Impact.MAJOR:
            major, minor, patch = self.major + 1, 0, 0
        elif impact is Impact.MINOR:
            major, minor, patch = self.major, self.minor + 1, 0
        elif impact is Impact.PATCH:
            major, minor, patch = self.major, self.minor, self.patch + 1
        else:
            major, minor, patch = self.base
        return Version(major, minor, patch, prerelease, buildmetadata)

    def with_prerelease(self, prerelease: str | None) -> Version:
        return Version(self.major, self.minor, self.patch, prerelease, self.buildmetadata)

    def with_buildmetadata(self, buildmetadata: str | None) -> Version:
        return Version(self.major, self.minor, self.patch, self.prerelease, buildmetadata)

    def as_tag(self) -> str:
        return f"v{self}"

    def as_pep440(self) -> str:
        """Render the version in Python packaging (PEP 440) syntax."""
        from release_version.core.pep440 import to_pep440

        return to_pep440(self)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.buildmetadata:
            text += f"+{self.buildmetadata}"
        return text


def parse_version(text: str) -> Version | None:
    """Parse a SemVer string. Shortcut for ``Version.parse``."""
    return Version.parse(text)


def has_rc_marker(version: Version) -> bool:
    return version.prerelease is not None and RC_MARKER_RE.search(version.prerelease) is not None


def next_rc_index(base: Version, tag_names: Iterable[str]) -> int:
    """Find the next unused release-candidate ordinal for a version.

    Tags are matched against the numeric triple of ``base``. The first
    digit run after an ``rc`` marker (``rc0``, ``rc.1``, ``RC-2``, ``rc_3``)
    is taken as the ordinal. Unparseable tags are skipped.

    Args:
        base: Version whose candidates are being counted
        tag_names: Tag names from history

    Returns:
        One past the highest ordinal found, or 0 when there is none
    """
    highest = -1
    for name in tag_names:
        parsed = Version.parse(name)
        if parsed is None or parsed.base != base.base or not has_rc_marker(parsed):
            continue
        match = RC_INDEX_RE.search(parsed.prerelease or "")
        if match:
            highest = max(highest, int(match.group(1)))
    return highest + 1
