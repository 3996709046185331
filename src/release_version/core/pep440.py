"""Conversion between PEP 440 and semantic versions.

PEP 440 has pre-, post- and dev-release segments where SemVer has a
single prerelease string, so only one segment survives the trip into
a Version. Precedence is pre-release, then post-release, then dev.
The epoch has no SemVer counterpart and is dropped; the local segment
becomes build metadata.
"""

from __future__ import annotations

import logging
import re

from release_version.core.version import Version
from release_version.exceptions import InvalidVersionError

logger = logging.getLogger(__name__)

PEP440_RE = re.compile(
    r"""
    v?
    (?:(?P<epoch>[0-9]+)!)?
    (?P<release>[0-9]+(?:\.[0-9]+){0,2})
    (?P<pre>
        [-_.]?
        (?P<pre_l>alpha|beta|preview|pre|rc|a|b|c)
        [-_.]?
        (?P<pre_n>[0-9]+)?
    )?
    (?P<post>
        (?:-(?P<post_n1>[0-9]+))
        |
        (?:[-_.]?(?P<post_l>post|rev|r)[-_.]?(?P<post_n2>[0-9]+)?)
    )?
    (?P<dev>
        [-_.]?
        (?P<dev_l>dev)
        [-_.]?
        (?P<dev_n>[0-9]+)?
    )?
    (?:\+(?P<local>[a-z0-9]+(?:[-_.][a-z0-9]+)*))?
    """,
    re.VERBOSE | re.IGNORECASE,
)

# Pre-release spellings accepted on input and the label stored in the prerelease
PRE_LABELS = {
    "a": "alpha",
    "alpha": "alpha",
    "b": "beta",
    "beta": "beta",
    "c": "rc",
    "rc": "rc",
    "pre": "pre",
    "preview": "pre",
}

# Prerelease labels and their PEP 440 spelling on output
PEP440_LABELS = {
    "alpha": "a",
    "beta": "b",
    "rc": "rc",
    "pre": "rc",
    "post": ".post",
    "dev": ".dev",
}

_LABELED_PRERELEASE_RE = re.compile(r"^(?P<label>[a-zA-Z]+)(?:[.\-]?(?P<number>\d+))?(?P<rest>.*)$")
_NUMERIC_PRERELEASE_RE = re.compile(r"^(?P<number>\d+)(?P<rest>.*)$")


def _segment(label: str, number: str | None) -> str:
    return f"{label}.{int(number)}" if number else label


def from_pep440(text: str) -> Version | None:
    """Parse a PEP 440 version string into a Version.

    Missing release segments default to 0. The synthesized prerelease is
    normalized to ``<label>.<n>`` ("1.2.3a1" becomes "1.2.3-alpha.1").

    Args:
        text: PEP 440 version string

    Returns:
        The converted Version, or None if the text is not valid PEP 440
    """
    match = PEP440_RE.fullmatch(text.strip())
    if match is None:
        logger.debug("Version string %r is not valid PEP 440", text)
        return None

    if match["epoch"]:
        logger.info("PEP 440 epoch %r has no SemVer equivalent; ignoring it", match["epoch"])

    parts = [int(part) for part in match["release"].split(".")]
    parts += [0] * (3 - len(parts))
    major, minor, patch = parts

    prerelease = None
    if match["pre_l"]:
        prerelease = _segment(PRE_LABELS[match["pre_l"].lower()], match["pre_n"])
    elif match["post"]:
        prerelease = _segment("post", match["post_n1"] or match["post_n2"])
    elif match["dev_l"]:
        prerelease = _segment("dev", match["dev_n"])

    local = match["local"]
    if local:
        logger.info("PEP 440 local version %r will be used as build metadata", local)

    try:
        return Version(major, minor, patch, prerelease, local)
    except InvalidVersionError as e:
        logger.debug("PEP 440 version %r has no SemVer equivalent: %s", text, e)
        return None


def to_pep440(version: Version) -> str:
    """Render a Version in PEP 440 syntax.

    Known prerelease labels are shortened (``alpha`` to ``a``, ``beta`` to
    ``b``) and joined with their number; unknown labels are kept verbatim.
    A prerelease starting with a bare number becomes a dev release, since
    appending the digits would read as a later release segment.
    Build metadata cannot be expressed and is dropped.

    >>> to_pep440(Version(1, 2, 3, "rc.1"))
    '1.2.3rc1'
    """
    text = f"{version.major}.{version.minor}.{version.patch}"
    if version.prerelease:
        match = _LABELED_PRERELEASE_RE.match(version.prerelease)
        numeric = _NUMERIC_PRERELEASE_RE.match(version.prerelease)
        if match:
            label = match["label"]
            text += PEP440_LABELS.get(label.lower(), label) + (match["number"] or "")
            text += match["rest"].replace("-", ".")
        elif numeric:
            logger.info("Rendering numeric prerelease %r as a PEP 440 dev release", version.prerelease)
            text += f".dev{int(numeric['number'])}" + numeric["rest"].replace("-", ".")
        else:
            text += version.prerelease
    if version.buildmetadata:
        logger.info("PEP 440 does not support build metadata; dropping %r", version.buildmetadata)
    return text
