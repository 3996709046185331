"""Version control history access."""

from __future__ import annotations

from release_version.vcs.github import GitHubHistorySource, load_change_from_event
from release_version.vcs.source import (
    ChangeRequest,
    Commit,
    HistorySource,
    Label,
    Release,
    Tag,
)

__all__ = [
    "ChangeRequest",
    "Commit",
    "GitHubHistorySource",
    "HistorySource",
    "Label",
    "Release",
    "Tag",
    "load_change_from_event",
]
