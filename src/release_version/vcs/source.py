"""History source interface and the records it returns.

The release logic only talks to version control through HistorySource.
Adapters for a concrete platform (see ``release_version.vcs.github``)
translate API responses into these records, so changes to a response
shape stay inside the adapter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Tag:
    """A named point in history."""

    name: str
    sha: str | None = None


@dataclass(frozen=True)
class Release:
    """A published release."""

    tag_name: str
    name: str | None = None
    prerelease: bool = False


@dataclass(frozen=True)
class Commit:
    """A commit split into title and body."""

    sha: str
    title: str
    body: str | None = None

    @classmethod
    def from_message(cls, sha: str, message: str) -> Commit:
        """Build a Commit from a full commit message.

        The first line is the title; the remaining lines, stripped, are the body.
        """
        title, _, rest = message.partition("\n")
        body = rest.strip()
        return cls(sha=sha, title=title.strip(), body=body or None)


@dataclass(frozen=True)
class Label:
    name: str


@dataclass(frozen=True)
class ChangeRequest:
    """A pull request proposing a change.

    Attributes:
        number: Pull request number
        title: Pull request title
        body: Pull request description
        labels: Labels attached to the pull request
        merged: Whether the pull request has been merged
    """

    number: int
    title: str
    body: str | None = None
    labels: tuple[Label, ...] = field(default_factory=tuple)
    merged: bool = False

    def has_label(self, name: str) -> bool:
        wanted = name.lower()
        return any(label.name.lower() == wanted for label in self.labels)


@runtime_checkable
class HistorySource(Protocol):
    """Read access to version control history.

    Implementations must not raise for transport failures: they return
    None or an empty list instead, so callers can fall back to defaults.
    ``list_tags`` is expected to return tags newest first.
    """

    async def get_latest_tag(self) -> Tag | None: ...

    async def get_latest_release(self) -> Release | None: ...

    async def list_commits_for_change(self, number: int) -> list[Commit]: ...

    async def list_tags(self, page: int = 1) -> list[Tag]: ...

    async def get_file_content(self, path: str, ref: str | None = None) -> str | None: ...
