"""Shared fixtures for release-version tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from release_version.vcs.source import ChangeRequest, Commit, Label, Release, Tag


class FakeHistorySource:
    """In-memory HistorySource recording the calls made against it."""

    def __init__(
        self,
        release: Release | None = None,
        commits: list[Commit] | None = None,
        tag_pages: list[list[Tag]] | None = None,
        files: dict[str, str] | None = None,
    ) -> None:
        self.release = release
        self.commits = commits or []
        self.tag_pages = tag_pages or []
        self.files = files or {}
        self.calls: list[str] = []

    async def get_latest_tag(self) -> Tag | None:
        self.calls.append("get_latest_tag")
        return self.tag_pages[0][0] if self.tag_pages and self.tag_pages[0] else None

    async def get_latest_release(self) -> Release | None:
        self.calls.append("get_latest_release")
        return self.release

    async def list_commits_for_change(self, number: int) -> list[Commit]:
        self.calls.append(f"list_commits_for_change:{number}")
        return self.commits

    async def list_tags(self, page: int = 1) -> list[Tag]:
        self.calls.append(f"list_tags:{page}")
        if 1 <= page <= len(self.tag_pages):
            return self.tag_pages[page - 1]
        return []

    async def get_file_content(self, path: str, ref: str | None = None) -> str | None:
        self.calls.append(f"get_file_content:{path}")
        return self.files.get(path)


def tags(*names: str) -> list[Tag]:
    return [Tag(name) for name in names]


@pytest.fixture
def feat_commit() -> Commit:
    """A feature commit."""
    return Commit("feat1234567", "feat: add user authentication")


@pytest.fixture
def fix_commit() -> Commit:
    """A bug fix commit with scope."""
    return Commit("fix1234567", "fix(core): resolve memory leak")


@pytest.fixture
def breaking_commit() -> Commit:
    """A breaking change commit (body marker)."""
    return Commit("brk1234567", "feat: redesign API", "BREAKING CHANGE: old API removed")


@pytest.fixture
def sample_commits(feat_commit: Commit, fix_commit: Commit, breaking_commit: Commit) -> list[Commit]:
    """A mix of conventional and non-conventional commits."""
    return [
        feat_commit,
        fix_commit,
        breaking_commit,
        Commit("doc1234567", "docs: update README"),
        Commit("cho1234567", "chore: bump dependencies"),
        Commit("wip1234567", "WIP stuff"),
    ]


@pytest.fixture
def feat_change() -> ChangeRequest:
    """A merged pull request adding a feature."""
    return ChangeRequest(number=42, title="feat: add login", body="Adds login.", merged=True)


@pytest.fixture
def rc_change() -> ChangeRequest:
    """An open pull request labelled as a release candidate."""
    return ChangeRequest(
        number=43,
        title="feat: add logout",
        labels=(Label("Release-Candidate"),),
    )


@pytest.fixture
def fake_source() -> FakeHistorySource:
    return FakeHistorySource()


@pytest.fixture
def project_with_pyproject(tmp_path: Path) -> Path:
    """A project directory with a release-version configuration."""
    (tmp_path / "pyproject.toml").write_text(
        """\
[project]
name = "test-project"
version = "1.0.0"

[tool.release-version.commits]
prerelease_label = "rc"

[tool.release-version.version]
initial_version = "0.1.0"
"""
    )
    return tmp_path
