"""GitHub REST API history source.

Implements HistorySource on top of an httpx AsyncClient. Read requests
go through an InFlightCache so concurrent callers asking for the same
resource share a single HTTP request. Failures never escape the read
methods: they are logged and reported as "no data".
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

import httpx

from release_version.cache import InFlightCache
from release_version.exceptions import GitHubError
from release_version.vcs.source import ChangeRequest, Commit, Label, Release, Tag

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from release_version.config.models import GitHubConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_API_URL = "https://api.github.com"


class GitHubHistorySource:
    """History source backed by the GitHub REST API.

    Args:
        owner: Repository owner
        repo: Repository name
        token: API token; anonymous requests are heavily rate limited
        api_url: API base URL (GitHub Enterprise uses https://host/api/v3)
        client: Preconfigured client, mainly for tests
        cache: Shared in-flight cache; one is created if omitted
        timeout: Request timeout in seconds
        per_page: Page size for list endpoints
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str | None = None,
        *,
        api_url: str = DEFAULT_API_URL,
        client: httpx.AsyncClient | None = None,
        cache: InFlightCache[Any] | None = None,
        timeout: float = 30.0,
        per_page: int = 100,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.per_page = per_page
        self._cache: InFlightCache[Any] = cache if cache is not None else InFlightCache()
        self._owns_client = client is None
        if client is None:
            headers = {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
            if token:
                headers["Authorization"] = f"Bearer {token}"
            client = httpx.AsyncClient(base_url=api_url, headers=headers, timeout=timeout)
        self._client = client

    @classmethod
    def from_config(cls, config: GitHubConfig, **kwargs: Any) -> GitHubHistorySource:
        """Create a source from a GitHubConfig.

        Raises:
            GitHubError: If the repository is not configured
        """
        if not config.owner or not config.repo:
            raise GitHubError("GitHub repository is not configured (expected 'owner/name')")
        return cls(
            config.owner,
            config.repo,
            config.token,
            api_url=config.api_url,
            timeout=config.timeout,
            per_page=config.per_page,
            **kwargs,
        )

    async def __aenter__(self) -> GitHubHistorySource:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _key(self, operation: str, *args: object) -> str:
        key = f"{operation}:{self.owner}/{self.repo}"
        for arg in args:
            key += f":{arg}"
        return key

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise GitHubError(f"{method} {path} failed: {e}") from e
        if response.is_error:
            raise GitHubError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )
        return response

    async def _cached(self, key: str, factory: Callable[[], Awaitable[T]], default: T) -> T:
        try:
            return await self._cache.run(key, factory)
        except (GitHubError, AttributeError, KeyError, TypeError, ValueError) as e:
            logger.debug("%s failed: %s", key, e)
            return default

    # =========================================================================
    # HistorySource
    # =========================================================================

    async def get_latest_tag(self) -> Tag | None:
        """Return the most recent tag, or None."""

        async def fetch() -> Tag | None:
            tags = await self._fetch_tags(page=1, per_page=1)
            return tags[0] if tags else None

        return await self._cached(self._key("latestTag"), fetch, None)

    async def get_latest_release(self) -> Release | None:
        """Return the latest published release, or None if there is none."""

        async def fetch() -> Release | None:
            response = await self._request("GET", f"{self.repo_path}/releases/latest")
            return _release_from_payload(response.json())

        return await self._cached(self._key("latestRelease"), fetch, None)

    async def list_commits_for_change(self, number: int) -> list[Commit]:
        """Return the commits of a pull request, oldest first."""

        async def fetch() -> list[Commit]:
            commits: list[Commit] = []
            page = 1
            while True:
                response = await self._request(
                    "GET",
                    f"{self.repo_path}/pulls/{number}/commits",
                    params={"per_page": self.per_page, "page": page},
                )
                data = response.json()
                commits.extend(
                    Commit.from_message(item["sha"], (item.get("commit") or {}).get("message") or "")
                    for item in data
                )
                if len(data) < self.per_page:
                    break
                page += 1
            logger.info("Found %d commits in pull request #%d", len(commits), number)
            return commits

        return await self._cached(self._key("prCommits", number), fetch, [])

    async def list_tags(self, page: int = 1) -> list[Tag]:
        """Return one page of tags, newest first."""
        return await self._cached(
            self._key("tags", page),
            lambda: self._fetch_tags(page=page, per_page=self.per_page),
            [],
        )

    async def get_file_content(self, path: str, ref: str | None = None) -> str | None:
        """Return the raw content of a file at ``ref`` (default branch if omitted)."""

        async def fetch() -> str | None:
            params = {"ref": ref} if ref else None
            response = await self._request(
                "GET",
                f"{self.repo_path}/contents/{path.lstrip('/')}",
                params=params,
                headers={"Accept": "application/vnd.github.raw+json"},
            )
            return response.text

        return await self._cached(self._key("content", path, ref or "HEAD"), fetch, None)

    # =========================================================================
    # Pull requests and releases
    # =========================================================================

    async def get_change(self, number: int) -> ChangeRequest | None:
        """Fetch a pull request by number."""

        async def fetch() -> ChangeRequest | None:
            response = await self._request("GET", f"{self.repo_path}/pulls/{number}")
            return change_from_payload(response.json())

        return await self._cached(self._key("pull", number), fetch, None)

    async def create_release(
        self,
        tag_name: str,
        target_commitish: str,
        name: str,
        body: str,
        *,
        draft: bool = False,
        prerelease: bool = False,
        make_latest: bool = True,
    ) -> Release:
        """Create a GitHub release.

        Raises:
            GitHubError: If the release could not be created
        """
        response = await self._request(
            "POST",
            f"{self.repo_path}/releases",
            json={
                "tag_name": tag_name,
                "target_commitish": target_commitish,
                "name": name,
                "body": body,
                "draft": draft,
                "prerelease": prerelease,
                "make_latest": "true" if make_latest else "false",
            },
        )
        logger.info("Created release for tag %s", tag_name)
        return _release_from_payload(response.json())

    async def _fetch_tags(self, page: int, per_page: int) -> list[Tag]:
        response = await self._request(
            "GET",
            f"{self.repo_path}/tags",
            params={"per_page": per_page, "page": page},
        )
        return [
            Tag(name=item["name"], sha=(item.get("commit") or {}).get("sha"))
            for item in response.json()
        ]


def _release_from_payload(data: dict[str, Any]) -> Release:
    return Release(
        tag_name=data["tag_name"],
        name=data.get("name") or None,
        prerelease=bool(data.get("prerelease", False)),
    )


def change_from_payload(data: dict[str, Any]) -> ChangeRequest:
    """Build a ChangeRequest from a pull request payload."""
    return ChangeRequest(
        number=int(data["number"]),
        title=data.get("title") or "",
        body=data.get("body") or None,
        labels=tuple(Label(name=label["name"]) for label in data.get("labels") or []),
        merged=bool(data.get("merged", False)),
    )


def load_change_from_event(path: Path | str) -> ChangeRequest | None:
    """Read the pull request from a GitHub Actions event payload.

    Both ``pull_request`` and ``event.pull_request`` locations are checked.

    Args:
        path: Path to the event JSON file (``$GITHUB_EVENT_PATH``)

    Returns:
        The pull request, or None if the event does not carry one
    """
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    pull_request = payload.get("pull_request") or (payload.get("event") or {}).get("pull_request")
    if not pull_request or "number" not in pull_request:
        logger.debug("No pull request found in event payload %s", path)
        return None
    return change_from_payload(pull_request)
