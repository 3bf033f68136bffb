"""GitHub REST API client.

Thin synchronous wrapper around the endpoints a release run needs: listing
tags, comparing commit ranges, managing tag refs and release records. List
endpoints are paginated eagerly so callers always get complete lists.

Usage::

    with GitHubClient("octo", "repo", token=os.environ["GITHUB_TOKEN"]) as gh:
        tags = gh.list_tags()
        commits = gh.compare_commits("v1.2.0", "main")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Self

import httpx

from release_tagger.exceptions import GitHubError
from release_tagger.logging import get_logger
from release_tagger.vcs.models import Commit, PullRequestRef, Tag

if TYPE_CHECKING:
    from types import TracebackType

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.github.com"
PER_PAGE = 100


@dataclass(frozen=True, slots=True)
class Release:
    """A GitHub release record."""

    id: int
    tag_name: str
    html_url: str = ""
    upload_url: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Release:
        return cls(
            id=data["id"],
            tag_name=data["tag_name"],
            html_url=data.get("html_url", ""),
            upload_url=data.get("upload_url", ""),
        )


def _commit_from_api(data: dict[str, Any]) -> Commit:
    return Commit(
        sha=data["sha"],
        message=data.get("commit", {}).get("message", ""),
        url=data.get("html_url", ""),
    )


class GitHubClient:
    """GitHub REST client scoped to one repository.

    Args:
        owner: Repository owner
        repo: Repository name
        token: API token; anonymous requests when omitted
        api_url: API base URL (GitHub Enterprise: ``https://host/api/v3``)
        timeout: Request timeout in seconds
        transport: Custom httpx transport (used by tests)
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str | None = None,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo

        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, raising GitHubError for transport or HTTP failures."""
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise GitHubError(f"{method} {url} failed: {e}") from e

        if response.is_error:
            try:
                detail = response.json().get("message", response.text)
            except ValueError:
                detail = response.text
            raise GitHubError(
                f"{method} {url} returned {response.status_code}: {detail}",
                status_code=response.status_code,
            )
        return response

    def _paginate(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        *,
        key: str | None = None,
    ) -> list[dict[str, Any]]:
        """Collect every page of a list endpoint by following ``Link: next``."""
        items: list[dict[str, Any]] = []
        next_url: str | None = url
        next_params: dict[str, Any] | None = {"per_page": PER_PAGE, **(params or {})}

        while next_url:
            response = self._request("GET", next_url, params=next_params)
            payload = response.json()
            items.extend(payload[key] if key else payload)

            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            next_params = None

        return items

    def list_tags(self) -> list[Tag]:
        """List all tags of the repository."""
        data = self._paginate(f"{self._repo_path}/tags")
        tags = [
            Tag(name=item["name"], commit_sha=item.get("commit", {}).get("sha", ""))
            for item in data
        ]
        logger.debug("tags_listed", count=len(tags))
        return tags

    def ref_exists(self, ref: str) -> bool:
        """Check whether a ref such as ``tags/v1.0.0`` exists."""
        try:
            self._request("GET", f"{self._repo_path}/git/ref/{ref}")
        except GitHubError as e:
            if e.status_code == 404:
                return False
            raise
        return True

    def compare_commits(self, base: str, head: str) -> list[Commit]:
        """List the commits reachable from ``head`` but not from ``base``.

        GitHub returns them oldest first.
        """
        data = self._paginate(f"{self._repo_path}/compare/{base}...{head}", key="commits")
        commits = [_commit_from_api(item) for item in data]
        logger.debug("commits_compared", base=base, head=head, count=len(commits))
        return commits

    def list_commits(self, head: str) -> list[Commit]:
        """List the full history reachable from ``head``, newest first."""
        data = self._paginate(f"{self._repo_path}/commits", {"sha": head})
        return [_commit_from_api(item) for item in data]

    def list_pull_requests_for_commit(self, sha: str) -> list[PullRequestRef]:
        """List the pull requests associated with a commit."""
        data = self._paginate(f"{self._repo_path}/commits/{sha}/pulls")
        return [
            PullRequestRef(number=item["number"], url=item.get("html_url", "")) for item in data
        ]

    def create_or_update_tag(self, tag: str, sha: str) -> None:
        """Point ``refs/tags/<tag>`` at ``sha``, moving it if it already exists."""
        logger.info("tag_create", tag=tag, sha=sha)
        try:
            self._request(
                "POST",
                f"{self._repo_path}/git/refs",
                json={"ref": f"refs/tags/{tag}", "sha": sha},
            )
        except GitHubError as e:
            if e.status_code != 422:
                raise
            logger.info("tag_exists_updating", tag=tag)
            self._request(
                "PATCH",
                f"{self._repo_path}/git/refs/tags/{tag}",
                json={"sha": sha, "force": True},
            )

    def get_release_by_tag(self, tag: str) -> Release | None:
        """Return the release for ``tag``, or None if there is none."""
        try:
            response = self._request("GET", f"{self._repo_path}/releases/tags/{tag}")
        except GitHubError as e:
            if e.status_code == 404:
                return None
            raise
        return Release.from_api(response.json())

    def delete_release_by_tag(self, tag: str) -> bool:
        """Delete the release for ``tag``. Returns False when none existed."""
        release = self.get_release_by_tag(tag)
        if release is None:
            logger.info("release_not_found", tag=tag)
            return False

        logger.info("release_delete", tag=tag, release_id=release.id)
        self._request("DELETE", f"{self._repo_path}/releases/{release.id}")
        return True

    def create_release(
        self,
        tag: str,
        *,
        name: str | None = None,
        body: str = "",
        prerelease: bool = False,
        target_commitish: str | None = None,
    ) -> Release:
        """Create a release record for an existing tag."""
        payload: dict[str, Any] = {
            "tag_name": tag,
            "name": name or tag,
            "body": body,
            "prerelease": prerelease,
        }
        if target_commitish:
            payload["target_commitish"] = target_commitish

        logger.info("release_create", tag=tag, prerelease=prerelease)
        response = self._request("POST", f"{self._repo_path}/releases", json=payload)
        return Release.from_api(response.json())
