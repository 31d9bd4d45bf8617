"""
GitHub REST client.

A thin synchronous wrapper around ``httpx.Client`` that speaks the parts of
the GitHub REST API Repo Radar needs: starred repositories, repository search,
repository lookup with ETags, releases, issue counts, starring and the rate
limit. HTTP failures are translated into the ``GithubError`` hierarchy.

Usage:
    with GitHubClient(token) as gh:
        page = gh.list_starred(page=1, per_page=30)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

import httpx

from repo_radar.config import settings
from repo_radar.constants.error_messages import (
    GITHUB_AUTH_FAILED,
    GITHUB_FORBIDDEN,
    INVALID_SEARCH_QUERY,
    REPOSITORY_NOT_FOUND,
)
from repo_radar.constants.limits import MAX_STARRED_REPOS
from repo_radar.services.github.exceptions import (
    GithubAuthError,
    GithubError,
    GithubForbiddenError,
    GithubNotFoundError,
    GithubRateLimitError,
    GithubRetryableError,
    GithubValidationError,
)

logger = logging.getLogger(__name__)

GITHUB_API_VERSION = "2022-11-28"
ACCEPT_DEFAULT = "application/vnd.github.v3+json"
# Starred listing with this media type wraps each repo as {starred_at, repo}
ACCEPT_STARRED_WITH_TIMESTAMP = "application/vnd.github.star+json"

# GitHub search only exposes the first 1000 results of a query
GITHUB_SEARCH_LIMIT = 1000
STARRED_PAGE_SIZE = 100

StarredSort = Literal["created", "updated"]
SortDirection = Literal["asc", "desc"]
SearchSort = Literal["updated", "stars", "forks", "help-wanted", "best-match"]

# Our sort options to GitHub search ``sort`` values; None means relevance ranking
SEARCH_SORT_MAP: Dict[str, Optional[str]] = {
    "updated": "updated",
    "stars": "stars",
    "forks": "forks",
    "help-wanted": "help-wanted-issues",
    "best-match": None,
}


@dataclass
class RepositoryFetchResult:
    """Outcome of a (possibly conditional) repository lookup."""

    data: Optional[Dict[str, Any]]
    etag: Optional[str]
    not_modified: bool = False


def to_repository(
    raw: Dict[str, Any],
    starred_at: Optional[str] = None,
    is_starred: bool = False,
) -> Dict[str, Any]:
    """Normalize a GitHub repository payload into the shape the dashboard uses."""
    owner = raw.get("owner") or {}
    return {
        "id": raw["id"],
        "name": raw.get("name"),
        "full_name": raw.get("full_name"),
        "owner": {
            "login": owner.get("login"),
            "avatar_url": owner.get("avatar_url"),
        },
        "description": raw.get("description"),
        "html_url": raw.get("html_url"),
        "stargazers_count": raw.get("stargazers_count", 0),
        "open_issues_count": raw.get("open_issues_count", 0),
        "forks_count": raw.get("forks_count", 0),
        "language": raw.get("language"),
        "topics": raw.get("topics") or [],
        "private": bool(raw.get("private", False)),
        "updated_at": raw.get("updated_at"),
        "pushed_at": raw.get("pushed_at"),
        "created_at": raw.get("created_at"),
        "starred_at": starred_at,
        "is_starred": is_starred,
        "metrics": None,
    }


def to_release(raw: Dict[str, Any]) -> Dict[str, Any]:
    author = raw.get("author") or {}
    return {
        "id": raw["id"],
        "tag_name": raw.get("tag_name"),
        "name": raw.get("name"),
        "body": raw.get("body"),
        "html_url": raw.get("html_url"),
        "published_at": raw.get("published_at"),
        "created_at": raw.get("created_at"),
        "prerelease": bool(raw.get("prerelease", False)),
        "draft": bool(raw.get("draft", False)),
        "author": {
            "login": author.get("login"),
            "avatar_url": author.get("avatar_url"),
        }
        if author
        else None,
    }


def parse_search_query(query: str) -> str:
    """
    Build the GitHub search ``q`` parameter.

    A query wrapped in double quotes is an exact match on the repository name.
    """
    query = query.strip()
    if len(query) >= 2 and query.startswith('"') and query.endswith('"'):
        return f"{query[1:-1]} in:name"
    return query


def _last_page_from_links(response: httpx.Response) -> Optional[int]:
    last = response.links.get("last")
    if not last or not last.get("url"):
        return None
    page = httpx.URL(last["url"]).params.get("page")
    if page is None or not page.isdigit():
        return None
    return int(page)


class GitHubClient:
    """Synchronous GitHub REST client bound to a single access token."""

    def __init__(
        self,
        token: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.token = token
        self._client = httpx.Client(
            base_url=(base_url or settings.GITHUB_API_URL).rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": ACCEPT_DEFAULT,
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
            timeout=timeout or settings.GITHUB_TIMEOUT_SECONDS,
            transport=transport,
        )

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Transport helpers
    # ------------------------------------------------------------------

    def _rest_request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        try:
            return self._client.request(method, path, params=params, headers=headers)
        except httpx.TransportError as exc:
            raise GithubRetryableError(f"GitHub request failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, not_found_message: str = REPOSITORY_NOT_FOUND) -> None:
        status_code = response.status_code
        if status_code < 400:
            return

        if status_code == 401:
            raise GithubAuthError(GITHUB_AUTH_FAILED)

        if status_code in (403, 429):
            remaining = response.headers.get("x-ratelimit-remaining")
            if remaining == "0" or status_code == 429:
                reset_at = None
                retry_after = None
                reset_header = response.headers.get("x-ratelimit-reset")
                if reset_header and reset_header.isdigit():
                    reset_at = datetime.fromtimestamp(int(reset_header), tz=timezone.utc)
                    retry_after = max(
                        0.0, (reset_at - datetime.now(timezone.utc)).total_seconds()
                    )
                elif response.headers.get("retry-after", "").isdigit():
                    retry_after = int(response.headers["retry-after"])
                reset_text = reset_at.strftime("%H:%M:%S UTC") if reset_at else "soon"
                raise GithubRateLimitError(
                    f"GitHub API rate limit exceeded. Resets at {reset_text}",
                    retry_after=retry_after,
                    reset_at=reset_at,
                )
            raise GithubForbiddenError(GITHUB_FORBIDDEN)

        if status_code == 404:
            raise GithubNotFoundError(not_found_message)

        if status_code == 422:
            raise GithubValidationError(INVALID_SEARCH_QUERY)

        if status_code >= 500:
            raise GithubRetryableError(
                f"GitHub API error: {status_code} {response.reason_phrase}"
            )

        raise GithubError(f"GitHub API error: {status_code} {response.reason_phrase}")

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        response = self._rest_request("GET", path, params=params, **kwargs)
        self._raise_for_status(response)
        return response.json()

    # ------------------------------------------------------------------
    # User
    # ------------------------------------------------------------------

    def get_authenticated_user(self) -> Dict[str, Any]:
        return self._get_json("/user")

    def get_rate_limit(self) -> Dict[str, Any]:
        data = self._get_json("/rate_limit")
        core = data.get("rate") or data.get("resources", {}).get("core", {})
        return {
            "remaining": core.get("remaining", 0),
            "limit": core.get("limit", 0),
            "reset": datetime.fromtimestamp(core.get("reset", 0), tz=timezone.utc),
        }

    # ------------------------------------------------------------------
    # Starred repositories
    # ------------------------------------------------------------------

    def count_starred(self) -> int:
        """
        Total number of repositories the user has starred.

        The endpoint has no total in its body, so request one item per page
        and read the page number of the ``last`` link.
        """
        response = self._rest_request("GET", "/user/starred", params={"per_page": 1})
        self._raise_for_status(response)

        last_page = _last_page_from_links(response)
        if last_page is None:
            # Everything fits on one page
            return len(response.json())
        return last_page

    def list_starred(
        self,
        page: int = 1,
        per_page: int = 30,
        sort: StarredSort = "updated",
        direction: SortDirection = "desc",
    ) -> List[Dict[str, Any]]:
        data = self._get_json(
            "/user/starred",
            params={
                "page": page,
                "per_page": per_page,
                "sort": sort,
                "direction": direction,
            },
            headers={"Accept": ACCEPT_STARRED_WITH_TIMESTAMP},
        )
        return [
            to_repository(item["repo"], starred_at=item.get("starred_at"), is_starred=True)
            for item in data
        ]

    def list_all_starred(self, max_repos: int = MAX_STARRED_REPOS) -> Dict[str, Any]:
        """
        Fetch up to ``max_repos`` starred repositories, most-starred first.

        Pages that fail are logged and skipped; only when every page fails is
        the error raised.
        """
        total_starred = self.count_starred()
        if total_starred == 0:
            return {"repositories": [], "total_fetched": 0, "total_starred": 0}

        repos_to_fetch = min(total_starred, max_repos)
        pages = range(1, math.ceil(repos_to_fetch / STARRED_PAGE_SIZE) + 1)

        repositories: List[Dict[str, Any]] = []
        failed_pages: List[int] = []
        last_error: Optional[GithubError] = None

        for page in pages:
            try:
                repositories.extend(self.list_starred(page=page, per_page=STARRED_PAGE_SIZE))
            except (GithubAuthError, GithubRateLimitError):
                raise
            except GithubError as exc:
                failed_pages.append(page)
                last_error = exc
                logger.error("Failed to fetch starred repositories page %s: %s", page, exc)

        if failed_pages and len(failed_pages) == len(pages):
            raise GithubRetryableError("Failed to fetch any starred repositories") from last_error

        repositories.sort(key=lambda repo: repo["stargazers_count"], reverse=True)
        trimmed = repositories[:max_repos]

        notes = []
        if total_starred > max_repos:
            notes.append(f"limited to {max_repos}")
        if failed_pages:
            notes.append(f"{len(failed_pages)} pages failed")
        logger.info(
            "Bulk-fetched %s of %s starred repos%s",
            len(trimmed),
            total_starred,
            f" ({', '.join(notes)})" if notes else "",
        )

        return {
            "repositories": trimmed,
            "total_fetched": len(trimmed),
            "total_starred": total_starred,
        }

    def star(self, owner: str, repo: str) -> None:
        response = self._rest_request("PUT", f"/user/starred/{owner}/{repo}")
        self._raise_for_status(response)

    def unstar(self, owner: str, repo: str) -> None:
        response = self._rest_request("DELETE", f"/user/starred/{owner}/{repo}")
        self._raise_for_status(response, not_found_message="Repository not found or not starred")

    def is_starred(self, owner: str, repo: str) -> bool:
        try:
            response = self._rest_request("GET", f"/user/starred/{owner}/{repo}")
        except GithubRetryableError:
            return False
        return response.status_code == 204

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    def search_repositories(
        self,
        query: str,
        page: int = 1,
        per_page: int = 30,
        sort: SearchSort = "best-match",
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "q": parse_search_query(query),
            "page": page,
            "per_page": per_page,
        }
        sort_param = SEARCH_SORT_MAP.get(sort)
        if sort_param:
            params["sort"] = sort_param
            params["order"] = "desc"

        data = self._get_json("/search/repositories", params=params)
        total_count = data.get("total_count", 0) or 0
        return {
            "repositories": [to_repository(item) for item in data.get("items") or []],
            "total_count": total_count,
            "api_search_result_total": min(total_count, GITHUB_SEARCH_LIMIT),
        }

    def get_repository_by_id(
        self, github_repo_id: int, etag: Optional[str] = None
    ) -> RepositoryFetchResult:
        """
        Look a repository up by numeric id.

        With an ``etag`` the request is conditional; a 304 comes back as
        ``not_modified``. A missing repository yields ``data=None``.
        """
        headers = {"If-None-Match": etag} if etag else None
        response = self._rest_request("GET", f"/repositories/{github_repo_id}", headers=headers)

        if response.status_code == 304:
            return RepositoryFetchResult(data=None, etag=etag, not_modified=True)
        if response.status_code == 404:
            return RepositoryFetchResult(data=None, etag=None)

        self._raise_for_status(response)
        return RepositoryFetchResult(
            data=to_repository(response.json()),
            etag=response.headers.get("etag"),
        )

    def list_releases(self, owner: str, repo: str, per_page: int = 10) -> List[Dict[str, Any]]:
        data = self._get_json(
            f"/repos/{owner}/{repo}/releases", params={"per_page": per_page}
        )
        return [to_release(item) for item in data]

    def count_open_issues(self, owner: str, repo: str) -> int:
        """Open issues only; ``open_issues_count`` on the repo also counts pull requests."""
        data = self._get_json(
            "/search/issues",
            params={"q": f"repo:{owner}/{repo} type:issue state:open", "per_page": 1},
        )
        return data.get("total_count", 0) or 0
