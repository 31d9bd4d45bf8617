"""The signed-in user's starred repositories."""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Literal

from pymongo.database import Database

from repo_radar.config import settings
from repo_radar.constants.limits import MAX_STARRED_REPOS
from repo_radar.repositories.starred_cache import StarredCacheRepository
from repo_radar.services.github.github_client import GitHubClient
from repo_radar.services.metrics import MetricsService
from repo_radar.utils.pagination import calculate_pagination, format_pagination_text
from repo_radar.utils.sort import sort_repositories

logger = logging.getLogger(__name__)

StarredSearchSort = Literal["updated", "stars", "created"]


def matches_query(repo: Dict[str, Any], query: str) -> bool:
    """Case-insensitive substring match over name, description, language and topics."""
    needle = query.strip().lower()
    if not needle:
        return True

    haystack = [
        repo.get("name"),
        repo.get("full_name"),
        repo.get("description"),
        repo.get("language"),
        *(repo.get("topics") or []),
    ]
    return any(needle in value.lower() for value in haystack if value)


def sort_starred(repos: List[Dict[str, Any]], sort: StarredSearchSort) -> List[Dict[str, Any]]:
    if sort == "created":
        # "created" means when the user starred it
        return sorted(repos, key=lambda repo: repo.get("starred_at") or "", reverse=True)
    if sort == "stars":
        return sort_repositories(repos, "stars", "desc")
    return sort_repositories(repos, "updated", "desc")


class StarredService:
    def __init__(self, db: Database, github: GitHubClient, user_id: str):
        self.db = db
        self.github = github
        self.user_id = user_id
        self.metrics = MetricsService(db)
        self.cache_repo = StarredCacheRepository(db)

    def _fetch_all_starred(self) -> Dict[str, Any]:
        """Bulk starred list, from the per-user cache while it is fresh."""
        cached = self.cache_repo.find_fresh(self.user_id)
        if cached is not None:
            return {
                "repositories": cached.repositories,
                "total_fetched": cached.total_fetched,
                "total_starred": cached.total_starred,
            }

        result = self.github.list_all_starred(max_repos=MAX_STARRED_REPOS)
        self.cache_repo.save(
            self.user_id, result, timedelta(seconds=settings.STARRED_CACHE_TTL_SECONDS)
        )
        return result

    def list_starred(
        self,
        page: int = 1,
        per_page: int = 30,
        sort: Literal["created", "updated"] = "updated",
        direction: Literal["asc", "desc"] = "desc",
    ) -> Dict[str, Any]:
        """One page for infinite scroll; a short page means there is no more."""
        repositories = self.github.list_starred(
            page=page, per_page=per_page, sort=sort, direction=direction
        )
        self.metrics.attach_metrics(repositories)
        return {
            "repositories": repositories,
            "page": page,
            "per_page": per_page,
            "has_more": len(repositories) == per_page,
        }

    def list_all_starred(self) -> Dict[str, Any]:
        result = self._fetch_all_starred()
        self.metrics.attach_metrics(result["repositories"])
        return {
            **result,
            "is_limited": result["total_starred"] > MAX_STARRED_REPOS,
        }

    def search_starred(
        self,
        query: str,
        page: int = 1,
        per_page: int = 30,
        sort: StarredSearchSort = "updated",
    ) -> Dict[str, Any]:
        """Filter the bulk starred list locally and paginate the matches."""
        starred = self._fetch_all_starred()["repositories"]
        matches = sort_starred([repo for repo in starred if matches_query(repo, query)], sort)

        pagination = calculate_pagination(len(matches), page, per_page)
        page_items = matches[pagination.start_index:pagination.end_index]
        self.metrics.attach_metrics(page_items)

        return {
            "repositories": page_items,
            "total_count": len(matches),
            "pagination": {
                **pagination.to_dict(),
                "text": format_pagination_text(pagination, len(page_items)),
            },
        }

    def get_starred_ids(self) -> List[int]:
        starred = self._fetch_all_starred()["repositories"]
        return [repo["id"] for repo in starred]

    def star(self, owner: str, repo: str) -> None:
        self.github.star(owner, repo)
        self.cache_repo.delete_for_user(self.user_id)
        logger.info("Starred %s/%s", owner, repo)

    def unstar(self, owner: str, repo: str) -> None:
        self.github.unstar(owner, repo)
        self.cache_repo.delete_for_user(self.user_id)
        logger.info("Unstarred %s/%s", owner, repo)

    def is_starred(self, owner: str, repo: str) -> bool:
        return self.github.is_starred(owner, repo)
