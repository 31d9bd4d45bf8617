import logging
from typing import Any, Dict

from pymongo.database import Database

from repo_radar.services.github.github_client import SearchSort, GitHubClient
from repo_radar.services.metrics import MetricsService
from repo_radar.services.starred_service import StarredService
from repo_radar.utils.pagination import (
    calculate_github_search_pagination,
    format_github_search_text,
)

logger = logging.getLogger(__name__)


class ExploreService:
    """Search all of GitHub, flagging results the user has already starred."""

    def __init__(self, db: Database, github: GitHubClient, user_id: str):
        self.db = db
        self.github = github
        self.user_id = user_id
        self.metrics = MetricsService(db)

    def search(
        self,
        query: str,
        page: int = 1,
        per_page: int = 30,
        sort: SearchSort = "best-match",
    ) -> Dict[str, Any]:
        result = self.github.search_repositories(query, page=page, per_page=per_page, sort=sort)
        repositories = result["repositories"]

        starred_ids = set(StarredService(self.db, self.github, self.user_id).get_starred_ids())
        for repo in repositories:
            repo["is_starred"] = repo["id"] in starred_ids
        self.metrics.attach_metrics(repositories)

        pagination = calculate_github_search_pagination(result["total_count"], page, per_page)
        return {
            "repositories": repositories,
            "total_count": result["total_count"],
            "pagination": {
                **pagination.to_dict(),
                "text": format_github_search_text(
                    pagination, len(repositories), result["total_count"]
                ),
            },
        }
