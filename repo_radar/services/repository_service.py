import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from pymongo.database import Database

from repo_radar.constants.error_messages import REPOSITORY_NOT_FOUND
from repo_radar.repositories.radar import RadarRepoRepository
from repo_radar.services.github.exceptions import GithubRateLimitError
from repo_radar.services.github.github_client import GitHubClient
from repo_radar.services.metrics import MetricsService
from repo_radar.services.repo_cache_service import RepoCacheService

logger = logging.getLogger(__name__)


class RepositoryService:
    """Repository data served through the shared cache."""

    def __init__(self, db: Database, github: GitHubClient):
        self.db = db
        self.github = github
        self.cache = RepoCacheService(db)
        self.metrics = MetricsService(db)
        self.radar_repo_repo = RadarRepoRepository(db)

    def get_repository(
        self, github_repo_id: int, force_refresh: bool = False
    ) -> Optional[Dict[str, Any]]:
        """
        Repository by GitHub id, or None when GitHub reports it missing.

        A fresh cache entry is returned as is unless ``force_refresh``.
        Otherwise GitHub is asked with the cached ETag; a 304 extends the
        cache entry. When GitHub is rate limiting, a stale entry is served.
        """
        if not force_refresh:
            cached = self.cache.get(github_repo_id)
            if cached is not None:
                return cached

        etag = self.cache.get_etag(github_repo_id)
        try:
            result = self.github.get_repository_by_id(github_repo_id, etag=etag)
            if result.not_modified:
                self.cache.refresh_timestamp(github_repo_id)
                stale = self.cache.get_stale(github_repo_id)
                if stale is not None:
                    return stale
                # Entry vanished between the two reads; fetch unconditionally
                result = self.github.get_repository_by_id(github_repo_id)
        except GithubRateLimitError:
            stale = self.cache.get_stale(github_repo_id)
            if stale is None:
                raise
            logger.warning("Rate limited, serving stale cache for repository %s", github_repo_id)
            return stale

        if result.data is None:
            return None

        self.cache.set(github_repo_id, result.data, result.etag)
        return result.data

    def get_repositories(self, github_repo_ids: List[int]) -> List[Dict[str, Any]]:
        """Repositories in the given order; ones GitHub no longer has are skipped."""
        repositories = []
        for github_repo_id in github_repo_ids:
            repo = self.get_repository(github_repo_id)
            if repo is None:
                logger.info("Repository %s no longer exists on GitHub", github_repo_id)
                continue
            repositories.append(dict(repo))
        return self.metrics.attach_metrics(repositories)

    def get_repository_detail(self, user_id: str, github_repo_id: int) -> Dict[str, Any]:
        repo = self.get_repository(github_repo_id)
        if repo is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=REPOSITORY_NOT_FOUND,
            )

        repo = dict(repo)
        owner_login = (repo.get("owner") or {}).get("login")
        repo["is_starred"] = bool(owner_login) and self.github.is_starred(owner_login, repo["name"])
        repo["metrics"] = self.metrics.compute_repo_metrics(
            github_repo_id, repo.get("stargazers_count", 0)
        )

        return {
            "repository": repo,
            "radar_ids": self.radar_repo_repo.radar_ids_containing(user_id, github_repo_id),
            "is_hot": repo["metrics"]["is_hot"],
        }

    def list_releases(self, owner: str, repo: str) -> List[Dict[str, Any]]:
        return self.github.list_releases(owner, repo, per_page=10)

    def get_issue_count(self, owner: str, repo: str) -> int:
        return self.github.count_open_issues(owner, repo)

