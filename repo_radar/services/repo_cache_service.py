"""
Shared repository cache.

Entries live ``REPO_CACHE_TTL_HOURS`` and are then refetched with a
conditional request using the stored ETag. Expired entries stay around for
``REPO_CACHE_CLEANUP_AFTER_DAYS`` so they can be served while GitHub is rate
limiting us.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from pymongo.database import Database

from repo_radar.config import settings
from repo_radar.repositories.repo_cache import RepoCacheRepository
from repo_radar.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def _summary(data: Dict[str, Any]) -> Dict[str, Any]:
    """Queryable columns stored next to the full payload."""
    owner = data.get("owner") or {}
    full_name = data.get("full_name") or ""
    return {
        "full_name": full_name,
        "owner": owner.get("login") or full_name.split("/")[0],
        "name": data.get("name") or full_name.split("/")[-1],
        "stargazers_count": data.get("stargazers_count", 0),
        "language": data.get("language"),
        "is_private": bool(data.get("private", False)),
    }


class RepoCacheService:
    def __init__(self, db: Database):
        self.db = db
        self.cache_repo = RepoCacheRepository(db)
        self.ttl = timedelta(hours=settings.REPO_CACHE_TTL_HOURS)

    def get(self, github_repo_id: int) -> Optional[Dict[str, Any]]:
        """Cached repository data, or None when missing or expired."""
        entry = self.cache_repo.find_fresh(github_repo_id)
        if entry is None:
            return None
        return entry.cached_data

    def get_stale(self, github_repo_id: int) -> Optional[Dict[str, Any]]:
        """Cached data even past expiry."""
        entry = self.cache_repo.find_entry(github_repo_id)
        return entry.cached_data if entry else None

    def get_etag(self, github_repo_id: int) -> Optional[str]:
        """ETag for a conditional request; expiry does not matter here."""
        entry = self.cache_repo.find_entry(github_repo_id)
        return entry.etag if entry else None

    def is_valid(self, github_repo_id: int) -> bool:
        return self.cache_repo.count_fresh(github_repo_id) > 0

    def set(self, github_repo_id: int, data: Dict[str, Any], etag: Optional[str] = None) -> None:
        self.cache_repo.upsert(github_repo_id, _summary(data), data, etag, self.ttl)

    def refresh_timestamp(self, github_repo_id: int) -> None:
        """Extend an entry after GitHub answered 304 Not Modified."""
        if not self.cache_repo.touch(github_repo_id, self.ttl):
            logger.warning("No cache entry to refresh for repository %s", github_repo_id)

    def cleanup_expired(self, now: Optional[datetime] = None) -> int:
        """Delete entries expired for longer than the retention window."""
        cutoff = (now or utc_now()) - timedelta(days=settings.REPO_CACHE_CLEANUP_AFTER_DAYS)
        deleted = self.cache_repo.delete_expired_before(cutoff)
        if deleted:
            logger.info("Removed %s expired repository cache entries", deleted)
        return deleted
