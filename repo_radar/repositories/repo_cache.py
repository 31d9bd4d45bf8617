"""
Repo Cache Repository - shared GitHub repository cache with ETags.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from pymongo import ReturnDocument
from pymongo.database import Database

from repo_radar.entities.repo_cache import RepoCache
from repo_radar.utils.datetime import utc_now

from .base import BaseRepository


class RepoCacheRepository(BaseRepository[RepoCache]):
    def __init__(self, db: Database):
        super().__init__(db, "repo_cache", RepoCache)

    def find_entry(self, github_repo_id: int) -> Optional[RepoCache]:
        """Cache entry regardless of expiration."""
        return self.find_one({"github_repo_id": github_repo_id})

    def find_fresh(self, github_repo_id: int, now: Optional[datetime] = None) -> Optional[RepoCache]:
        """Cache entry only if it has not expired yet."""
        now = now or utc_now()
        return self.find_one({"github_repo_id": github_repo_id, "expires_at": {"$gt": now}})

    def count_fresh(self, github_repo_id: int, now: Optional[datetime] = None) -> int:
        now = now or utc_now()
        return self.count({"github_repo_id": github_repo_id, "expires_at": {"$gt": now}})

    def upsert(
        self,
        github_repo_id: int,
        summary: Dict[str, Any],
        cached_data: Dict[str, Any],
        etag: Optional[str],
        ttl: timedelta,
    ) -> RepoCache:
        now = utc_now()
        document = self.collection.find_one_and_update(
            {"github_repo_id": github_repo_id},
            {
                "$set": {
                    **summary,
                    "cached_data": cached_data,
                    "etag": etag,
                    "fetched_at": now,
                    "expires_at": now + ttl,
                    "updated_at": now,
                },
                "$setOnInsert": {"github_repo_id": github_repo_id, "created_at": now},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return RepoCache.model_validate(document)

    def touch(self, github_repo_id: int, ttl: timedelta) -> bool:
        """Extend expiration without changing data (after a 304 Not Modified)."""
        now = utc_now()
        result = self.collection.update_one(
            {"github_repo_id": github_repo_id},
            {"$set": {"fetched_at": now, "expires_at": now + ttl, "updated_at": now}},
        )
        return result.matched_count > 0

    def delete_expired_before(self, cutoff: datetime) -> int:
        return self.delete_many({"expires_at": {"$lt": cutoff}})
