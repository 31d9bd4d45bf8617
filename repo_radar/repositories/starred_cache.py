from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database

from repo_radar.entities.starred_cache import StarredCache
from repo_radar.utils.datetime import utc_now

from .base import BaseRepository


class StarredCacheRepository(BaseRepository[StarredCache]):
    def __init__(self, db: Database):
        super().__init__(db, "starred_cache", StarredCache)

    def find_fresh(
        self, user_id: str | ObjectId, now: Optional[datetime] = None
    ) -> Optional[StarredCache]:
        now = now or utc_now()
        return self.find_one(
            {"user_id": self._to_object_id(user_id), "expires_at": {"$gt": now}}
        )

    def save(self, user_id: str | ObjectId, result: Dict[str, Any], ttl: timedelta) -> StarredCache:
        user_oid = self._to_object_id(user_id)
        now = utc_now()
        document = self.collection.find_one_and_update(
            {"user_id": user_oid},
            {
                "$set": {
                    "repositories": result["repositories"],
                    "total_fetched": result["total_fetched"],
                    "total_starred": result["total_starred"],
                    "fetched_at": now,
                    "expires_at": now + ttl,
                    "updated_at": now,
                },
                "$setOnInsert": {"user_id": user_oid, "created_at": now},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return StarredCache.model_validate(document)

    def delete_for_user(self, user_id: str | ObjectId) -> int:
        return self.delete_many({"user_id": self._to_object_id(user_id)})
