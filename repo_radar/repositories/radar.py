"""
Radar Repository - radars and their repository memberships.

Every query is scoped by ``user_id``: a radar that exists but belongs to
someone else is indistinguishable from a missing one.
"""

from typing import Dict, List, Optional, Set

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database

from repo_radar.entities.radar import Radar, RadarRepo

from .base import BaseRepository


class RadarRepository(BaseRepository[Radar]):
    def __init__(self, db: Database):
        super().__init__(db, "radars", Radar)

    def list_by_user(self, user_id: str | ObjectId) -> List[Radar]:
        return self.find_many(
            {"user_id": self._to_object_id(user_id)},
            sort=[("created_at", ASCENDING)],
        )

    def find_owned(self, user_id: str | ObjectId, radar_id: str | ObjectId) -> Optional[Radar]:
        if not self.is_valid_id(radar_id):
            return None
        return self.find_one(
            {"_id": self._to_object_id(radar_id), "user_id": self._to_object_id(user_id)}
        )

    def count_by_user(self, user_id: str | ObjectId) -> int:
        return self.count({"user_id": self._to_object_id(user_id)})

    def delete_owned(self, user_id: str | ObjectId, radar_id: str | ObjectId) -> bool:
        result = self.collection.delete_one(
            {"_id": self._to_object_id(radar_id), "user_id": self._to_object_id(user_id)}
        )
        return result.deleted_count > 0

    def delete_for_user(self, user_id: str | ObjectId) -> int:
        return self.delete_many({"user_id": self._to_object_id(user_id)})


class RadarRepoRepository(BaseRepository[RadarRepo]):
    def __init__(self, db: Database):
        super().__init__(db, "radar_repos", RadarRepo)

    def list_by_radar(self, radar_id: str | ObjectId) -> List[RadarRepo]:
        return self.find_many(
            {"radar_id": self._to_object_id(radar_id)},
            sort=[("added_at", DESCENDING)],
        )

    def count_by_radar(self, radar_id: str | ObjectId) -> int:
        return self.count({"radar_id": self._to_object_id(radar_id)})

    def count_by_user(self, user_id: str | ObjectId) -> int:
        return self.count({"user_id": self._to_object_id(user_id)})

    def counts_by_radar(self, radar_ids: List[ObjectId]) -> Dict[str, int]:
        """Membership count per radar id, in one aggregation."""
        if not radar_ids:
            return {}
        pipeline = [
            {"$match": {"radar_id": {"$in": radar_ids}}},
            {"$group": {"_id": "$radar_id", "count": {"$sum": 1}}},
        ]
        return {str(row["_id"]): row["count"] for row in self.collection.aggregate(pipeline)}

    def repo_ids_for_user(self, user_id: str | ObjectId) -> Set[int]:
        ids = self.collection.distinct(
            "github_repo_id", {"user_id": self._to_object_id(user_id)}
        )
        return set(ids)

    def radar_ids_containing(self, user_id: str | ObjectId, github_repo_id: int) -> List[str]:
        cursor = self.collection.find(
            {"user_id": self._to_object_id(user_id), "github_repo_id": github_repo_id},
            {"radar_id": 1},
        )
        return [str(doc["radar_id"]) for doc in cursor]

    def remove(self, radar_id: str | ObjectId, github_repo_id: int) -> bool:
        result = self.collection.delete_one(
            {"radar_id": self._to_object_id(radar_id), "github_repo_id": github_repo_id}
        )
        return result.deleted_count > 0

    def delete_by_radar(self, radar_id: str | ObjectId) -> int:
        return self.delete_many({"radar_id": self._to_object_id(radar_id)})

    def delete_for_user(self, user_id: str | ObjectId) -> int:
        return self.delete_many({"user_id": self._to_object_id(user_id)})

    def all_tracked_repo_ids(self) -> List[int]:
        """Every GitHub repository id present in any radar."""
        return list(self.collection.distinct("github_repo_id"))
