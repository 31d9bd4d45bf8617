from typing import Any, Dict

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database

from repo_radar.entities.user_preferences import UserPreferences
from repo_radar.utils.datetime import utc_now

from .base import BaseRepository


class UserPreferencesRepository(BaseRepository[UserPreferences]):
    def __init__(self, db: Database):
        super().__init__(db, "user_preferences", UserPreferences)

    def get_or_create(self, user_id: str | ObjectId) -> UserPreferences:
        user_oid = self._to_object_id(user_id)
        now = utc_now()
        document = self.collection.find_one_and_update(
            {"user_id": user_oid},
            {
                "$setOnInsert": {
                    "user_id": user_oid,
                    "has_completed_tour": False,
                    "is_tour_active": False,
                    "current_tour_step_id": None,
                    "demo_mode": False,
                    "created_at": now,
                    "updated_at": now,
                }
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return UserPreferences.model_validate(document)

    def update_for_user(self, user_id: str | ObjectId, updates: Dict[str, Any]) -> UserPreferences:
        user_oid = self._to_object_id(user_id)
        now = utc_now()
        document = self.collection.find_one_and_update(
            {"user_id": user_oid},
            {
                "$set": {**updates, "updated_at": now},
                "$setOnInsert": {"user_id": user_oid, "created_at": now},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return UserPreferences.model_validate(document)

    def delete_for_user(self, user_id: str | ObjectId) -> int:
        return self.delete_many({"user_id": self._to_object_id(user_id)})
