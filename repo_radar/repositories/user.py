"""
User Repository - Database operations for user accounts.
"""

from typing import Optional

from bson import ObjectId
from pymongo.database import Database

from repo_radar.entities.user import User
from repo_radar.utils.datetime import utc_now

from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Database):
        super().__init__(db, "users", User)

    def find_active_by_id(self, user_id: str | ObjectId) -> Optional[User]:
        """Find a user that has not been soft-deleted."""
        if not self.is_valid_id(user_id):
            return None
        return self.find_one({"_id": self._to_object_id(user_id), "deleted_at": None})

    def find_by_github_id(self, github_user_id: str) -> Optional[User]:
        return self.find_one({"github_user_id": github_user_id})

    def soft_delete(self, user_id: str | ObjectId) -> Optional[User]:
        now = utc_now()
        return self.update_one(user_id, {"deleted_at": now, "updated_at": now})
