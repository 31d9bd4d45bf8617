"""User account service using repository pattern"""

import logging

from fastapi import HTTPException, status
from pymongo.database import Database

from repo_radar.dtos import UserResponse, UserUpdate
from repo_radar.repositories.oauth_identity import OAuthIdentityRepository
from repo_radar.repositories.radar import RadarRepoRepository, RadarRepository
from repo_radar.repositories.starred_cache import StarredCacheRepository
from repo_radar.repositories.user import UserRepository
from repo_radar.repositories.user_preferences import UserPreferencesRepository

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Database):
        self.db = db
        self.user_repo = UserRepository(db)

    def get_me(self, user_id: str) -> UserResponse:
        user = self.user_repo.find_active_by_id(user_id)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        return UserResponse.model_validate(user.model_dump(by_alias=True))

    def update_me(self, user_id: str, update_data: UserUpdate) -> UserResponse:
        # Only fields the client actually sent
        update_dict = update_data.model_dump(exclude_unset=True)
        if not update_dict:
            return self.get_me(user_id)

        self.user_repo.update_one(user_id, update_dict)
        return self.get_me(user_id)

    def delete_me(self, user_id: str) -> None:
        """Soft-delete the account and remove everything it owns."""
        self.get_me(user_id)

        memberships = RadarRepoRepository(self.db).delete_for_user(user_id)
        radars = RadarRepository(self.db).delete_for_user(user_id)
        UserPreferencesRepository(self.db).delete_for_user(user_id)
        OAuthIdentityRepository(self.db).delete_for_user(user_id)
        StarredCacheRepository(self.db).delete_for_user(user_id)
        self.user_repo.soft_delete(user_id)

        logger.info(
            "Deleted account %s (%s radars, %s memberships)", user_id, radars, memberships
        )
