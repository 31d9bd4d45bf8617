"""
OAuth Identity Repository - GitHub credentials and the users they belong to.
"""

from datetime import datetime
from typing import Optional, Tuple

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database

from repo_radar.entities.oauth_identity import OAuthIdentity
from repo_radar.entities.user import User
from repo_radar.utils.datetime import utc_now

from .base import BaseRepository

PROVIDER_GITHUB = "github"


class OAuthIdentityRepository(BaseRepository[OAuthIdentity]):
    def __init__(self, db: Database):
        super().__init__(db, "oauth_identities", OAuthIdentity)

    def find_github_identity(self, user_id: str | ObjectId) -> Optional[OAuthIdentity]:
        return self.find_one(
            {"user_id": self._to_object_id(user_id), "provider": PROVIDER_GITHUB}
        )

    def upsert_github_identity(
        self,
        *,
        github_user_id: str,
        login: str,
        email: Optional[str],
        name: Optional[str],
        avatar_url: Optional[str],
        access_token: str,
        refresh_token: Optional[str],
        token_expires_at: Optional[datetime],
        scopes: Optional[str],
    ) -> Tuple[User, OAuthIdentity]:
        """
        Upsert the user and GitHub identity for a completed OAuth login.

        A soft-deleted user signing in again is restored.
        """
        now = utc_now()

        user_doc = self.db.users.find_one_and_update(
            {"github_user_id": github_user_id},
            {
                "$set": {
                    "login": login,
                    "email": email,
                    "name": name,
                    "avatar_url": avatar_url,
                    "deleted_at": None,
                    "updated_at": now,
                },
                "$setOnInsert": {"github_user_id": github_user_id, "created_at": now},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        user = User.model_validate(user_doc)

        identity_doc = self.collection.find_one_and_update(
            {"provider": PROVIDER_GITHUB, "external_user_id": github_user_id},
            {
                "$set": {
                    "user_id": user.id,
                    "access_token": access_token,
                    "refresh_token": refresh_token,
                    "token_expires_at": token_expires_at,
                    "scopes": scopes,
                    "account_login": login,
                    "account_name": name,
                    "account_avatar_url": avatar_url,
                    "connected_at": now,
                    "updated_at": now,
                },
                "$setOnInsert": {
                    "provider": PROVIDER_GITHUB,
                    "external_user_id": github_user_id,
                    "created_at": now,
                },
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return user, OAuthIdentity.model_validate(identity_doc)

    def update_tokens(
        self,
        identity_id: str | ObjectId,
        *,
        access_token: str,
        refresh_token: Optional[str],
        token_expires_at: Optional[datetime],
    ) -> Optional[OAuthIdentity]:
        return self.update_one(
            identity_id,
            {
                "access_token": access_token,
                "refresh_token": refresh_token,
                "token_expires_at": token_expires_at,
            },
        )

    def clear_tokens(self, user_id: str | ObjectId) -> int:
        result = self.collection.update_many(
            {"user_id": self._to_object_id(user_id), "provider": PROVIDER_GITHUB},
            {
                "$set": {
                    "access_token": None,
                    "refresh_token": None,
                    "token_expires_at": None,
                    "updated_at": utc_now(),
                }
            },
        )
        return result.modified_count

    def delete_for_user(self, user_id: str | ObjectId) -> int:
        return self.delete_many({"user_id": self._to_object_id(user_id)})
