import logging
from typing import Optional, Tuple

from fastapi import HTTPException, status
from pymongo.database import Database

from repo_radar.constants.error_messages import REAUTH_REQUIRED
from repo_radar.dtos import (
    GithubAuthorizeResponse,
    GithubConnection,
    GithubOAuthInitRequest,
    GithubTokenRefreshResponse,
    SessionResponse,
    TokenResponse,
    UserResponse,
)
from repo_radar.repositories.oauth_identity import OAuthIdentityRepository
from repo_radar.repositories.user_preferences import UserPreferencesRepository
from repo_radar.services.auth import create_access_token
from repo_radar.services.github_oauth import (
    build_authorize_url,
    create_oauth_state,
    exchange_code_for_token,
    refresh_github_token,
)

logger = logging.getLogger(__name__)


def _safe_redirect_path(path: Optional[str]) -> Optional[str]:
    # Only same-site paths; "//host" would be protocol-relative
    if path and path.startswith("/") and not path.startswith("//"):
        return path
    return None


class AuthService:
    def __init__(self, db: Database):
        self.db = db
        self.identity_repo = OAuthIdentityRepository(db)

    def initiate_github_login(self, payload: GithubOAuthInitRequest) -> GithubAuthorizeResponse:
        state_doc = create_oauth_state(self.db, _safe_redirect_path(payload.redirect_path))
        return GithubAuthorizeResponse(
            authorize_url=build_authorize_url(state_doc["_id"]),
            state=state_doc["_id"],
        )

    async def handle_github_callback(self, code: str, state: str) -> Tuple[str, Optional[str]]:
        """Finish the OAuth login; returns the session JWT and the page to land on."""
        token_data, profile, redirect_path = await exchange_code_for_token(self.db, code, state)

        user, _ = self.identity_repo.upsert_github_identity(
            github_user_id=str(profile["id"]),
            login=profile.get("login"),
            email=profile.get("email"),
            name=profile.get("name"),
            avatar_url=profile.get("avatar_url"),
            access_token=token_data["access_token"],
            refresh_token=token_data.get("refresh_token"),
            token_expires_at=token_data.get("token_expires_at"),
            scopes=token_data.get("scope"),
        )
        logger.info("GitHub login completed for %s", user.login)
        return create_access_token(str(user.id)), redirect_path

    def get_session(self, user: dict) -> SessionResponse:
        identity = self.identity_repo.find_github_identity(user["_id"])
        prefs = UserPreferencesRepository(self.db).get_or_create(user["_id"])

        github = GithubConnection(connected=False)
        if identity is not None:
            github = GithubConnection(
                connected=bool(identity.access_token),
                login=identity.account_login,
                avatar_url=identity.account_avatar_url,
                scopes=identity.scopes,
                token_expires_at=identity.token_expires_at,
            )

        return SessionResponse(
            user=UserResponse.model_validate(user),
            github=github,
            has_completed_tour=prefs.has_completed_tour,
            demo_mode=prefs.demo_mode,
        )

    def refresh_access_token(self, user_id: str) -> TokenResponse:
        return TokenResponse(access_token=create_access_token(str(user_id)))

    def refresh_github_token(self, user_id: str) -> GithubTokenRefreshResponse:
        identity = self.identity_repo.find_github_identity(user_id)
        if identity is None or not identity.refresh_token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=REAUTH_REQUIRED,
            )

        token_data = refresh_github_token(identity.refresh_token)
        self.identity_repo.update_tokens(
            identity.id,
            access_token=token_data["access_token"],
            refresh_token=token_data.get("refresh_token") or identity.refresh_token,
            token_expires_at=token_data["token_expires_at"],
        )
        return GithubTokenRefreshResponse(
            refreshed=True, token_expires_at=token_data["token_expires_at"]
        )

    def revoke_github_token(self, user_id: str) -> None:
        """Forget the stored GitHub tokens; the next GitHub call requires a new login."""
        self.identity_repo.clear_tokens(user_id)
