"""Resolve a usable GitHub access token for a user."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from pymongo.database import Database

from repo_radar.constants.error_messages import REAUTH_REQUIRED
from repo_radar.entities.oauth_identity import OAuthIdentity
from repo_radar.repositories.oauth_identity import OAuthIdentityRepository
from repo_radar.services.github.exceptions import GithubReauthRequiredError
from repo_radar.services.github.github_client import GitHubClient
from repo_radar.services.github_oauth import refresh_github_token
from repo_radar.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


def get_valid_github_token(db: Database, identity: OAuthIdentity | None) -> str:
    """
    Return the stored GitHub token, refreshing it first when it has expired.

    Raises ``GithubReauthRequiredError`` when there is no token, or when the
    token expired and could not be refreshed.
    """
    if identity is None or not identity.access_token:
        raise GithubReauthRequiredError(REAUTH_REQUIRED)

    expires_at = ensure_utc(identity.token_expires_at)
    if expires_at is None or expires_at > utc_now():
        return identity.access_token

    if not identity.refresh_token:
        raise GithubReauthRequiredError(REAUTH_REQUIRED)

    try:
        token_data = refresh_github_token(identity.refresh_token)
    except HTTPException as exc:
        # Only a rejected refresh token means the user must sign in again
        if exc.status_code != status.HTTP_401_UNAUTHORIZED:
            raise
        raise GithubReauthRequiredError(REAUTH_REQUIRED) from exc

    OAuthIdentityRepository(db).update_tokens(
        identity.id,
        access_token=token_data["access_token"],
        refresh_token=token_data.get("refresh_token") or identity.refresh_token,
        token_expires_at=token_data["token_expires_at"],
    )
    logger.info("Refreshed expired GitHub token for user %s", identity.user_id)
    return token_data["access_token"]


def get_user_github_client(db: Database, user_id: str) -> GitHubClient:
    """GitHub client authenticated as ``user_id``."""
    identity = OAuthIdentityRepository(db).find_github_identity(user_id)
    return GitHubClient(get_valid_github_token(db, identity))
