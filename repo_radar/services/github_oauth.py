"""GitHub OAuth helper utilities (MongoDB)."""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlencode

import httpx
from fastapi import HTTPException, status
from pymongo.database import Database

from repo_radar.config import settings
from repo_radar.constants.error_messages import (
    CONNECTION_FAILED,
    LOGIN_FAILED,
    OAUTH_INVALID_STATE,
    OAUTH_NOT_CONFIGURED,
    TOKEN_REFRESH_FAILED,
)
from repo_radar.utils.datetime import utc_now

logger = logging.getLogger(__name__)

GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"


def _require_github_credentials() -> None:
    if not settings.GITHUB_CLIENT_ID or not settings.GITHUB_CLIENT_SECRET:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=OAUTH_NOT_CONFIGURED,
        )


def _token_expiry(token_data: Dict[str, Any]) -> Optional[datetime]:
    expires_in = token_data.get("expires_in")
    if not expires_in:
        # Classic OAuth app tokens do not expire
        return None
    return utc_now() + timedelta(seconds=int(expires_in))


def build_authorize_url(state: str) -> str:
    params = {
        "client_id": settings.GITHUB_CLIENT_ID,
        "scope": " ".join(settings.GITHUB_SCOPES),
        "redirect_uri": settings.GITHUB_REDIRECT_URI,
        "state": state,
    }
    return f"{GITHUB_AUTHORIZE_URL}?{urlencode(params)}"


def create_oauth_state(db: Database, redirect_path: Optional[str] = None) -> dict:
    _require_github_credentials()
    state = uuid.uuid4().hex
    document = {
        "_id": state,
        "redirect_path": redirect_path,
        "created_at": utc_now(),
        "used": False,
        "used_at": None,
    }
    db.github_states.insert_one(document)
    return document


def consume_oauth_state(db: Database, state: str) -> dict:
    """Mark a state token as used; each token is only accepted once."""
    oauth_state = db.github_states.find_one_and_update(
        {"_id": state, "used": False},
        {"$set": {"used": True, "used_at": utc_now()}},
    )
    if not oauth_state:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=OAUTH_INVALID_STATE)
    return oauth_state


async def exchange_code_for_token(
    db: Database, code: str, state: str
) -> Tuple[Dict[str, Any], Dict[str, Any], Optional[str]]:
    """
    Complete the OAuth dance for ``code``.

    Returns the token payload (with ``token_expires_at`` resolved), the GitHub
    profile of the signed-in user and the redirect path stored with the state.
    """
    _require_github_credentials()
    oauth_state = consume_oauth_state(db, state)

    try:
        async with httpx.AsyncClient(timeout=settings.GITHUB_TIMEOUT_SECONDS) as client:
            token_response = await client.post(
                GITHUB_TOKEN_URL,
                headers={"Accept": "application/json"},
                data={
                    "client_id": settings.GITHUB_CLIENT_ID,
                    "client_secret": settings.GITHUB_CLIENT_SECRET,
                    "code": code,
                    "redirect_uri": settings.GITHUB_REDIRECT_URI,
                    "state": state,
                },
            )
            token_response.raise_for_status()
            token_data = token_response.json()
            access_token = token_data.get("access_token")
            if not access_token:
                logger.warning("GitHub code exchange failed: %s", token_data.get("error"))
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=LOGIN_FAILED,
                )

            user_response = await client.get(
                f"{settings.GITHUB_API_URL.rstrip('/')}/user",
                headers={
                    "Accept": "application/vnd.github+json",
                    "Authorization": f"Bearer {access_token}",
                },
            )
            user_response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.error("GitHub OAuth request failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=CONNECTION_FAILED,
        ) from exc

    token_data["token_expires_at"] = _token_expiry(token_data)
    return token_data, user_response.json(), oauth_state.get("redirect_path")


def refresh_github_token(refresh_token: str) -> Dict[str, Any]:
    """
    Exchange a GitHub refresh token for a new access token.

    GitHub answers 200 with an ``error`` field when the refresh token is
    rejected, so the body is checked as well as the status.
    """
    _require_github_credentials()

    try:
        with httpx.Client(timeout=settings.GITHUB_TIMEOUT_SECONDS) as client:
            response = client.post(
                GITHUB_TOKEN_URL,
                headers={"Accept": "application/json"},
                data={
                    "client_id": settings.GITHUB_CLIENT_ID,
                    "client_secret": settings.GITHUB_CLIENT_SECRET,
                    "grant_type": "refresh_token",
                    "refresh_token": refresh_token,
                },
            )
    except httpx.HTTPError as exc:
        logger.error("GitHub token refresh request failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=CONNECTION_FAILED,
        ) from exc

    try:
        token_data = response.json() if response.content else {}
    except ValueError:
        token_data = {}
    if not isinstance(token_data, dict):
        token_data = {}
    if response.status_code >= 400 or token_data.get("error") or not token_data.get("access_token"):
        logger.warning(
            "GitHub token refresh failed: %s",
            token_data.get("error_description") or token_data.get("error") or response.status_code,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=TOKEN_REFRESH_FAILED,
        )

    token_data["token_expires_at"] = _token_expiry(token_data)
    return token_data
