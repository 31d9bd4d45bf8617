from fastapi import APIRouter, Body, Depends, Query, Response, status
from fastapi.responses import RedirectResponse
from pymongo.database import Database

from repo_radar.api.dependencies import get_github_client
from repo_radar.config import settings
from repo_radar.database.mongo import get_db
from repo_radar.dtos import (
    GithubAuthorizeResponse,
    GithubOAuthInitRequest,
    GithubTokenRefreshResponse,
    RateLimitResponse,
    SessionResponse,
    TokenResponse,
)
from repo_radar.middleware.auth import ACCESS_TOKEN_COOKIE, get_current_user
from repo_radar.services.auth_service import AuthService
from repo_radar.services.github.github_client import GitHubClient

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/github/login", response_model=GithubAuthorizeResponse)
def initiate_github_login(
    payload: GithubOAuthInitRequest | None = Body(default=None),
    db: Database = Depends(get_db),
):
    """Initiate GitHub OAuth flow by creating a state token."""
    service = AuthService(db)
    return service.initiate_github_login(payload or GithubOAuthInitRequest())


@router.get("/github/callback")
async def github_oauth_callback(
    code: str = Query(..., description="GitHub authorization code"),
    state: str = Query(..., description="GitHub OAuth state token"),
    db: Database = Depends(get_db),
):
    """Exchange the code, start a session and redirect to the dashboard."""
    service = AuthService(db)
    jwt_token, redirect_path = await service.handle_github_callback(code, state)

    redirect_target = settings.FRONTEND_BASE_URL.rstrip("/") + (redirect_path or "/stars")
    response = RedirectResponse(url=redirect_target)

    # Cookie expires when JWT expires
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=jwt_token,
        httponly=True,
        secure=not settings.DEBUG,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )
    return response


@router.get("/session", response_model=SessionResponse)
def get_session(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    service = AuthService(db)
    return service.get_session(user)


@router.post("/refresh", response_model=TokenResponse)
def refresh_access_token(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    service = AuthService(db)
    return service.refresh_access_token(str(user["_id"]))


@router.post("/github/refresh", response_model=GithubTokenRefreshResponse)
def refresh_github_token(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    """Use the stored GitHub refresh token to obtain a new GitHub access token."""
    service = AuthService(db)
    return service.refresh_github_token(str(user["_id"]))


@router.post("/github/revoke", status_code=status.HTTP_204_NO_CONTENT)
def revoke_github_token(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    """Remove stored GitHub access tokens for the current user."""
    service = AuthService(db)
    service.revoke_github_token(str(user["_id"]))


@router.get("/github/rate-limit", response_model=RateLimitResponse)
def get_rate_limit(github: GitHubClient = Depends(get_github_client)):
    return github.get_rate_limit()


@router.post("/signout", status_code=status.HTTP_204_NO_CONTENT)
def sign_out(response: Response):
    """Clear the session cookie. Safe to call without a session."""
    response.delete_cookie(key=ACCESS_TOKEN_COOKIE, path="/")
