"""Session dependency: resolve the signed-in user from the JWT."""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.database import Database

from repo_radar.constants.error_messages import NOT_AUTHENTICATED, SESSION_EXPIRED
from repo_radar.core.tracing import TracingContext
from repo_radar.database.mongo import get_db
from repo_radar.repositories.user import UserRepository
from repo_radar.services.auth import decode_access_token

ACCESS_TOKEN_COOKIE = "access_token"

bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(ACCESS_TOKEN_COOKIE)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Database = Depends(get_db),
) -> dict:
    """
    Return the authenticated user document.

    The token is read from the ``Authorization: Bearer`` header first, then
    from the ``access_token`` cookie set by the OAuth callback. Runs on the
    event loop so the recorded ``user_id`` reaches the endpoint.
    """
    token = _extract_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NOT_AUTHENTICATED,
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = decode_access_token(token)
    user = None
    if user_id:
        user = await run_in_threadpool(UserRepository(db).find_active_by_id, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=SESSION_EXPIRED,
            headers={"WWW-Authenticate": "Bearer"},
        )

    TracingContext.set(user_id=str(user.id))
    return user.model_dump(by_alias=True)
