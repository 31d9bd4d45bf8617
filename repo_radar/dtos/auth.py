"""Session DTOs"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .user import UserResponse


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class GithubConnection(BaseModel):
    connected: bool
    login: Optional[str] = None
    avatar_url: Optional[str] = None
    scopes: Optional[str] = None
    token_expires_at: Optional[datetime] = None


class SessionResponse(BaseModel):
    user: UserResponse
    github: GithubConnection
    has_completed_tour: bool = False
    demo_mode: bool = False


class GithubTokenRefreshResponse(BaseModel):
    refreshed: bool
    token_expires_at: Optional[datetime] = None
