"""GitHub integration DTOs"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class GithubAuthorizeResponse(BaseModel):
    authorize_url: str
    state: str


class GithubOAuthInitRequest(BaseModel):
    redirect_path: Optional[str] = None


class RateLimitResponse(BaseModel):
    remaining: int
    limit: int
    reset: datetime
