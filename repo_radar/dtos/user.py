"""User DTOs"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from repo_radar.entities.base import PyObjectIdStr


class UserResponse(BaseModel):
    id: PyObjectIdStr = Field(..., alias="_id")
    github_user_id: str
    login: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(populate_by_name=True)


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=320)
