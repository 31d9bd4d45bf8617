"""Radar DTOs"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from .repository import RepositoryResponse


class RadarCreate(BaseModel):
    # Length rules are checked by the service so the messages match the UI copy
    name: str


class RadarUpdate(BaseModel):
    name: str


class RadarResponse(BaseModel):
    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    repo_count: int = 0


class RadarRepoAdd(BaseModel):
    github_repo_id: int = Field(..., gt=0)


class RadarRepoResponse(BaseModel):
    radar_id: str
    github_repo_id: int
    added_at: datetime


class RadarRepositoriesResponse(BaseModel):
    radar: RadarResponse
    repositories: List[RepositoryResponse]


class RadarRepoIdsResponse(BaseModel):
    ids: List[int]


class RadarMembershipResponse(BaseModel):
    radar_ids: List[str]
