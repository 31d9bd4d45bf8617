"""Repository, starred and explore DTOs"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class RepoOwner(BaseModel):
    login: Optional[str] = None
    avatar_url: Optional[str] = None


class RepoMetrics(BaseModel):
    stars_gained: Optional[int] = None
    stars_growth_rate: Optional[float] = None
    is_hot: bool = False
    baseline_stars: Optional[int] = None
    baseline_recorded_at: Optional[datetime] = None


class RepositoryResponse(BaseModel):
    id: int
    name: Optional[str] = None
    full_name: Optional[str] = None
    owner: RepoOwner
    description: Optional[str] = None
    html_url: Optional[str] = None
    stargazers_count: int = 0
    open_issues_count: int = 0
    forks_count: int = 0
    language: Optional[str] = None
    topics: List[str] = Field(default_factory=list)
    updated_at: Optional[str] = None
    pushed_at: Optional[str] = None
    created_at: Optional[str] = None
    starred_at: Optional[str] = None
    is_starred: bool = False
    metrics: Optional[RepoMetrics] = None


class ReleaseResponse(BaseModel):
    id: int
    tag_name: Optional[str] = None
    name: Optional[str] = None
    body: Optional[str] = None
    html_url: Optional[str] = None
    published_at: Optional[str] = None
    created_at: Optional[str] = None
    prerelease: bool = False
    draft: bool = False
    author: Optional[RepoOwner] = None


class RepositoryDetailResponse(BaseModel):
    repository: RepositoryResponse
    radar_ids: List[str]
    is_hot: bool = False


class IssueCountResponse(BaseModel):
    open_issues: int


class PaginationResponse(BaseModel):
    total_pages: int
    current_page: int
    has_next_page: bool
    has_previous_page: bool
    start_index: int
    end_index: int
    total_items: int
    effective_total: Optional[int] = None
    is_limited: bool = False
    text: str


class StarredPageResponse(BaseModel):
    repositories: List[RepositoryResponse]
    page: int
    per_page: int
    has_more: bool


class StarredAllResponse(BaseModel):
    repositories: List[RepositoryResponse]
    total_fetched: int
    total_starred: int
    is_limited: bool


class RepositorySearchResponse(BaseModel):
    repositories: List[RepositoryResponse]
    total_count: int
    pagination: PaginationResponse


class StarredIdsResponse(BaseModel):
    ids: List[int]


class StarStatusResponse(BaseModel):
    is_starred: bool


class StarHistoryPoint(BaseModel):
    stargazers_count: int
    open_issues_count: int
    recorded_at: datetime
