from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pymongo.database import Database

from repo_radar.api.dependencies import get_github_client
from repo_radar.constants.error_messages import REPOSITORY_NOT_FOUND
from repo_radar.database.mongo import get_db
from repo_radar.dtos import (
    IssueCountResponse,
    ReleaseResponse,
    RepositoryDetailResponse,
    RepositoryResponse,
    StarHistoryPoint,
)
from repo_radar.middleware.auth import get_current_user
from repo_radar.services.github.github_client import GitHubClient
from repo_radar.services.metrics import MetricsService
from repo_radar.services.repository_service import RepositoryService

router = APIRouter(prefix="/repos", tags=["Repositories"])


@router.get("/{github_repo_id}", response_model=RepositoryResponse)
def get_repository(
    github_repo_id: int,
    force_refresh: bool = Query(False, description="Bypass the repository cache"),
    db: Database = Depends(get_db),
    github: GitHubClient = Depends(get_github_client),
):
    repo = RepositoryService(db, github).get_repository(github_repo_id, force_refresh=force_refresh)
    if repo is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=REPOSITORY_NOT_FOUND)
    return repo


@router.get("/{github_repo_id}/detail", response_model=RepositoryDetailResponse)
def get_repository_detail(
    github_repo_id: int,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
    github: GitHubClient = Depends(get_github_client),
):
    """Repository data, star state, radar membership and growth metrics."""
    service = RepositoryService(db, github)
    return service.get_repository_detail(str(user["_id"]), github_repo_id)


@router.get("/{github_repo_id}/history", response_model=List[StarHistoryPoint])
def get_star_history(
    github_repo_id: int,
    limit: int = Query(90, ge=1, le=365),
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Recorded daily star counts, newest first."""
    snapshots = MetricsService(db).star_history(github_repo_id, limit=limit)
    return [snapshot.model_dump() for snapshot in snapshots]


@router.get("/{owner}/{repo}/releases", response_model=List[ReleaseResponse])
def list_releases(
    owner: str,
    repo: str,
    db: Database = Depends(get_db),
    github: GitHubClient = Depends(get_github_client),
):
    """The 10 most recent releases."""
    return RepositoryService(db, github).list_releases(owner, repo)


@router.get("/{owner}/{repo}/issues/count", response_model=IssueCountResponse)
def get_issue_count(
    owner: str,
    repo: str,
    db: Database = Depends(get_db),
    github: GitHubClient = Depends(get_github_client),
):
    return {"open_issues": RepositoryService(db, github).get_issue_count(owner, repo)}
