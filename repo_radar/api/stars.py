from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from pymongo.database import Database

from repo_radar.api.dependencies import get_github_client
from repo_radar.database.mongo import get_db
from repo_radar.dtos import (
    RepositorySearchResponse,
    StarredAllResponse,
    StarredIdsResponse,
    StarredPageResponse,
    StarStatusResponse,
)
from repo_radar.middleware.auth import get_current_user
from repo_radar.services.github.github_client import GitHubClient
from repo_radar.services.starred_service import StarredService

router = APIRouter(prefix="/stars", tags=["Starred"])


def get_starred_service(
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
    github: GitHubClient = Depends(get_github_client),
) -> StarredService:
    return StarredService(db, github, str(user["_id"]))


@router.get("", response_model=StarredPageResponse)
def list_starred(
    page: int = Query(1, ge=1),
    per_page: int = Query(30, ge=1, le=100),
    sort: Literal["created", "updated"] = Query("updated"),
    direction: Literal["asc", "desc"] = Query("desc"),
    service: StarredService = Depends(get_starred_service),
):
    """One page of starred repositories, for infinite scroll."""
    return service.list_starred(page, per_page, sort, direction)


@router.get("/all", response_model=StarredAllResponse)
def list_all_starred(service: StarredService = Depends(get_starred_service)):
    """Up to 500 starred repositories, most-starred first."""
    return service.list_all_starred()


@router.get("/search", response_model=RepositorySearchResponse)
def search_starred(
    q: str = Query("", description="Matches name, description, language and topics"),
    page: int = Query(1, ge=1),
    per_page: int = Query(30, ge=1, le=100),
    sort: Literal["updated", "stars", "created"] = Query("updated"),
    service: StarredService = Depends(get_starred_service),
):
    return service.search_starred(q, page, per_page, sort)


@router.get("/ids", response_model=StarredIdsResponse)
def get_starred_ids(service: StarredService = Depends(get_starred_service)):
    return {"ids": service.get_starred_ids()}


@router.get("/{owner}/{repo}", response_model=StarStatusResponse)
def get_star_status(
    owner: str,
    repo: str,
    service: StarredService = Depends(get_starred_service),
):
    return {"is_starred": service.is_starred(owner, repo)}


@router.put("/{owner}/{repo}", status_code=status.HTTP_204_NO_CONTENT)
def star_repository(
    owner: str,
    repo: str,
    service: StarredService = Depends(get_starred_service),
):
    service.star(owner, repo)


@router.delete("/{owner}/{repo}", status_code=status.HTTP_204_NO_CONTENT)
def unstar_repository(
    owner: str,
    repo: str,
    service: StarredService = Depends(get_starred_service),
):
    service.unstar(owner, repo)
