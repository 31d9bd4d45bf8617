from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from repo_radar.api.dependencies import get_github_client
from repo_radar.database.mongo import get_db
from repo_radar.dtos import RepositorySearchResponse
from repo_radar.middleware.auth import get_current_user
from repo_radar.services.explore_service import ExploreService
from repo_radar.services.github.github_client import GitHubClient, SearchSort

router = APIRouter(prefix="/explore", tags=["Explore"])


@router.get("/search", response_model=RepositorySearchResponse)
def explore_search(
    q: str = Query(..., min_length=1, description='Wrap in quotes for an exact name match'),
    page: int = Query(1, ge=1),
    per_page: int = Query(30, ge=1, le=100),
    sort: SearchSort = Query("best-match"),
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
    github: GitHubClient = Depends(get_github_client),
):
    """Search all of GitHub; results already starred by the user are flagged."""
    return ExploreService(db, github, str(user["_id"])).search(q, page=page, per_page=per_page, sort=sort)
