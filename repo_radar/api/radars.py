from typing import List

from fastapi import APIRouter, Depends, status
from pymongo.database import Database

from repo_radar.api.dependencies import get_github_client
from repo_radar.database.mongo import get_db
from repo_radar.dtos import (
    RadarCreate,
    RadarMembershipResponse,
    RadarRepoAdd,
    RadarRepoIdsResponse,
    RadarRepoResponse,
    RadarRepositoriesResponse,
    RadarResponse,
    RadarUpdate,
)
from repo_radar.middleware.auth import get_current_user
from repo_radar.services.demo_data import get_tour_radar
from repo_radar.services.github.github_client import GitHubClient
from repo_radar.services.onboarding import OnboardingService
from repo_radar.services.radar_service import RadarService
from repo_radar.services.repository_service import RepositoryService

router = APIRouter(prefix="/radars", tags=["Radars"])


@router.get("", response_model=List[RadarResponse])
def list_radars(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    """The user's radars, oldest first. A user on the tour without radars gets the demo radar."""
    user_id = str(user["_id"])
    radars = RadarService(db).list_radars(user_id)
    if not radars and OnboardingService(db).get_state(user_id)["is_tour_active"]:
        return [get_tour_radar()]
    return radars


@router.post("", response_model=RadarResponse, status_code=status.HTTP_201_CREATED)
def create_radar(
    payload: RadarCreate,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    return RadarService(db).create_radar(str(user["_id"]), payload.name)


@router.get("/repo-ids", response_model=RadarRepoIdsResponse)
def get_all_radar_repo_ids(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    """GitHub ids of every repository in any of the user's radars."""
    ids = RadarService(db).get_all_radar_repo_ids(str(user["_id"]))
    return {"ids": sorted(ids)}


@router.get("/containing/{github_repo_id}", response_model=RadarMembershipResponse)
def get_radars_containing_repo(
    github_repo_id: int,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    radar_ids = RadarService(db).get_radars_containing_repo(str(user["_id"]), github_repo_id)
    return {"radar_ids": radar_ids}


@router.get("/{radar_id}", response_model=RadarResponse)
def get_radar(radar_id: str, user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return RadarService(db).get_radar(str(user["_id"]), radar_id)


@router.patch("/{radar_id}", response_model=RadarResponse)
def rename_radar(
    radar_id: str,
    payload: RadarUpdate,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    return RadarService(db).rename_radar(str(user["_id"]), radar_id, payload.name)


@router.delete("/{radar_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_radar(radar_id: str, user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    RadarService(db).delete_radar(str(user["_id"]), radar_id)


@router.get("/{radar_id}/repos", response_model=List[RadarRepoResponse])
def list_radar_repos(
    radar_id: str, user: dict = Depends(get_current_user), db: Database = Depends(get_db)
):
    """Memberships, most recently added first."""
    return RadarService(db).list_radar_repos(str(user["_id"]), radar_id)


@router.post(
    "/{radar_id}/repos",
    response_model=RadarRepoResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_repo_to_radar(
    radar_id: str,
    payload: RadarRepoAdd,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    return RadarService(db).add_repo_to_radar(str(user["_id"]), radar_id, payload.github_repo_id)


@router.delete("/{radar_id}/repos/{github_repo_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_repo_from_radar(
    radar_id: str,
    github_repo_id: int,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    RadarService(db).remove_repo_from_radar(str(user["_id"]), radar_id, github_repo_id)


@router.get("/{radar_id}/repositories", response_model=RadarRepositoriesResponse)
def list_radar_repositories(
    radar_id: str,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
    github: GitHubClient = Depends(get_github_client),
):
    """Repositories of a radar with their GitHub data and star metrics."""
    return RadarService(db).list_radar_repositories(
        str(user["_id"]), radar_id, RepositoryService(db, github)
    )
