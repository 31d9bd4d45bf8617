"""Radar management: named, user-owned collections of repositories."""

import logging
from typing import Any, Dict, List, Set

from bson import ObjectId
from fastapi import HTTPException, status
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from repo_radar.constants.error_messages import (
    RADAR_LIMIT_REACHED,
    RADAR_NAME_EMPTY,
    RADAR_NAME_TOO_LONG,
    RADAR_NOT_FOUND,
    RADAR_REPO_LIMIT_REACHED,
    REPO_ALREADY_IN_RADAR,
    TOTAL_REPO_LIMIT_REACHED,
)
from repo_radar.constants.limits import (
    MAX_RADARS_PER_USER,
    MAX_REPOS_PER_RADAR,
    MAX_TOTAL_REPOS,
    RADAR_NAME_MAX_LENGTH,
)
from repo_radar.core.tracing import TracingContext
from repo_radar.dtos import RadarRepoResponse, RadarResponse
from repo_radar.entities.radar import Radar, RadarRepo
from repo_radar.repositories.radar import RadarRepoRepository, RadarRepository
from repo_radar.services.demo_data import get_tour_radar, get_tour_repo, is_tour_radar
from repo_radar.services.repository_service import RepositoryService

logger = logging.getLogger(__name__)


def validate_radar_name(name: str | None) -> str:
    """Trim the name and enforce 1..50 characters."""
    trimmed = (name or "").strip()
    if not trimmed:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=RADAR_NAME_EMPTY)
    if len(trimmed) > RADAR_NAME_MAX_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=RADAR_NAME_TOO_LONG.format(max_length=RADAR_NAME_MAX_LENGTH),
        )
    return trimmed


def _radar_response(radar: Radar, repo_count: int = 0) -> RadarResponse:
    return RadarResponse(
        id=str(radar.id),
        name=radar.name,
        created_at=radar.created_at,
        updated_at=radar.updated_at,
        repo_count=repo_count,
    )


def _membership_response(membership: RadarRepo) -> RadarRepoResponse:
    return RadarRepoResponse(
        radar_id=str(membership.radar_id),
        github_repo_id=membership.github_repo_id,
        added_at=membership.added_at,
    )


class RadarService:
    def __init__(self, db: Database):
        self.db = db
        self.radar_repo = RadarRepository(db)
        self.membership_repo = RadarRepoRepository(db)

    def _get_owned_radar(self, user_id: str, radar_id: str) -> Radar:
        radar = self.radar_repo.find_owned(user_id, radar_id)
        if radar is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=RADAR_NOT_FOUND)
        return radar

    def list_radars(self, user_id: str) -> List[RadarResponse]:
        radars = self.radar_repo.list_by_user(user_id)
        counts = self.membership_repo.counts_by_radar([radar.id for radar in radars])
        return [_radar_response(radar, counts.get(str(radar.id), 0)) for radar in radars]

    def get_radar(self, user_id: str, radar_id: str) -> RadarResponse:
        if is_tour_radar(radar_id):
            return RadarResponse(**get_tour_radar())
        radar = self._get_owned_radar(user_id, radar_id)
        return _radar_response(radar, self.membership_repo.count_by_radar(radar.id))

    def create_radar(self, user_id: str, name: str) -> RadarResponse:
        name = validate_radar_name(name)

        if self.radar_repo.count_by_user(user_id) >= MAX_RADARS_PER_USER:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=RADAR_LIMIT_REACHED.format(limit=MAX_RADARS_PER_USER),
            )

        radar = self.radar_repo.insert_one(
            Radar(user_id=ObjectId(user_id), name=name)
        )
        TracingContext.set(radar_id=str(radar.id))
        logger.info("Created radar %s for user %s", radar.id, user_id)
        return _radar_response(radar)

    def rename_radar(self, user_id: str, radar_id: str, name: str) -> RadarResponse:
        name = validate_radar_name(name)
        radar = self._get_owned_radar(user_id, radar_id)

        updated = self.radar_repo.update_one(radar.id, {"name": name})
        if updated is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=RADAR_NOT_FOUND)
        return _radar_response(updated, self.membership_repo.count_by_radar(radar.id))

    def delete_radar(self, user_id: str, radar_id: str) -> None:
        radar = self._get_owned_radar(user_id, radar_id)
        removed = self.membership_repo.delete_by_radar(radar.id)
        self.radar_repo.delete_owned(user_id, radar.id)
        logger.info("Deleted radar %s and %s memberships", radar.id, removed)

    def list_radar_repos(self, user_id: str, radar_id: str) -> List[RadarRepoResponse]:
        radar = self._get_owned_radar(user_id, radar_id)
        return [_membership_response(m) for m in self.membership_repo.list_by_radar(radar.id)]

    def get_all_radar_repo_ids(self, user_id: str) -> Set[int]:
        return self.membership_repo.repo_ids_for_user(user_id)

    def add_repo_to_radar(self, user_id: str, radar_id: str, github_repo_id: int) -> RadarRepoResponse:
        radar = self._get_owned_radar(user_id, radar_id)

        if self.membership_repo.count_by_radar(radar.id) >= MAX_REPOS_PER_RADAR:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=RADAR_REPO_LIMIT_REACHED.format(limit=MAX_REPOS_PER_RADAR),
            )

        if self.membership_repo.count_by_user(user_id) >= MAX_TOTAL_REPOS:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=TOTAL_REPO_LIMIT_REACHED.format(limit=MAX_TOTAL_REPOS),
            )

        membership = RadarRepo(
            radar_id=radar.id,
            user_id=radar.user_id,
            github_repo_id=github_repo_id,
        )
        try:
            membership = self.membership_repo.insert_one(membership)
        except DuplicateKeyError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=REPO_ALREADY_IN_RADAR,
            )
        return _membership_response(membership)

    def remove_repo_from_radar(self, user_id: str, radar_id: str, github_repo_id: int) -> None:
        radar = self._get_owned_radar(user_id, radar_id)
        self.membership_repo.remove(radar.id, github_repo_id)

    def get_radars_containing_repo(self, user_id: str, github_repo_id: int) -> List[str]:
        return self.membership_repo.radar_ids_containing(user_id, github_repo_id)

    def list_radar_repositories(
        self, user_id: str, radar_id: str, repository_service: RepositoryService
    ) -> Dict[str, Any]:
        """The radar and its repositories (newest first), hydrated through the cache."""
        if is_tour_radar(radar_id):
            return {"radar": get_tour_radar(), "repositories": [get_tour_repo()]}

        radar = self._get_owned_radar(user_id, radar_id)
        memberships = self.membership_repo.list_by_radar(radar.id)
        repositories = repository_service.get_repositories(
            [m.github_repo_id for m in memberships]
        )
        return {
            "radar": _radar_response(radar, len(memberships)),
            "repositories": repositories,
        }
