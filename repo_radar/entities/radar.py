"""
Radar entities.

A Radar is a user-owned, named collection of GitHub repositories. Membership
is stored in ``radar_repos``; the owner id is denormalized onto each
membership so total-repository counts and ownership checks are one query.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from repo_radar.constants.limits import RADAR_NAME_MAX_LENGTH
from repo_radar.utils.datetime import utc_now

from .base import BaseEntity, PyObjectId


class Radar(BaseEntity):
    user_id: PyObjectId = Field(..., description="Owner of the radar")
    name: str = Field(..., min_length=1, max_length=RADAR_NAME_MAX_LENGTH)


class RadarRepo(BaseEntity):
    radar_id: PyObjectId
    user_id: PyObjectId
    github_repo_id: int = Field(..., description="GitHub's numeric repository id")
    added_at: datetime = Field(default_factory=utc_now)
