from __future__ import annotations

from datetime import datetime

from pydantic import Field

from repo_radar.utils.datetime import utc_now

from .base import BaseEntity


class StarSnapshot(BaseEntity):
    """Daily star/issue count of a repository, the history growth is measured against."""

    github_repo_id: int
    stargazers_count: int
    open_issues_count: int = 0
    recorded_at: datetime = Field(default_factory=utc_now)
