"""
RepoCache Entity - shared cache of GitHub repository metadata.

Shared across all users. The stored ETag lets the service issue conditional
requests (``If-None-Match``) so an unchanged repository costs no rate limit.
Expired entries are kept for a few days as a fallback when GitHub is rate
limiting, then removed by the cleanup task.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from .base import BaseEntity


class RepoCache(BaseEntity):
    github_repo_id: int = Field(..., description="GitHub's numeric repository id")

    full_name: str = Field(..., description="owner/name")
    owner: str
    name: str
    stargazers_count: int = 0
    language: Optional[str] = None
    is_private: bool = False

    cached_data: Dict[str, Any] = Field(
        default_factory=dict,
        description="Normalized repository payload served to the dashboard",
    )
    etag: Optional[str] = None
    fetched_at: datetime
    expires_at: datetime
