"""
StarredCache Entity - a user's bulk starred list, kept for a few minutes.

Starred search, starred ids and the explore ``is_starred`` flags read the
bulk list from here while it is fresh. Starring or unstarring drops the entry.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from pydantic import Field

from .base import BaseEntity, PyObjectId


class StarredCache(BaseEntity):
    user_id: PyObjectId
    repositories: List[Dict[str, Any]] = Field(default_factory=list)
    total_fetched: int = 0
    total_starred: int = 0
    fetched_at: datetime
    expires_at: datetime
