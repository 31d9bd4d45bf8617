from __future__ import annotations

from datetime import datetime
from typing import Optional

from .base import BaseEntity


class User(BaseEntity):
    """Account derived from a GitHub OAuth login."""

    github_user_id: str
    login: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None

    # Soft delete marker; a new sign-in clears it
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
