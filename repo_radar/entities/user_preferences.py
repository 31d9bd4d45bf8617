from __future__ import annotations

from typing import Optional

from .base import BaseEntity, PyObjectId


class UserPreferences(BaseEntity):
    """Per-user flags: onboarding tour progress and demo mode."""

    user_id: PyObjectId
    has_completed_tour: bool = False
    is_tour_active: bool = False
    current_tour_step_id: Optional[str] = None
    demo_mode: bool = False
