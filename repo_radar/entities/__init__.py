"""Database entity models - represents the actual structure stored in MongoDB"""

from .base import BaseEntity, PyObjectId, PyObjectIdStr
from .oauth_identity import OAuthIdentity
from .radar import Radar, RadarRepo
from .repo_cache import RepoCache
from .star_snapshot import StarSnapshot
from .starred_cache import StarredCache
from .user import User
from .user_preferences import UserPreferences

__all__ = [
    # Base
    "BaseEntity",
    "PyObjectId",
    "PyObjectIdStr",
    # Accounts
    "User",
    "OAuthIdentity",
    "UserPreferences",
    # Radars
    "Radar",
    "RadarRepo",
    # GitHub data
    "RepoCache",
    "StarSnapshot",
    "StarredCache",
]
