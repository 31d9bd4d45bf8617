"""Repository layer for database operations"""

from .base import BaseRepository
from .oauth_identity import OAuthIdentityRepository
from .radar import RadarRepoRepository, RadarRepository
from .repo_cache import RepoCacheRepository
from .star_snapshot import StarSnapshotRepository
from .starred_cache import StarredCacheRepository
from .user import UserRepository
from .user_preferences import UserPreferencesRepository

__all__ = [
    "BaseRepository",
    # Accounts
    "UserRepository",
    "OAuthIdentityRepository",
    "UserPreferencesRepository",
    # Radars
    "RadarRepository",
    "RadarRepoRepository",
    # GitHub data
    "RepoCacheRepository",
    "StarSnapshotRepository",
    "StarredCacheRepository",
]
