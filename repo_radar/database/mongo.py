from __future__ import annotations

"""
MongoDB connection helpers.
"""

import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

logger = logging.getLogger(__name__)

_client: MongoClient | None = None


def get_client() -> MongoClient:
    global _client
    if _client is None:
        # Import settings lazily to ensure env vars are loaded
        from repo_radar.config import settings

        logger.info("Initializing MongoClient for database %s", settings.MONGODB_DB_NAME)
        _client = MongoClient(settings.MONGODB_URI, tz_aware=True)
    return _client


def get_database() -> Database:
    from repo_radar.config import settings

    client = get_client()
    return client[settings.MONGODB_DB_NAME]


def get_db():
    db = get_database()
    try:
        yield db
    finally:
        # PyMongo manages connection pooling automatically; nothing to close here.
        pass


def ensure_indexes(db: Database) -> None:
    """Create the indexes the radar and cache queries rely on (idempotent)."""
    db.users.create_index("github_user_id", unique=True)

    db.oauth_identities.create_index(
        [("provider", ASCENDING), ("external_user_id", ASCENDING)], unique=True
    )
    db.oauth_identities.create_index("user_id")

    db.radars.create_index([("user_id", ASCENDING), ("created_at", ASCENDING)])

    # A repository can only be in a radar once
    db.radar_repos.create_index(
        [("radar_id", ASCENDING), ("github_repo_id", ASCENDING)], unique=True
    )
    db.radar_repos.create_index([("user_id", ASCENDING), ("github_repo_id", ASCENDING)])

    db.repo_cache.create_index("github_repo_id", unique=True)
    db.repo_cache.create_index("expires_at")

    db.starred_cache.create_index("user_id", unique=True)
    db.starred_cache.create_index("expires_at", expireAfterSeconds=0)

    db.star_snapshots.create_index(
        [("github_repo_id", ASCENDING), ("recorded_at", DESCENDING)]
    )

    db.user_preferences.create_index("user_id", unique=True)
    logger.info("MongoDB indexes ensured")
