"""Shared FastAPI dependencies."""

from typing import Iterator

from fastapi import Depends
from pymongo.database import Database

from repo_radar.database.mongo import get_db
from repo_radar.middleware.auth import get_current_user
from repo_radar.services.github.github_client import GitHubClient
from repo_radar.services.github.github_token import get_user_github_client


def get_github_client(
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> Iterator[GitHubClient]:
    """GitHub client for the signed-in user, closed when the request ends."""
    client = get_user_github_client(db, str(user["_id"]))
    try:
        yield client
    finally:
        client.close()
