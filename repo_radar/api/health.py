"""
Health check endpoints
"""

import redis
from fastapi import APIRouter, Depends
from pymongo.database import Database
from pymongo.errors import PyMongoError

from repo_radar.config import settings
from repo_radar.database.mongo import get_db
from repo_radar.utils.datetime import utc_now

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Simple API health check."""
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@router.get("/health/db")
def database_health(db: Database = Depends(get_db)):
    """MongoDB health check."""
    try:
        db.command("ping")
    except PyMongoError as exc:
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(exc),
            "timestamp": utc_now().isoformat(),
        }

    return {
        "status": "healthy",
        "database": "connected",
        "timestamp": utc_now().isoformat(),
    }


@router.get("/health/broker")
def broker_health():
    """Redis broker health check (background snapshot and cleanup jobs)."""
    client = redis.from_url(settings.REDIS_URL, socket_connect_timeout=2)
    try:
        client.ping()
    except redis.RedisError as exc:
        return {
            "status": "unhealthy",
            "broker": "disconnected",
            "error": str(exc),
            "timestamp": utc_now().isoformat(),
        }
    finally:
        client.close()

    return {
        "status": "healthy",
        "broker": "connected",
        "timestamp": utc_now().isoformat(),
    }
