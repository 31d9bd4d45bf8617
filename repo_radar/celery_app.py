"""Celery application: Redis broker and the daily maintenance schedule."""

from celery import Celery
from celery.schedules import crontab

from repo_radar.config import settings
from repo_radar.core.logging import setup_logging

celery_app = Celery(
    "repo_radar",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["repo_radar.tasks.maintenance"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_default_queue="maintenance",
    worker_hijack_root_logger=False,
    result_expires=60 * 60 * 24,
)

celery_app.conf.beat_schedule = {
    "cleanup-repo-cache": {
        "task": "repo_radar.tasks.maintenance.cleanup_repo_cache",
        "schedule": crontab(hour=3, minute=0),
    },
    "record-star-snapshots": {
        "task": "repo_radar.tasks.maintenance.record_star_snapshots",
        "schedule": crontab(hour=0, minute=30),
    },
}

setup_logging()
