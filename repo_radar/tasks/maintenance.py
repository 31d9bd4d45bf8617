"""
Maintenance Tasks - Scheduled cleanup and housekeeping jobs.

These tasks run periodically via Celery Beat (see ``celery_app.beat_schedule``).
"""

import logging
from typing import Any, Dict

from celery import shared_task

from repo_radar.core.tracing import tracing_scope
from repo_radar.database.mongo import get_database
from repo_radar.repositories.radar import RadarRepoRepository
from repo_radar.repositories.repo_cache import RepoCacheRepository
from repo_radar.services.metrics import MetricsService
from repo_radar.services.repo_cache_service import RepoCacheService
from repo_radar.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@shared_task(
    name="repo_radar.tasks.maintenance.cleanup_repo_cache",
    bind=True,
    queue="maintenance",
)
def cleanup_repo_cache(self) -> Dict[str, Any]:
    """
    Delete repository cache entries that expired more than
    ``REPO_CACHE_CLEANUP_AFTER_DAYS`` ago.

    Returns:
        Dict with deleted count and timestamp.
    """
    with tracing_scope(correlation_id=self.request.id or "", task_name="cleanup_repo_cache"):
        deleted_count = RepoCacheService(get_database()).cleanup_expired()
        logger.info(f"Repository cache cleanup completed: deleted {deleted_count} entries")

    return {
        "status": "success",
        "deleted_count": deleted_count,
        "executed_at": utc_now().isoformat(),
    }


@shared_task(
    name="repo_radar.tasks.maintenance.record_star_snapshots",
    bind=True,
    queue="maintenance",
)
def record_star_snapshots(self) -> Dict[str, Any]:
    """
    Record today's star count for every repository in any radar.

    Counts come from the repository cache, which is refreshed whenever a user
    views the repository. Repositories never cached are skipped, as are ones
    that already have a snapshot today.
    """
    with tracing_scope(correlation_id=self.request.id or "", task_name="record_star_snapshots"):
        db = get_database()
        cache_repo = RepoCacheRepository(db)
        metrics = MetricsService(db)

        recorded = skipped = 0
        for github_repo_id in RadarRepoRepository(db).all_tracked_repo_ids():
            entry = cache_repo.find_entry(github_repo_id)
            if entry is None:
                skipped += 1
                continue

            snapshot = metrics.record_snapshot(
                github_repo_id,
                entry.stargazers_count,
                entry.cached_data.get("open_issues_count", 0),
            )
            if snapshot is None:
                skipped += 1
            else:
                recorded += 1

        logger.info(f"Star snapshots recorded: {recorded}, skipped: {skipped}")

    return {
        "status": "success",
        "recorded": recorded,
        "skipped": skipped,
        "executed_at": utc_now().isoformat(),
    }
