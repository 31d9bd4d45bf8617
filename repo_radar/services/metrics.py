"""
Star growth metrics and the "hot repository" badge.

Growth is measured against stored daily star snapshots. The baseline is the
newest snapshot at least ``BASELINE_WINDOW_DAYS`` old; when the history is
shorter than that the oldest snapshot is used. Without any snapshot there is
no baseline, growth is unknown and the repository is never hot.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from pymongo.database import Database

from repo_radar.entities.star_snapshot import StarSnapshot
from repo_radar.repositories.star_snapshot import StarSnapshotRepository
from repo_radar.utils.datetime import start_of_utc_day, utc_now

logger = logging.getLogger(__name__)

# A repo is hot when all three thresholds are met
HOT_REPO_MIN_STARS = 100
HOT_REPO_MIN_GROWTH_RATE = 0.25
HOT_REPO_MIN_STARS_GAINED = 50

BASELINE_WINDOW_DAYS = 7


def calculate_growth_rate(current: int, previous: int) -> float:
    """Growth as a decimal (0.25 = 25%); 0 when there is no previous value."""
    if previous == 0:
        return 0.0
    return (current - previous) / previous


def calculate_stars_gained(current: int, previous: int) -> int:
    return current - previous


def is_hot_repo(stars: int, growth_rate: float, stars_gained: int) -> bool:
    return (
        stars >= HOT_REPO_MIN_STARS
        and growth_rate >= HOT_REPO_MIN_GROWTH_RATE
        and stars_gained >= HOT_REPO_MIN_STARS_GAINED
    )


def empty_metrics() -> Dict[str, Any]:
    return {
        "stars_gained": None,
        "stars_growth_rate": None,
        "is_hot": False,
        "baseline_stars": None,
        "baseline_recorded_at": None,
    }


def metrics_from_baseline(current_stars: int, baseline: Optional[StarSnapshot]) -> Dict[str, Any]:
    if baseline is None:
        return empty_metrics()

    growth_rate = calculate_growth_rate(current_stars, baseline.stargazers_count)
    stars_gained = calculate_stars_gained(current_stars, baseline.stargazers_count)
    return {
        "stars_gained": stars_gained,
        "stars_growth_rate": growth_rate,
        "is_hot": is_hot_repo(current_stars, growth_rate, stars_gained),
        "baseline_stars": baseline.stargazers_count,
        "baseline_recorded_at": baseline.recorded_at,
    }


class MetricsService:
    def __init__(self, db: Database):
        self.db = db
        self.snapshot_repo = StarSnapshotRepository(db)

    def record_snapshot(
        self,
        github_repo_id: int,
        stargazers_count: int,
        open_issues_count: int = 0,
        now: Optional[datetime] = None,
    ) -> Optional[StarSnapshot]:
        """Store today's snapshot; None when one was already taken this UTC day."""
        now = now or utc_now()
        if self.snapshot_repo.find_on_or_after(github_repo_id, start_of_utc_day(now)):
            return None

        snapshot = StarSnapshot(
            github_repo_id=github_repo_id,
            stargazers_count=stargazers_count,
            open_issues_count=open_issues_count,
            recorded_at=now,
        )
        return self.snapshot_repo.insert_one(snapshot)

    def get_baseline(
        self, github_repo_id: int, now: Optional[datetime] = None
    ) -> Optional[StarSnapshot]:
        now = now or utc_now()
        cutoff = now - timedelta(days=BASELINE_WINDOW_DAYS)
        baseline = self.snapshot_repo.find_latest_before(github_repo_id, cutoff)
        if baseline is None:
            baseline = self.snapshot_repo.find_oldest(github_repo_id)
        return baseline

    def compute_repo_metrics(
        self, github_repo_id: int, current_stars: int, now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        return metrics_from_baseline(current_stars, self.get_baseline(github_repo_id, now=now))

    def record_snapshots(
        self, repositories: List[Dict[str, Any]], now: Optional[datetime] = None
    ) -> int:
        """Today's snapshot for every listed repository that has none yet."""
        now = now or utc_now()
        already = self.snapshot_repo.repo_ids_recorded_since(
            [repo["id"] for repo in repositories], start_of_utc_day(now)
        )

        snapshots: Dict[int, StarSnapshot] = {}
        for repo in repositories:
            if repo["id"] in already or repo["id"] in snapshots:
                continue
            snapshots[repo["id"]] = StarSnapshot(
                github_repo_id=repo["id"],
                stargazers_count=repo.get("stargazers_count") or 0,
                open_issues_count=repo.get("open_issues_count") or 0,
                recorded_at=now,
            )
        return self.snapshot_repo.insert_many(list(snapshots.values()))

    def attach_metrics(
        self, repositories: List[Dict[str, Any]], now: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        """
        Fill ``metrics`` on each normalized repository dict in place, then
        record today's star counts so every listed repository builds history.
        """
        if not repositories:
            return repositories

        now = now or utc_now()
        baselines = self.snapshot_repo.find_baselines(
            [repo["id"] for repo in repositories],
            now - timedelta(days=BASELINE_WINDOW_DAYS),
        )
        for repo in repositories:
            repo["metrics"] = metrics_from_baseline(
                repo.get("stargazers_count") or 0, baselines.get(repo["id"])
            )

        self.record_snapshots(repositories, now=now)
        return repositories

    def star_history(self, github_repo_id: int, limit: int = 90) -> List[StarSnapshot]:
        """Most recent snapshots first."""
        return self.snapshot_repo.list_for_repo(github_repo_id, limit=limit)
