"""
Sorting helpers for repository lists.

Repositories are the normalized dicts produced by ``to_repository``. Every
helper returns a new list and leaves its input untouched.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Literal

from repo_radar.utils.datetime import parse_datetime

SortField = Literal["name", "stars", "updated", "created", "growth_rate", "issues"]
SortDirection = Literal["asc", "desc"]

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _timestamp(value: Any) -> datetime:
    return parse_datetime(value, default_now=False) or _EPOCH


def _growth_rate(repo: Dict[str, Any]) -> float:
    # No metrics (or no baseline yet) sorts as zero growth
    metrics = repo.get("metrics") or {}
    return metrics.get("stars_growth_rate") or 0.0


SORT_KEYS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    "name": lambda repo: (repo.get("full_name") or "").lower(),
    "stars": lambda repo: repo.get("stargazers_count") or 0,
    "updated": lambda repo: _timestamp(repo.get("updated_at")),
    "created": lambda repo: _timestamp(repo.get("created_at")),
    "growth_rate": _growth_rate,
    "issues": lambda repo: repo.get("open_issues_count") or 0,
}


def sort_repositories(
    repos: List[Dict[str, Any]],
    field: SortField,
    direction: SortDirection = "desc",
) -> List[Dict[str, Any]]:
    key = SORT_KEYS.get(field)
    if key is None:
        return list(repos)
    return sorted(repos, key=key, reverse=direction == "desc")

