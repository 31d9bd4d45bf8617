"""
Tour data for the onboarding tour.

A user taking the tour without any radar of their own is shown the
"React Ecosystem" radar holding a single demo repository.
"""

from typing import Any, Dict

from repo_radar.utils.datetime import utc_now

TOUR_RADAR_ID = "tour-demo-radar"
TOUR_RADAR_NAME = "React Ecosystem"

_TOUR_REPO: Dict[str, Any] = {
    "id": 10270250,
    "name": "react",
    "full_name": "facebook/react",
    "owner": {
        "login": "facebook",
        "avatar_url": "https://avatars.githubusercontent.com/u/69631?v=4",
    },
    "description": "The library for web and native user interfaces.",
    "html_url": "https://github.com/facebook/react",
    "stargazers_count": 232000,
    "open_issues_count": 950,
    "forks_count": 47400,
    "language": "JavaScript",
    "topics": ["declarative", "frontend", "javascript", "library", "react", "ui"],
    "private": False,
    "updated_at": "2025-01-15T14:30:00Z",
    "pushed_at": "2025-01-15T14:30:00Z",
    "created_at": "2013-05-24T16:15:54Z",
    "starred_at": "2025-01-15T10:00:00Z",
    "is_starred": True,
    "metrics": {
        "stars_gained": 4200,
        "stars_growth_rate": 0.018,
        "is_hot": False,
        "baseline_stars": 227800,
        "baseline_recorded_at": None,
    },
}


def is_tour_radar(radar_id: str) -> bool:
    return radar_id == TOUR_RADAR_ID


def get_tour_radar() -> Dict[str, Any]:
    now = utc_now()
    return {
        "id": TOUR_RADAR_ID,
        "name": TOUR_RADAR_NAME,
        "created_at": now,
        "updated_at": now,
        "repo_count": 1,
    }


def get_tour_repo() -> Dict[str, Any]:
    # Copy so callers can decorate the result freely
    repo = dict(_TOUR_REPO)
    repo["owner"] = dict(_TOUR_REPO["owner"])
    repo["metrics"] = dict(_TOUR_REPO["metrics"])
    return repo
