"""
Onboarding tour.

The tour is an ordered list of steps spread over three pages (stars, radar
and repo-detail). The dashboard renders the overlay; this module owns the
step definitions, the buttons each step shows and the user's progress, so a
tour interrupted by navigation resumes on the right step.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Literal, Optional

from fastapi import HTTPException, status
from pymongo.database import Database

from repo_radar.constants.error_messages import UNKNOWN_TOUR_STEP
from repo_radar.repositories.radar import RadarRepository
from repo_radar.repositories.user_preferences import UserPreferencesRepository
from repo_radar.services.demo_data import TOUR_RADAR_ID, TOUR_RADAR_NAME

logger = logging.getLogger(__name__)

TourPage = Literal["stars", "radar", "repo-detail"]


@dataclass(frozen=True)
class TourBackTo:
    step_id: str
    path: str


@dataclass(frozen=True)
class TourStep:
    id: str
    target: str
    text: str
    page: TourPage
    placement: Optional[str] = None
    can_click_target: bool = False
    advance_by_clicking_target: bool = False
    tooltip_delay_ms: Optional[int] = None
    back_to: Optional[TourBackTo] = None


def _my_stars_text(has_starred_repos: bool) -> str:
    if has_starred_repos:
        return (
            "Your starred GitHub repositories appear here. "
            "Click any repo to see detailed metrics."
        )
    return "Star repositories on GitHub to start tracking their momentum here."


def _sidebar_radars_text(is_using_tour_radar: bool) -> str:
    if is_using_tour_radar:
        return (
            "Your Radars appear in the sidebar. We've added a "
            f"<strong>{TOUR_RADAR_NAME}</strong> radar for this tour. "
            "<strong>Click it to continue.</strong>"
        )
    return "Your Radars appear in the sidebar. <strong>Click any Radar to continue.</strong>"


def _radar_intro_text(is_using_tour_radar: bool) -> str:
    if is_using_tour_radar:
        return (
            f"This {TOUR_RADAR_NAME} radar contains demo data for the tour. "
            "Create your own Radars to organize repos by your interests, "
            "more flexible than just starring on GitHub."
        )
    return (
        "Use Radars to collect individual repositories. This lets you keep repos "
        "organized by your interests and gives you more flexibility than simply "
        "adding to the starred repos bucket on GitHub."
    )


def get_tour_steps(has_starred_repos: bool = True, is_using_tour_radar: bool = False) -> List[TourStep]:
    return [
        TourStep(
            id="welcome",
            target="",
            text=(
                "Welcome to Repo Radar! Track the momentum of your favorite GitHub "
                "repositories: star growth, releases and activity, all in one place."
                "<br><br><em>Tip: Use arrow keys or Tab to navigate this tour.</em>"
            ),
            page="stars",
        ),
        TourStep(
            id="my-stars-heading",
            target='[data-tour="my-stars-heading"]',
            text=_my_stars_text(has_starred_repos),
            page="stars",
            placement="bottom",
        ),
        TourStep(
            id="explore-link",
            target='[data-tour="explore-link"]',
            text="Search for any GitHub repository on the Explore page and add it to your Radars.",
            page="stars",
            placement="right",
        ),
        TourStep(
            id="sidebar-radars",
            target='[data-tour="sidebar-radars"]',
            text=_sidebar_radars_text(is_using_tour_radar),
            page="stars",
            placement="right",
            can_click_target=True,
            advance_by_clicking_target=True,
        ),
        TourStep(
            id="radar-intro",
            target='[data-tour="radar-name"]',
            text=_radar_intro_text(is_using_tour_radar),
            page="radar",
            placement="bottom",
            back_to=TourBackTo(step_id="sidebar-radars", path="/stars"),
            tooltip_delay_ms=100,
        ),
        TourStep(
            id="radar-repos",
            target='[data-tour="radar-icon"]',
            text=(
                "Use the radar icon to manage which Radars contain this repo. Removing "
                "a repo from one Radar will not remove it from any other Radar you've saved it to."
            ),
            page="radar",
            placement="left",
        ),
        TourStep(
            id="click-repo",
            target='[data-tour="repo-card"]',
            text="<strong>Click on the repo card</strong> to see detailed metrics, releases, and more.",
            page="radar",
            placement="right",
            can_click_target=True,
            advance_by_clicking_target=True,
        ),
        TourStep(
            id="repo-header",
            target='[data-tour="repo-name"]',
            text=(
                "The repository page is a WIP. Coming soon: star trends and "
                "maintainer activity metrics."
            ),
            page="repo-detail",
            placement="bottom",
            back_to=TourBackTo(step_id="click-repo", path=f"/radar/{TOUR_RADAR_ID}"),
            tooltip_delay_ms=100,
        ),
        TourStep(
            id="repo-detail-radar-icon",
            target='[data-tour="repo-radar-icon"]',
            text="Add or remove this repo from any of your Radars without leaving this page.",
            page="repo-detail",
            placement="left",
            tooltip_delay_ms=100,
        ),
        TourStep(
            id="releases",
            target='[data-tour="releases"]',
            text="Expand any release to see version details and release notes.",
            page="repo-detail",
            placement="top",
        ),
        TourStep(
            id="help-button",
            target='[data-tour="help-button"]',
            text=(
                "Thanks for exploring Repo Radar! The tour is complete, but you can "
                "retake it from the Help menu at any time."
            ),
            page="repo-detail",
            placement="bottom",
        ),
    ]


TOUR_STEP_IDS = [step.id for step in get_tour_steps()]


def get_current_page(pathname: str) -> Optional[TourPage]:
    if pathname == "/stars":
        return "stars"
    if pathname.startswith("/radar/"):
        return "radar"
    if pathname.startswith("/repo/"):
        return "repo-detail"
    return None


def steps_for_page(steps: List[TourStep], page: Optional[TourPage]) -> List[TourStep]:
    return [step for step in steps if step.page == page]


def _build_buttons(step: TourStep, index: int, is_last: bool) -> List[Dict[str, Any]]:
    buttons: List[Dict[str, Any]] = []

    if step.back_to is not None:
        buttons.append(
            {
                "text": "Back",
                "action": "back_to",
                "secondary": True,
                "back_to": asdict(step.back_to),
            }
        )
    elif index > 0:
        buttons.append(
            {"text": "Back", "action": "back", "secondary": True, "step_index": index - 1}
        )

    # The user advances these steps by clicking the highlighted element
    if not step.advance_by_clicking_target:
        buttons.append(
            {
                "text": "Finish" if is_last else "Next",
                "action": "complete" if is_last else "next",
            }
        )
    return buttons


def configure_steps(steps: List[TourStep]) -> List[Dict[str, Any]]:
    """Step definitions with the navigation buttons each one shows."""
    configured = []
    for index, step in enumerate(steps):
        payload = asdict(step)
        payload["buttons"] = _build_buttons(step, index, index == len(steps) - 1)
        configured.append(payload)
    return configured


class OnboardingService:
    def __init__(self, db: Database):
        self.db = db
        self.preferences_repo = UserPreferencesRepository(db)
        self.radar_repo = RadarRepository(db)

    def get_state(self, user_id: str) -> Dict[str, Any]:
        prefs = self.preferences_repo.get_or_create(user_id)
        return {
            "has_completed_tour": prefs.has_completed_tour,
            "is_tour_active": prefs.is_tour_active,
            "current_step_id": prefs.current_tour_step_id,
            "demo_mode": prefs.demo_mode,
        }

    def is_using_tour_radar(self, user_id: str) -> bool:
        """The tour falls back to the demo radar while the user has none."""
        return self.radar_repo.count_by_user(user_id) == 0

    def get_steps(
        self,
        user_id: str,
        pathname: Optional[str] = None,
        has_starred_repos: bool = True,
    ) -> Dict[str, Any]:
        steps = get_tour_steps(has_starred_repos, self.is_using_tour_radar(user_id))
        page = get_current_page(pathname) if pathname else None
        if pathname:
            steps = steps_for_page(steps, page)
        return {"steps": configure_steps(steps), "page": page}

    def start_tour(self, user_id: str) -> Dict[str, Any]:
        self.preferences_repo.update_for_user(
            user_id,
            {
                "has_completed_tour": False,
                "is_tour_active": True,
                "current_tour_step_id": TOUR_STEP_IDS[0],
            },
        )
        logger.info("User %s started the onboarding tour", user_id)
        return self.get_state(user_id)

    def set_current_step(self, user_id: str, step_id: str) -> Dict[str, Any]:
        if step_id not in TOUR_STEP_IDS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=UNKNOWN_TOUR_STEP.format(step_id=step_id),
            )
        self.preferences_repo.update_for_user(
            user_id, {"current_tour_step_id": step_id, "is_tour_active": True}
        )
        return self.get_state(user_id)

    def complete_tour(self, user_id: str) -> Dict[str, Any]:
        prefs = self.preferences_repo.get_or_create(user_id)
        updates: Dict[str, Any] = {"is_tour_active": False, "current_tour_step_id": None}
        # A demo session does not mark the real account as onboarded
        if not prefs.demo_mode:
            updates["has_completed_tour"] = True
        self.preferences_repo.update_for_user(user_id, updates)
        return self.get_state(user_id)

    def set_demo_mode(self, user_id: str, enabled: bool) -> Dict[str, Any]:
        self.preferences_repo.update_for_user(user_id, {"demo_mode": enabled})
        return self.get_state(user_id)

    def resume_step_for_page(self, user_id: str, pathname: str) -> Dict[str, Any]:
        """
        Step to show after navigating to ``pathname`` mid-tour.

        The stored step wins when it belongs to this page; otherwise the tour
        picks up at the first step of the page.
        """
        page = get_current_page(pathname)
        steps = get_tour_steps(True, self.is_using_tour_radar(user_id))
        page_steps = steps_for_page(steps, page)
        if page is None or not page_steps:
            return {"page": page, "step_id": None, "step_index": None}

        prefs = self.preferences_repo.get_or_create(user_id)
        page_ids = [step.id for step in page_steps]
        step_id = prefs.current_tour_step_id
        if step_id not in page_ids:
            step_id = page_ids[0]

        return {"page": page, "step_id": step_id, "step_index": page_ids.index(step_id)}
