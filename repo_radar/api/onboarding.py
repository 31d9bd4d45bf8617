from typing import Optional

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from repo_radar.database.mongo import get_db
from repo_radar.dtos import (
    DemoModeUpdate,
    TourResumeResponse,
    TourStateResponse,
    TourStepsResponse,
    TourStepUpdate,
)
from repo_radar.middleware.auth import get_current_user
from repo_radar.services.onboarding import OnboardingService

router = APIRouter(prefix="/onboarding", tags=["Onboarding"])


@router.get("/state", response_model=TourStateResponse)
def get_tour_state(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return OnboardingService(db).get_state(str(user["_id"]))


@router.get("/steps", response_model=TourStepsResponse)
def get_tour_steps(
    pathname: Optional[str] = Query(None, description="Only steps for this page"),
    has_starred_repos: bool = Query(True),
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    return OnboardingService(db).get_steps(str(user["_id"]), pathname, has_starred_repos)


@router.get("/resume", response_model=TourResumeResponse)
def resume_tour(
    pathname: str = Query(...),
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Step to show after the tour navigated to ``pathname``."""
    return OnboardingService(db).resume_step_for_page(str(user["_id"]), pathname)


@router.post("/start", response_model=TourStateResponse)
def start_tour(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return OnboardingService(db).start_tour(str(user["_id"]))


@router.put("/step", response_model=TourStateResponse)
def set_current_step(
    payload: TourStepUpdate,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    return OnboardingService(db).set_current_step(str(user["_id"]), payload.step_id)


@router.post("/complete", response_model=TourStateResponse)
def complete_tour(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return OnboardingService(db).complete_tour(str(user["_id"]))


@router.put("/demo-mode", response_model=TourStateResponse)
def set_demo_mode(
    payload: DemoModeUpdate,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    return OnboardingService(db).set_demo_mode(str(user["_id"]), payload.enabled)
