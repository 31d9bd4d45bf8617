"""Onboarding tour DTOs"""

from typing import List, Literal, Optional

from pydantic import BaseModel

TourPage = Literal["stars", "radar", "repo-detail"]


class TourBackTo(BaseModel):
    step_id: str
    path: str


class TourButton(BaseModel):
    text: str
    action: Literal["back", "back_to", "next", "complete"]
    secondary: bool = False
    step_index: Optional[int] = None
    back_to: Optional[TourBackTo] = None


class TourStepResponse(BaseModel):
    id: str
    target: str
    text: str
    page: TourPage
    placement: Optional[str] = None
    can_click_target: bool = False
    advance_by_clicking_target: bool = False
    tooltip_delay_ms: Optional[int] = None
    back_to: Optional[TourBackTo] = None
    buttons: List[TourButton]


class TourStateResponse(BaseModel):
    has_completed_tour: bool
    is_tour_active: bool
    current_step_id: Optional[str] = None
    demo_mode: bool = False


class TourStepsResponse(BaseModel):
    steps: List[TourStepResponse]
    page: Optional[TourPage] = None


class TourStepUpdate(BaseModel):
    step_id: str


class TourResumeResponse(BaseModel):
    page: Optional[TourPage] = None
    step_id: Optional[str] = None
    step_index: Optional[int] = None


class DemoModeUpdate(BaseModel):
    enabled: bool
