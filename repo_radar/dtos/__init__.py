"""Request/response models for the HTTP API"""

from .auth import GithubConnection, GithubTokenRefreshResponse, SessionResponse, TokenResponse
from .github import GithubAuthorizeResponse, GithubOAuthInitRequest, RateLimitResponse
from .onboarding import (
    DemoModeUpdate,
    TourResumeResponse,
    TourStateResponse,
    TourStepResponse,
    TourStepsResponse,
    TourStepUpdate,
)
from .radar import (
    RadarCreate,
    RadarMembershipResponse,
    RadarRepoAdd,
    RadarRepoIdsResponse,
    RadarRepoResponse,
    RadarRepositoriesResponse,
    RadarResponse,
    RadarUpdate,
)
from .repository import (
    IssueCountResponse,
    PaginationResponse,
    ReleaseResponse,
    RepositoryDetailResponse,
    RepositoryResponse,
    RepositorySearchResponse,
    StarHistoryPoint,
    StarredAllResponse,
    StarredIdsResponse,
    StarredPageResponse,
    StarStatusResponse,
)
from .user import UserResponse, UserUpdate

__all__ = [
    # Auth
    "TokenResponse",
    "SessionResponse",
    "GithubConnection",
    "GithubTokenRefreshResponse",
    "GithubAuthorizeResponse",
    "GithubOAuthInitRequest",
    "RateLimitResponse",
    # Users
    "UserResponse",
    "UserUpdate",
    # Radars
    "RadarCreate",
    "RadarUpdate",
    "RadarResponse",
    "RadarRepoAdd",
    "RadarRepoResponse",
    "RadarRepositoriesResponse",
    "RadarRepoIdsResponse",
    "RadarMembershipResponse",
    # Repositories
    "RepositoryResponse",
    "RepositoryDetailResponse",
    "RepositorySearchResponse",
    "ReleaseResponse",
    "IssueCountResponse",
    "PaginationResponse",
    "StarredPageResponse",
    "StarredAllResponse",
    "StarredIdsResponse",
    "StarStatusResponse",
    "StarHistoryPoint",
    # Onboarding
    "TourStateResponse",
    "TourStepResponse",
    "TourStepsResponse",
    "TourStepUpdate",
    "TourResumeResponse",
    "DemoModeUpdate",
]
