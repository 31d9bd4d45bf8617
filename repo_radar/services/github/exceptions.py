"""Exceptions raised by the GitHub REST client."""

from __future__ import annotations

from datetime import datetime


class GithubError(Exception):
    """Base exception for GitHub API failures."""


class GithubAuthError(GithubError):
    """Raised when GitHub rejects the access token (HTTP 401)."""


class GithubReauthRequiredError(GithubError):
    """Raised when no usable GitHub token is stored and the user must sign in again."""


class GithubForbiddenError(GithubError):
    """Raised for a 403 that is not a rate limit."""


class GithubNotFoundError(GithubError):
    """Raised when the requested repository or resource does not exist."""


class GithubValidationError(GithubError):
    """Raised when GitHub rejects the request parameters (HTTP 422)."""


class GithubRateLimitError(GithubError):
    """Raised when the upstream service enforces a rate limit."""

    def __init__(
        self,
        message: str,
        retry_after: int | float | None = None,
        reset_at: datetime | None = None,
    ):
        super().__init__(message)
        self.retry_after = retry_after
        self.reset_at = reset_at


class GithubRetryableError(GithubError):
    """Raised for transient issues where retrying later may succeed."""


def is_github_auth_error(error: BaseException | None) -> bool:
    """True when the error means the user has to re-authenticate with GitHub."""
    if error is None:
        return False
    return isinstance(error, (GithubAuthError, GithubReauthRequiredError))
