"""User-facing error messages shared by the API and the dashboard."""

# Session / auth provider
CONNECTION_FAILED = (
    "Failed to connect to authentication service. "
    "Please check your internet connection and try again."
)
UNEXPECTED_ERROR = "An unexpected error occurred. Please try again."
LOGIN_FAILED = "An unexpected error occurred during login. Please try again."
NOT_AUTHENTICATED = "Not authenticated"
SESSION_EXPIRED = "Your session has expired. Please sign in again."

# GitHub
GITHUB_AUTH_FAILED = "GitHub authentication failed. Please sign in again."
REAUTH_REQUIRED = "No GitHub token available - re-authentication required"
GITHUB_FORBIDDEN = "GitHub API access forbidden. Please check your permissions."
INVALID_SEARCH_QUERY = "Invalid search query. Please check your search terms."
OAUTH_NOT_CONFIGURED = "GitHub OAuth credentials are not configured. Set GITHUB_CLIENT_ID/SECRET."
OAUTH_INVALID_STATE = "Invalid or expired OAuth state"
TOKEN_REFRESH_FAILED = "token_refresh_failed"

# Radars
RADAR_NOT_FOUND = "Radar not found"
RADAR_NAME_EMPTY = "Radar name cannot be empty"
RADAR_NAME_TOO_LONG = "Radar name cannot exceed {max_length} characters"
RADAR_LIMIT_REACHED = (
    "You can only have {limit} radars. Delete an existing radar to create a new one."
)
RADAR_REPO_LIMIT_REACHED = (
    "This radar already has {limit} repositories. Remove some to add more."
)
TOTAL_REPO_LIMIT_REACHED = (
    "You've reached the limit of {limit} total repositories across all radars."
)
REPO_ALREADY_IN_RADAR = "This repository is already in this radar"

# Repositories
REPOSITORY_NOT_FOUND = "Repository not found"

# Onboarding
UNKNOWN_TOUR_STEP = "Unknown tour step: {step_id}"


class ErrorKind:
    """UX classification of an error, used by the dashboard to pick a display."""

    CONNECTION_ERROR = "connection_error"
    ACTION_ERROR = "action_error"
    NOT_FOUND = "not_found"


def get_error_message(error: object, default_message: str) -> str:
    """Return the error's own message, or ``default_message`` when it has none."""
    if isinstance(error, BaseException):
        message = str(error).strip()
        if message:
            return message
    return default_message


def error_kind_for_status(status_code: int) -> str:
    """Classify an error response so the dashboard can pick how to show it."""
    if status_code == 404:
        return ErrorKind.NOT_FOUND
    if status_code >= 500:
        return ErrorKind.CONNECTION_ERROR
    return ErrorKind.ACTION_ERROR
