"""Error codes and exception handlers for standardized API error responses.

Every error body has the shape ``{"detail": str, "code": ErrorCode, "kind": str}``
so the dashboard can decide between an inline message, a retry button or a
re-authentication prompt without parsing message text.
"""

import logging
from enum import Enum
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from repo_radar.constants.error_messages import (
    GITHUB_AUTH_FAILED,
    REAUTH_REQUIRED,
    UNEXPECTED_ERROR,
    error_kind_for_status,
    get_error_message,
)
from repo_radar.services.github.exceptions import (
    GithubError,
    GithubForbiddenError,
    GithubNotFoundError,
    GithubRateLimitError,
    GithubReauthRequiredError,
    GithubValidationError,
    is_github_auth_error,
)

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Client errors (4xx)
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    RATE_LIMITED = "RATE_LIMITED"

    # GitHub session had to be re-established
    GITHUB_REAUTH_REQUIRED = "GITHUB_REAUTH_REQUIRED"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    GATEWAY_ERROR = "GATEWAY_ERROR"


# HTTP status code to ErrorCode mapping
STATUS_TO_ERROR_CODE: dict[int, ErrorCode] = {
    400: ErrorCode.BAD_REQUEST,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION_ERROR,
    429: ErrorCode.RATE_LIMITED,
    500: ErrorCode.INTERNAL_ERROR,
    502: ErrorCode.GATEWAY_ERROR,
    503: ErrorCode.SERVICE_UNAVAILABLE,
}


def get_error_code(status_code: int) -> ErrorCode:
    """Get ErrorCode from HTTP status code."""
    return STATUS_TO_ERROR_CODE.get(status_code, ErrorCode.INTERNAL_ERROR)


def error_response(
    status_code: int,
    detail: str,
    code: Optional[ErrorCode] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "code": (code or get_error_code(status_code)).value,
            "kind": error_kind_for_status(status_code),
        },
        headers=headers,
    )


def github_error_status(exc: GithubError) -> tuple[int, ErrorCode]:
    """Map a GitHub client exception to an HTTP status and error code."""
    if is_github_auth_error(exc):
        return 401, ErrorCode.GITHUB_REAUTH_REQUIRED
    if isinstance(exc, GithubRateLimitError):
        return 429, ErrorCode.RATE_LIMITED
    if isinstance(exc, GithubForbiddenError):
        return 403, ErrorCode.FORBIDDEN
    if isinstance(exc, GithubNotFoundError):
        return 404, ErrorCode.NOT_FOUND
    if isinstance(exc, GithubValidationError):
        return 422, ErrorCode.VALIDATION_ERROR
    return 502, ErrorCode.GATEWAY_ERROR


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), headers=exc.headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return error_response(422, message, ErrorCode.VALIDATION_ERROR)


async def github_exception_handler(request: Request, exc: GithubError) -> JSONResponse:
    status_code, code = github_error_status(exc)
    default = REAUTH_REQUIRED if isinstance(exc, GithubReauthRequiredError) else GITHUB_AUTH_FAILED
    detail = get_error_message(exc, default)

    headers = None
    if isinstance(exc, GithubRateLimitError) and exc.retry_after is not None:
        headers = {"Retry-After": str(int(exc.retry_after))}

    if status_code >= 500:
        logger.warning("GitHub request failed on %s: %s", request.url.path, exc)
    return error_response(status_code, detail, code, headers=headers)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, UNEXPECTED_ERROR, ErrorCode.INTERNAL_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(GithubError, github_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
