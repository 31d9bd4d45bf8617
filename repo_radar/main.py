"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from repo_radar.api import auth, explore, health, onboarding, radars, repos, stars, users
from repo_radar.config import settings
from repo_radar.core.logging import setup_logging
from repo_radar.core.tracing import tracing_scope
from repo_radar.database.mongo import ensure_indexes, get_database
from repo_radar.middleware.error_codes import (
    register_exception_handlers,
    unhandled_exception_handler,
)

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

setup_logging()

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Track star growth, releases and activity across GitHub repositories",
    version=settings.APP_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    request_id = request.headers.get(REQUEST_ID_HEADER, "")
    with tracing_scope(correlation_id=request_id) as correlation_id:
        try:
            response = await call_next(request)
        except Exception as exc:
            # Handled here so the 500 still carries the request id
            response = await unhandled_exception_handler(request, exc)
    response.headers[REQUEST_ID_HEADER] = correlation_id
    return response


@app.on_event("startup")
def on_startup() -> None:
    ensure_indexes(get_database())
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)


app.include_router(health.router, prefix="/api")
app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(radars.router, prefix="/api")
app.include_router(repos.router, prefix="/api")
app.include_router(stars.router, prefix="/api")
app.include_router(explore.router, prefix="/api")
app.include_router(onboarding.router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"{settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": "/api/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("repo_radar.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
