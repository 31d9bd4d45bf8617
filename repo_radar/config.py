"""
Application configuration
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Repo Radar"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_FORMAT: str = "text"

    # Database (MongoDB)
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "repo_radar"

    # Background jobs (Celery over Redis)
    REDIS_URL: str = "redis://localhost:6379/0"

    # GitHub
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_CLIENT_ID: Optional[str] = None
    GITHUB_CLIENT_SECRET: Optional[str] = None
    GITHUB_REDIRECT_URI: str = "http://localhost:8000/api/auth/github/callback"
    GITHUB_SCOPES: List[str] = ["read:user", "user:email", "public_repo"]
    GITHUB_TIMEOUT_SECONDS: float = 10.0

    # Frontend
    FRONTEND_BASE_URL: str = "http://localhost:3000"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Repository cache
    REPO_CACHE_TTL_HOURS: int = 24
    REPO_CACHE_CLEANUP_AFTER_DAYS: int = 7

    # Bulk starred list per user
    STARRED_CACHE_TTL_SECONDS: int = 300

    # Security
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
