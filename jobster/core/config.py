"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "jobster"
    mongodb_timeout_ms: int = 5000

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 30

    # Password hashing
    bcrypt_rounds: int = 10

    # Read-only demo account (mutations are rejected for this user id)
    demo_user_id: str = "63d23f7fef91ba4d41fa3416"

    # Register/login throttling, per client address
    auth_rate_limit_max: int = 10
    auth_rate_limit_window_seconds: int = 15 * 60

    # App
    cors_origins: str = "*"  # comma-separated
    frontend_dir: str = "client/build"
    log_level: str = "INFO"
    debug: bool = False

    @property
    def cors_origin_list(self) -> List[str]:
        """Split CORS_ORIGINS into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def get_app_settings(request: Request) -> Settings:
    """Dependency - the settings the running app was built with."""
    return request.app.state.settings
