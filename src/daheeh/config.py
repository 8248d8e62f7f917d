"""Application settings via pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Core configuration loaded from environment variables with DAHEEH_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="DAHEEH_",
        env_file=".env",
        case_sensitive=False,
    )

    # --- Core ---
    app_version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "console"

    # --- Storage ---
    storage_backend: Literal["memory", "redis", "sqlite"] = "sqlite"
    redis_url: str = "redis://localhost:6379/0"
    redis_key_prefix: str = "daheeh:"
    database_url: str = "sqlite+aiosqlite:///daheeh.db"

    # --- Credentials ---
    password_min_length: int = 6
    argon2_time_cost: int = 2
    argon2_memory_cost: int = 65536  # 64 MB
    argon2_parallelism: int = 1

    # --- Progression ---
    xp_per_level: int = 500
    toast_duration_seconds: float = 3.0
    toast_visible_limit: int = 3


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
