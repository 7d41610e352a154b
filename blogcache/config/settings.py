"""Unified configuration settings for the service.

This module provides a centralized Settings class using Pydantic BaseSettings
for loading and validating all environment variables.

All configuration should be accessed through this module:
    from blogcache.config.settings import get_settings
    settings = get_settings()
"""

from pathlib import Path
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Compute project root from this file's location
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
PROJECT_ROOT = _PACKAGE_DIR.parent


class Settings(BaseSettings):
    """Service settings loaded from environment variables.

    Uses pydantic BaseSettings to automatically load from .env file
    and validate configuration values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== Content Store ====================
    database_url: str = Field(
        default=f"sqlite:///{PROJECT_ROOT / 'data' / 'blog.db'}",
        description="SQLAlchemy URL of the content store"
    )

    # ==================== Cache ====================
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis connection URL; unset keeps the cache in process memory"
    )
    cache_namespace: str = Field(
        default="categories",
        description="Namespace of the derived-value cache keys"
    )
    cache_ttl_seconds: Optional[int] = Field(
        default=None,
        description="Optional expiry for cache entries (explicit invalidation is primary)",
        ge=1,
    )

    # ==================== Logging ====================
    log_level: str = Field(
        default="INFO",
        description="Loguru level for the stderr sink"
    )

    # ==================== Server Configuration ====================
    uvicorn_host: str = Field(
        default="0.0.0.0",
        description="Uvicorn server host"
    )
    uvicorn_port: int = Field(
        default=8000,
        description="Uvicorn server port"
    )

    @field_validator('redis_url', mode='before')
    @classmethod
    def blank_redis_url_is_unset(cls, v):
        """Treat an empty REDIS_URL as not configured."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    # ==================== Computed Properties ====================

    @property
    def uses_redis(self) -> bool:
        return self.redis_url is not None

    @property
    def sqlite_path(self) -> Optional[Path]:
        """Filesystem path of a file-backed SQLite database, if any."""
        prefix = "sqlite:///"
        if not self.database_url.startswith(prefix):
            return None
        raw = self.database_url[len(prefix):]
        if not raw or raw == ":memory:":
            return None
        return Path(raw)

    # ==================== Directory Management ====================

    def ensure_database_dir(self) -> None:
        """Ensure the SQLite database directory exists."""
        if self.sqlite_path is not None:
            self.sqlite_path.parent.mkdir(parents=True, exist_ok=True)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern).

    Returns:
        Settings instance loaded from environment variables.

    Example:
        from blogcache.config.settings import get_settings

        settings = get_settings()
        print(settings.cache_namespace)
    """
    return Settings()
