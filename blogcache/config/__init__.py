"""Configuration module for the service.

This module provides:
- Settings management with environment variables
- Redis connection lifecycle
"""

from .settings import Settings, get_settings
from .redis import close_redis, get_redis, init_redis

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Redis
    "init_redis",
    "get_redis",
    "close_redis",
]
