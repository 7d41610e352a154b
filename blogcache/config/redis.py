"""Redis connection management.

Provides the Redis client backing the derived-value cache via redis-py.
Follows the same lifecycle pattern as the content store engine.
"""

from redis import Redis

from blogcache.logging_config import get_logger

logger = get_logger(name=__name__)

_client: Redis | None = None


def init_redis(url: str) -> Redis:
    """Initialize the global Redis client and verify connectivity.

    Args:
        url: Redis connection URL (e.g., redis://localhost:6379/0)
    """
    global _client
    _client = Redis.from_url(
        url,
        decode_responses=True,
        protocol=3,
    )
    _client.ping()
    logger.info("Redis client initialized and connected: {}", url)
    return _client


def get_redis() -> Redis:
    """Get the global Redis client. Raises if not initialized."""
    if _client is None:
        raise RuntimeError(
            "Redis client not initialized. Call init_redis() first."
        )
    return _client


def close_redis() -> None:
    """Close the Redis client connection."""
    global _client
    if _client is not None:
        _client.close()
        logger.info("Redis client closed")
    _client = None
