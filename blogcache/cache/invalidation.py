"""Namespace-wide cache invalidation.

Single derived values are invalidated through their own cache object; these
helpers drop every key under a namespace at once (admin flush, CLI).
"""

from blogcache.logging_config import get_logger

from .backend import CacheBackend
from .keys import namespace_pattern

logger = get_logger(name=__name__)


def invalidate_namespace(backend: CacheBackend, namespace: str) -> int:
    """Delete all cache keys in a namespace.

    Args:
        backend: Cache backend to flush.
        namespace: Cache namespace (e.g., "categories")

    Returns:
        Number of keys deleted.
    """
    keys = backend.scan(namespace_pattern(namespace))
    for key in keys:
        backend.delete(key)

    if keys:
        logger.info("Invalidated {} cache keys in namespace '{}'", len(keys), namespace)
    else:
        logger.debug("No cache keys found in namespace '{}' to invalidate", namespace)

    return len(keys)


def invalidate_all(backend: CacheBackend) -> int:
    """Delete ALL cache keys (all namespaces).

    Only deletes keys with the ``cache:`` prefix, so anything else sharing
    the Redis database is not affected.

    Returns:
        Number of keys deleted.
    """
    keys = backend.scan("cache:*")
    for key in keys:
        backend.delete(key)

    logger.info("Invalidated ALL {} cache keys", len(keys))
    return len(keys)
