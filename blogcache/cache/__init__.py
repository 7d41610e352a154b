"""Caching utilities: derived-value cache, backends, invalidation, and key helpers."""

from .backend import (
    ABSENT,
    Absent,
    CacheBackend,
    CacheBackendError,
    MemoryBackend,
    Present,
    RedisBackend,
)
from .derived import CacheEntry, DerivedValueCache
from .invalidation import invalidate_all, invalidate_namespace
from .keys import derived_value_key, namespace_pattern

__all__ = [
    "ABSENT",
    "Absent",
    "CacheBackend",
    "CacheBackendError",
    "CacheEntry",
    "DerivedValueCache",
    "MemoryBackend",
    "Present",
    "RedisBackend",
    "derived_value_key",
    "invalidate_all",
    "invalidate_namespace",
    "namespace_pattern",
]
