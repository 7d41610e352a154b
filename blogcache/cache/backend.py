"""Key/value storage backends for the derived-value cache.

Lookups return an explicit tri-state so that "no entry" is never conflated
with a stored falsy value such as ``0`` or ``False``::

    result = backend.get(key)
    if isinstance(result, Present):
        use(result.value)
    else:  # result is ABSENT
        recompute()

Backends raise :class:`CacheBackendError` when the store itself cannot be
reached or returns an undecodable payload. They never expire entries on
their own unless a ``ttl`` was passed to :meth:`set`.
"""

from __future__ import annotations

import fnmatch
import time
from dataclasses import dataclass
from typing import Any, Generic, Optional, Protocol, TypeVar, Union

from redis import Redis
from redis.exceptions import RedisError

from blogcache.logging_config import get_logger

from .serialization import deserialize, serialize

logger = get_logger(name=__name__)

T = TypeVar("T")


class CacheBackendError(Exception):
    """The cache storage backend is unavailable or returned garbage."""


@dataclass(frozen=True)
class Present(Generic[T]):
    value: T


class Absent:
    _instance: Optional["Absent"] = None

    def __new__(cls) -> "Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = Absent()

Lookup = Union[Present[Any], Absent]


class CacheBackend(Protocol):
    def get(self, key: str) -> Lookup: ...

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None: ...

    def delete(self, key: str) -> None: ...

    def scan(self, pattern: str) -> list[str]: ...


class MemoryBackend:
    """Process-local backend used when no Redis URL is configured."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._data: dict[str, tuple[Any, Optional[float]]] = {}

    def get(self, key: str) -> Lookup:
        item = self._data.get(key)
        if item is None:
            return ABSENT
        value, expires_at = item
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return ABSENT
        return Present(value)

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        self._data[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def scan(self, pattern: str) -> list[str]:
        return [key for key in self._data if fnmatch.fnmatchcase(key, pattern)]

    def __len__(self) -> int:
        return len(self._data)


class RedisBackend:
    """Backend storing serialized values in Redis.

    Args:
        client: redis-py client created with ``decode_responses=True``.
        scan_count: COUNT hint for SCAN iterations.
    """

    def __init__(self, client: Redis, scan_count: int = 100):
        self.client = client
        self.scan_count = scan_count

    def get(self, key: str) -> Lookup:
        try:
            raw = self.client.get(key)
        except RedisError as e:
            raise CacheBackendError(f"Redis GET failed for {key}: {e}") from e

        if raw is None:
            return ABSENT
        try:
            return Present(deserialize(raw))
        except (ValueError, ImportError) as e:
            raise CacheBackendError(f"Undecodable cache payload at {key}: {e}") from e

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        payload = serialize(value)
        try:
            if ttl:
                self.client.set(key, payload, ex=ttl)
            else:
                self.client.set(key, payload)
        except RedisError as e:
            raise CacheBackendError(f"Redis SET failed for {key}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except RedisError as e:
            raise CacheBackendError(f"Redis DELETE failed for {key}: {e}") from e

    def scan(self, pattern: str) -> list[str]:
        """Collect keys matching a glob pattern using cursor-based SCAN."""
        found: list[str] = []
        cursor = 0
        try:
            while True:
                cursor, keys = self.client.scan(cursor=cursor, match=pattern, count=self.scan_count)
                found.extend(keys)
                if cursor == 0:
                    break
        except RedisError as e:
            raise CacheBackendError(f"Redis SCAN failed for {pattern}: {e}") from e
        logger.debug("SCAN {} matched {} keys", pattern, len(found))
        return found
