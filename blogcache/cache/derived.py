"""Read-through cache for a value derived from the content store.

Usage:
    from blogcache.cache import DerivedValueCache, MemoryBackend

    cache = DerivedValueCache(
        store=store,
        derive=lambda s: len(s.find_category_ids(limit=2)),
        backend=MemoryBackend(),
        key="cache:categories:category_count",
    )
    bus.subscribe(cache.on_upstream_write)
    cache.read()
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from pydantic import BaseModel

from blogcache.events import WriteEvent, WriteEventKind
from blogcache.logging_config import get_logger

from .backend import CacheBackend, CacheBackendError, Present

logger = get_logger(name=__name__)

S = TypeVar("S")
T = TypeVar("T")

DEFAULT_WATCHED_KINDS = frozenset({WriteEventKind.CATEGORY_EDIT, WriteEventKind.RECORD_SAVE})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CacheEntry(BaseModel):
    value: Any
    computed_at: datetime
    valid_until: Optional[datetime] = None  # None = until invalidated

    def is_valid(self, now: datetime) -> bool:
        return self.valid_until is None or now < self.valid_until


class DerivedValueCache(Generic[S, T]):
    """Memoizes ``derive(store)`` under a single fixed key.

    Args:
        store: Content store handed to ``derive``.
        derive: Pure function of the store's current state.
        backend: Key/value backend holding the entry.
        key: Fixed cache key naming this derived value.
        ttl: Optional expiry in seconds; ``None`` keeps the entry until
            it is invalidated.
        watched_kinds: Write-event kinds that invalidate the entry.

    Notes:
        - Backend failures are logged and degrade to recomputing on every
          read; they never surface to the caller.
        - Autosave ``record-save`` events never invalidate.
    """

    def __init__(
        self,
        store: S,
        derive: Callable[[S], T],
        backend: CacheBackend,
        key: str,
        ttl: Optional[int] = None,
        watched_kinds: Iterable[WriteEventKind] = DEFAULT_WATCHED_KINDS,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.derive = derive
        self.backend = backend
        self.key = key
        self.ttl = ttl
        self.watched_kinds = frozenset(watched_kinds)
        self._clock = clock

    def read(self) -> T:
        entry = self.peek()
        if entry is not None:
            logger.debug("Cache HIT: {}", self.key)
            return entry.value

        logger.debug("Cache MISS: {}", self.key)
        now = self._clock()
        value = self.derive(self.store)
        entry = CacheEntry(
            value=value,
            computed_at=now,
            valid_until=now + timedelta(seconds=self.ttl) if self.ttl else None,
        )
        try:
            self.backend.set(self.key, entry, ttl=self.ttl)
        except CacheBackendError as e:
            logger.warning("Cache SET failed for {}: {}", self.key, e)
        return value

    def peek(self) -> Optional[CacheEntry]:
        """Return the current valid entry without deriving, or None."""
        try:
            result = self.backend.get(self.key)
        except CacheBackendError as e:
            logger.warning("Cache GET failed for {}: {}", self.key, e)
            return None

        if not isinstance(result, Present):
            return None
        entry = result.value
        if not isinstance(entry, CacheEntry):
            logger.warning("Discarding foreign value stored at {}", self.key)
            self.invalidate()
            return None
        if not entry.is_valid(self._clock()):
            logger.debug("Cache entry expired: {}", self.key)
            self.invalidate()
            return None
        return entry

    def invalidate(self) -> bool:
        """Delete the entry. Returns False when the backend refused the delete."""
        try:
            self.backend.delete(self.key)
        except CacheBackendError as e:
            logger.warning("Cache DELETE failed for {}: {}", self.key, e)
            return False
        logger.debug("Invalidated {}", self.key)
        return True

    def watches(self, event: WriteEvent) -> bool:
        """Whether the event invalidates this entry."""
        if event.kind not in self.watched_kinds:
            return False
        # Autosaves write drafts only.
        return not (event.kind is WriteEventKind.RECORD_SAVE and event.is_autosave)

    def on_upstream_write(self, event: WriteEvent) -> bool:
        """Invalidation hook for the write-event bus.

        Returns:
            True when the event invalidated the entry, False when it was
            ignored or the backend delete failed.
        """
        if not self.watches(event):
            logger.debug("Ignoring {} (autosave={}) for {}", event.kind.value, event.is_autosave, self.key)
            return False
        if not self.invalidate():
            return False
        logger.info("Invalidated {} after {}", self.key, event.kind.value)
        return True
