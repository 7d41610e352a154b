"""Cache administration and write-event hook endpoints."""

from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from blogcache.cache import CacheBackend, CacheBackendError, invalidate_namespace
from blogcache.categorized import CategorizedBlog
from blogcache.config.settings import Settings
from blogcache.events import WriteEvent, WriteEventBus
from blogcache.logging_config import get_logger

from .dependencies import get_app_settings, get_cache_backend, get_categorized, get_event_bus

logger = get_logger(name=__name__)

router = APIRouter(prefix="/v2", tags=["Cache"])


class EventAccepted(BaseModel):
    invalidated: bool


class CacheStatus(BaseModel):
    key: str
    present: bool
    value: Optional[Any] = None
    computed_at: Optional[datetime] = None
    valid_until: Optional[datetime] = None


class FlushResult(BaseModel):
    namespace: str
    deleted: int


@router.post("/events", response_model=EventAccepted)
def receive_write_event(
    event: WriteEvent,
    bus: WriteEventBus = Depends(get_event_bus),
):
    """Hook for writers outside this service (e.g. the CMS save path)."""
    results = bus.publish(event)
    return EventAccepted(invalidated=any(result is True for result in results))


@router.get("/cache", response_model=CacheStatus)
def get_cache_status(categorized: CategorizedBlog = Depends(get_categorized)):
    entry = categorized.cache.peek()
    if entry is None:
        return CacheStatus(key=categorized.cache.key, present=False)
    return CacheStatus(
        key=categorized.cache.key,
        present=True,
        value=entry.value,
        computed_at=entry.computed_at,
        valid_until=entry.valid_until,
    )


@router.delete("/cache", response_model=FlushResult)
def flush_cache(
    settings: Settings = Depends(get_app_settings),
    backend: CacheBackend = Depends(get_cache_backend),
):
    try:
        deleted = invalidate_namespace(backend, settings.cache_namespace)
    except CacheBackendError as e:
        logger.error("Cache flush failed: {}", e)
        raise HTTPException(status_code=503, detail="Cache backend unavailable")
    return FlushResult(namespace=settings.cache_namespace, deleted=deleted)
