"""Health check and system status endpoints."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import func, select, text

from blogcache.cache import CacheBackend, CacheBackendError, RedisBackend
from blogcache.database import Category, Post, SqlContentStore
from blogcache.logging_config import get_logger

from .dependencies import get_cache_backend, get_store

logger = get_logger(name=__name__)

router = APIRouter(prefix="/v2/health", tags=["Health"])


class TableCount(BaseModel):
    table_name: str
    count: int


class DatabaseStatus(BaseModel):
    connected: bool
    tables: list[TableCount]


class CacheBackendStatus(BaseModel):
    connected: bool
    backend: str  # "redis" or "memory"


class HealthResponse(BaseModel):
    status: str  # "healthy" or "unhealthy"
    database: DatabaseStatus
    cache: CacheBackendStatus


@router.get("", response_model=HealthResponse)
def health_check(
    store: SqlContentStore = Depends(get_store),
    backend: CacheBackend = Depends(get_cache_backend),
):
    """Verify content store and cache backend connectivity."""
    db_status = DatabaseStatus(connected=False, tables=[])
    backend_name = "redis" if isinstance(backend, RedisBackend) else "memory"
    cache_status = CacheBackendStatus(connected=False, backend=backend_name)

    try:
        with store.session_factory() as db:
            db.execute(text("SELECT 1"))
            category_count = db.execute(select(func.count()).select_from(Category)).scalar_one()
            post_count = db.execute(select(func.count()).select_from(Post)).scalar_one()

        db_status = DatabaseStatus(
            connected=True,
            tables=[
                TableCount(table_name="categories", count=category_count),
                TableCount(table_name="posts", count=post_count),
            ],
        )
    except Exception as e:
        logger.warning("Failed to query content store: {}", e)

    try:
        backend.scan("cache:__health__:*")
        cache_status = CacheBackendStatus(connected=True, backend=backend_name)
    except CacheBackendError as e:
        logger.warning("Cache backend unavailable: {}", e)

    overall_status = "healthy" if (db_status.connected and cache_status.connected) else "unhealthy"

    return HealthResponse(
        status=overall_status,
        database=db_status,
        cache=cache_status,
    )
