"""Application entry point.

Wires settings, logging, the content store, the cache backend, and the
write-event bus, then mounts the API routers.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from redis.exceptions import RedisError

from blogcache.api.main import api_router
from blogcache.cache import CacheBackend, MemoryBackend, RedisBackend
from blogcache.categorized import CategorizedBlog
from blogcache.config import Settings, close_redis, get_redis, get_settings, init_redis
from blogcache.database import (
    SqlContentStore,
    create_database_engine,
    create_session_factory,
    create_tables,
)
from blogcache.events import WriteEventBus
from blogcache.logging_config import configure_logging, get_logger
from blogcache.middleware import RequestLoggingMiddleware

logger = get_logger(name=__name__)


def build_cache_backend(settings: Settings) -> CacheBackend:
    """Redis when REDIS_URL is configured, process memory otherwise."""
    if settings.uses_redis:
        try:
            init_redis(settings.redis_url)
        except RedisError as e:
            # init_redis registers the client before pinging; its calls fail as cache misses.
            logger.warning("Redis unreachable at startup, cache will recompute: {}", e)
        return RedisBackend(get_redis())
    logger.warning("REDIS_URL not set, category cache is process-local")
    return MemoryBackend()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)

        settings.ensure_database_dir()
        engine = create_database_engine(settings.database_url)
        create_tables(engine)

        events = WriteEventBus()
        store = SqlContentStore(create_session_factory(engine), events=events)
        backend = build_cache_backend(settings)
        categorized = CategorizedBlog(
            store=store,
            backend=backend,
            namespace=settings.cache_namespace,
            ttl=settings.cache_ttl_seconds,
        )
        categorized.attach(events)

        app.state.settings = settings
        app.state.events = events
        app.state.store = store
        app.state.cache_backend = backend
        app.state.categorized = categorized
        logger.info("blogcache started (cache key {})", categorized.cache.key)

        try:
            yield
        finally:
            categorized.detach(events)
            if settings.uses_redis:
                close_redis()
            engine.dispose()
            logger.info("blogcache stopped")

    app = FastAPI(title="blogcache", lifespan=lifespan)
    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(api_router)
    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.uvicorn_host, port=settings.uvicorn_port)
