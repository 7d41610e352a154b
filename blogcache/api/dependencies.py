"""FastAPI dependencies resolving the objects wired by the app lifespan."""

from fastapi import Request

from blogcache.cache import CacheBackend
from blogcache.categorized import CategorizedBlog
from blogcache.config.settings import Settings
from blogcache.database import SqlContentStore
from blogcache.events import WriteEventBus


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> SqlContentStore:
    return request.app.state.store


def get_event_bus(request: Request) -> WriteEventBus:
    return request.app.state.events


def get_cache_backend(request: Request) -> CacheBackend:
    return request.app.state.cache_backend


def get_categorized(request: Request) -> CategorizedBlog:
    return request.app.state.categorized
