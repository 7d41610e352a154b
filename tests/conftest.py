"""
Pytest configuration and fixtures.
"""
from unittest.mock import MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from blogcache.cache import MemoryBackend
from blogcache.config import Settings
from blogcache.database import SqlContentStore, create_database_engine, create_session_factory, create_tables
from blogcache.events import WriteEventBus


class FakeCategoryStore:
    """Category store stub that records how often it is queried."""

    def __init__(self, category_ids=()):
        self.category_ids = list(category_ids)
        self.calls = 0
        self.limits = []

    def find_category_ids(self, limit):
        self.calls += 1
        self.limits.append(limit)
        return self.category_ids[:limit]


@pytest.fixture
def fake_store():
    return FakeCategoryStore()


@pytest.fixture
def memory_backend():
    return MemoryBackend()


@pytest.fixture
def event_bus():
    return WriteEventBus()


@pytest.fixture
def sql_store(event_bus):
    """SqlContentStore on a private in-memory SQLite database."""
    engine = create_database_engine("sqlite://")
    create_tables(engine)
    store = SqlContentStore(create_session_factory(engine), events=event_bus)
    yield store
    engine.dispose()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'data' / 'blog.db'}",
        redis_url=None,
        cache_namespace="categories",
        cache_ttl_seconds=None,
        log_level="WARNING",
    )


@pytest.fixture
def redis_settings(settings):
    return settings.model_copy(update={"redis_url": "redis://127.0.0.1:1/0"})


@pytest.fixture
def unreachable_redis(monkeypatch):
    """Redis client whose every command fails with a refused connection."""
    client = MagicMock()
    for command in ("ping", "get", "set", "delete", "scan"):
        getattr(client, command).side_effect = RedisConnectionError("Connection refused")
    redis_cls = MagicMock()
    redis_cls.from_url.return_value = client
    monkeypatch.setattr("blogcache.config.redis.Redis", redis_cls)
    return client
