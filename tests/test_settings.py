"""
Unit tests for settings loading.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from blogcache.config import Settings


class TestSettings:
    def test_blank_redis_url_means_memory_cache(self):
        settings = Settings(redis_url="  ")

        assert settings.redis_url is None
        assert settings.uses_redis is False

    def test_redis_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("REDIS_URL", "redis://cache:6379/1")

        settings = Settings()

        assert settings.uses_redis is True
        assert settings.redis_url == "redis://cache:6379/1"

    def test_ttl_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(cache_ttl_seconds=0)

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("sqlite:////var/lib/blog/blog.db", Path("/var/lib/blog/blog.db")),
            ("sqlite://", None),
            ("sqlite:///:memory:", None),
            ("postgresql://user@db/blog", None),
        ],
    )
    def test_sqlite_path(self, url, expected):
        assert Settings(database_url=url).sqlite_path == expected

    def test_ensure_database_dir(self, tmp_path):
        settings = Settings(database_url=f"sqlite:///{tmp_path / 'nested' / 'blog.db'}")

        settings.ensure_database_dir()

        assert (tmp_path / "nested").is_dir()
