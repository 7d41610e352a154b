"""
Tests for the categorized-blog check.

Exercises the cardinality rule, preview override, and the event wiring
against both a stub store and the SQLAlchemy content store.
"""

import pytest

from blogcache.cache import MemoryBackend
from blogcache.categorized import (
    CATEGORIZED_THRESHOLD,
    CategorizedBlog,
    count_used_categories,
)
from blogcache.database import POST_STATUS_DRAFT
from blogcache.events import WriteEvent

from .conftest import FakeCategoryStore


class TestCountUsedCategories:
    """Test suite for the derivation function."""

    @pytest.mark.parametrize("ids,expected", [([], 0), ([7], 1), ([3, 9], 2), ([1, 2, 3, 4], 2)])
    def test_count_is_capped(self, ids, expected):
        assert count_used_categories(FakeCategoryStore(ids)) == expected

    def test_queries_only_two_ids(self):
        """Test the store is asked for at most two ids."""
        store = FakeCategoryStore(range(50))

        count_used_categories(store)

        assert store.limits == [CATEGORIZED_THRESHOLD]


class TestIsCategorized:
    """Test suite for CategorizedBlog.is_categorized."""

    @pytest.mark.parametrize("ids,expected", [([], False), ([1], False), ([1, 2], True), ([1, 2, 3], True)])
    def test_cardinality(self, ids, expected):
        blog = CategorizedBlog(FakeCategoryStore(ids), MemoryBackend())

        assert blog.is_categorized() is expected

    @pytest.mark.parametrize("ids", [[], [1]])
    def test_preview_is_always_categorized(self, ids):
        blog = CategorizedBlog(FakeCategoryStore(ids), MemoryBackend())

        assert blog.is_categorized(preview=True) is True

    def test_preview_override_is_not_cached(self):
        """Test a preview read leaves the persisted answer untouched."""
        blog = CategorizedBlog(FakeCategoryStore([1]), MemoryBackend())

        assert blog.is_categorized(preview=True) is True
        assert blog.is_categorized() is False
        assert blog.cache.peek().value == 1

    def test_cache_key_uses_namespace(self):
        blog = CategorizedBlog(FakeCategoryStore(), MemoryBackend(), namespace="site42")

        assert blog.cache.key == "cache:site42:category_count"

    def test_category_edit_flips_result(self, event_bus):
        """Test adding a second category plus a category-edit flips to True."""
        store = FakeCategoryStore([1])
        blog = CategorizedBlog(store, MemoryBackend())
        blog.attach(event_bus)
        assert blog.is_categorized() is False

        store.category_ids.append(2)
        event_bus.publish(WriteEvent.category_edit())

        assert blog.is_categorized() is True

    def test_autosave_keeps_cached_false(self, event_bus):
        """Test an autosave does not invalidate even if the store changed."""
        store = FakeCategoryStore([1])
        blog = CategorizedBlog(store, MemoryBackend())
        blog.attach(event_bus)
        assert blog.is_categorized() is False

        store.category_ids.append(2)
        event_bus.publish(WriteEvent.record_save(is_autosave=True))

        assert blog.is_categorized() is False
        assert store.calls == 1

    def test_detach_stops_invalidation(self, event_bus):
        store = FakeCategoryStore([1])
        blog = CategorizedBlog(store, MemoryBackend())
        blog.attach(event_bus)
        blog.detach(event_bus)
        blog.is_categorized()

        store.category_ids.append(2)
        event_bus.publish(WriteEvent.category_edit())

        assert blog.is_categorized() is False

    def test_flush_recomputes(self):
        store = FakeCategoryStore([1, 2])
        blog = CategorizedBlog(store, MemoryBackend())
        blog.is_categorized()

        blog.flush()
        blog.is_categorized()

        assert store.calls == 2


class TestWithContentStore:
    """End-to-end with the SQLAlchemy store publishing on the bus."""

    @pytest.fixture
    def blog(self, sql_store, event_bus):
        blog = CategorizedBlog(sql_store, MemoryBackend())
        blog.attach(event_bus)
        return blog

    def test_empty_store_is_not_categorized(self, blog):
        assert blog.is_categorized() is False

    def test_second_published_category_flips_result(self, sql_store, blog):
        news = sql_store.create_category("News", "news")
        sql_store.save_post("Hello", category_ids=[news.id])
        assert blog.is_categorized() is False

        reviews = sql_store.create_category("Reviews", "reviews")
        sql_store.save_post("Review", category_ids=[reviews.id])

        assert blog.is_categorized() is True

    def test_draft_posts_do_not_count(self, sql_store, blog):
        news = sql_store.create_category("News", "news")
        reviews = sql_store.create_category("Reviews", "reviews")
        sql_store.save_post("Hello", category_ids=[news.id])
        sql_store.save_post("Draft", status=POST_STATUS_DRAFT, category_ids=[reviews.id])

        assert blog.is_categorized() is False

    def test_autosave_save_leaves_cache(self, sql_store, blog):
        news = sql_store.create_category("News", "news")
        reviews = sql_store.create_category("Reviews", "reviews")
        post = sql_store.save_post("Hello", category_ids=[news.id])
        assert blog.is_categorized() is False

        sql_store.save_post("Hello", category_ids=[news.id, reviews.id], post_id=post.id, is_autosave=True)
        assert blog.is_categorized() is False

        sql_store.save_post("Hello", category_ids=[news.id, reviews.id], post_id=post.id)
        assert blog.is_categorized() is True
