"""Database module for the content store.

This module provides SQLAlchemy configuration, models, and the store that
emits write events.
"""

from blogcache.database.engine import (
    create_database_engine,
    create_session_factory,
    create_tables,
)
from blogcache.database.models import (
    POST_STATUS_DRAFT,
    POST_STATUS_PUBLISHED,
    Base,
    Category,
    Post,
)
from blogcache.database.store import ContentNotFoundError, SqlContentStore

__all__ = [
    "create_database_engine",
    "create_session_factory",
    "create_tables",
    "POST_STATUS_DRAFT",
    "POST_STATUS_PUBLISHED",
    "Base",
    "Category",
    "Post",
    "ContentNotFoundError",
    "SqlContentStore",
]
