"""SQLAlchemy engine configuration for the content store."""

from typing import Any

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from blogcache.logging_config import get_logger

from .models import Base

logger = get_logger(name=__name__)

# SQLite PRAGMA settings
# Cache size in pages (negative value = KB, so -65536 = 64MB)
SQLITE_CACHE_SIZE = -65536


def _is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def _is_memory_sqlite(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///:memory:")


def _set_sqlite_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
    """Set SQLite pragmas on each new connection.

    Args:
        dbapi_connection: The raw DBAPI connection.
        connection_record: The connection record (unused but required by event signature).
    """
    cursor = dbapi_connection.cursor()
    # Enforce post/category assignment integrity
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.execute("PRAGMA journal_mode = WAL")
    cursor.execute("PRAGMA synchronous = NORMAL")
    cursor.execute(f"PRAGMA cache_size = {SQLITE_CACHE_SIZE}")
    cursor.execute("PRAGMA busy_timeout = 30000")
    cursor.close()


def create_database_engine(database_url: str) -> Engine:
    """Create and configure the SQLAlchemy engine.

    In-memory SQLite shares one connection across threads so that every
    session sees the same database.
    """
    kwargs: dict[str, Any] = {"echo": False}
    if _is_sqlite(database_url):
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite(database_url):
            kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **kwargs)

    if _is_sqlite(database_url):
        event.listen(engine, "connect", _set_sqlite_pragmas)

    logger.info("Content store engine initialized: {}", engine.url.render_as_string(hide_password=True))
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


def create_tables(engine: Engine) -> None:
    """Create all content store tables."""
    Base.metadata.create_all(bind=engine)
