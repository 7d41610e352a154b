#!/usr/bin/env python3
"""
Category Cache Management CLI

Usage:
    blogcache-cache status                 # Show the cached category count entry
    blogcache-cache check [--preview]      # Read through the cache and print the result
    blogcache-cache flush                  # Delete every key in the cache namespace
    blogcache-cache flush --all            # Delete every cache:* key
"""

import argparse
import sys
from typing import Optional, Sequence

from blogcache.cache import CacheBackend, CacheBackendError, invalidate_all, invalidate_namespace
from blogcache.categorized import CategorizedBlog
from blogcache.config import Settings, close_redis, get_settings
from blogcache.database import SqlContentStore, create_database_engine, create_session_factory, create_tables
from blogcache.logging_config import configure_logging, get_logger
from blogcache.main import build_cache_backend

logger = get_logger(name=__name__)


def _categorized(settings: Settings, backend: CacheBackend) -> CategorizedBlog:
    settings.ensure_database_dir()
    engine = create_database_engine(settings.database_url)
    create_tables(engine)
    store = SqlContentStore(create_session_factory(engine))
    return CategorizedBlog(
        store=store,
        backend=backend,
        namespace=settings.cache_namespace,
        ttl=settings.cache_ttl_seconds,
    )


def show_status(args, settings: Settings, backend: CacheBackend) -> int:
    """Print the current cache entry without recomputing it."""
    categorized = _categorized(settings, backend)
    entry = categorized.cache.peek()
    if entry is None:
        print(f"{categorized.cache.key}: absent (next read recomputes)")
        return 0

    valid_until = entry.valid_until.isoformat() if entry.valid_until else "until invalidated"
    print(f"{categorized.cache.key}: {entry.value}")
    print(f"   Computed at: {entry.computed_at.isoformat()}")
    print(f"   Valid: {valid_until}")
    return 0


def check(args, settings: Settings, backend: CacheBackend) -> int:
    """Read through the cache and print whether the site is categorized."""
    categorized = _categorized(settings, backend)
    result = categorized.is_categorized(preview=args.preview)
    print(f"categorized={str(result).lower()} (categories in use: {categorized.category_count()})")
    return 0


def flush(args, settings: Settings, backend: CacheBackend) -> int:
    """Delete cache keys."""
    try:
        if args.all:
            deleted = invalidate_all(backend)
        else:
            deleted = invalidate_namespace(backend, settings.cache_namespace)
    except CacheBackendError as e:
        logger.error("Cache flush failed: {}", e)
        print(f"❌ Cache backend unavailable, nothing was flushed: {e}")
        return 1

    if args.all:
        print(f"Deleted {deleted} cache key(s) across all namespaces")
    else:
        print(f"Deleted {deleted} cache key(s) in namespace '{settings.cache_namespace}'")
    return 0


COMMANDS = {
    "status": show_status,
    "check": check,
    "flush": flush,
}


def main(argv: Optional[Sequence[str]] = None, settings: Optional[Settings] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Category Cache Management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    subparsers.add_parser('status', help='Show the cached entry')

    check_parser = subparsers.add_parser('check', help='Read through the cache')
    check_parser.add_argument('--preview', action='store_true', help='Evaluate as a preview render')

    flush_parser = subparsers.add_parser('flush', help='Delete cache keys')
    flush_parser.add_argument('--all', action='store_true', help='Delete every cache:* key, not just this namespace')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = settings or get_settings()
    configure_logging(settings.log_level)
    backend = build_cache_backend(settings)
    try:
        return COMMANDS[args.command](args, settings, backend)
    finally:
        if settings.uses_redis:
            close_redis()


if __name__ == "__main__":
    sys.exit(main())
