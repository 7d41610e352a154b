"""Cache key construction.

Convention: cache:{namespace}:{name}

Derived values are keyed by a single fixed name rather than an argument
hash; there is exactly one entry per derived value.

Examples:
    cache:categories:category_count
"""

import re

_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_.\-]+$")


def derived_value_key(namespace: str, name: str) -> str:
    """Build the fixed Redis key naming one derived value.

    Args:
        namespace: Cache namespace (e.g., "categories")
        name: Derived value name (e.g., "category_count")

    Returns:
        Key string like "cache:categories:category_count"
    """
    for segment in (namespace, name):
        if not _SEGMENT_RE.match(segment):
            raise ValueError(f"Invalid cache key segment: {segment!r}")
    return f"cache:{namespace}:{name}"


def namespace_pattern(namespace: str) -> str:
    """Return a glob pattern for all keys in a namespace.

    Returns pattern like "cache:categories:*"
    """
    return f"cache:{namespace}:*"
