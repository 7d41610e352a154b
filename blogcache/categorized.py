"""Whether the site uses more than one category.

Front ends show category links next to a post only when the site has at
least two categories in use; with a single category the links carry no
information. The count is cached until the content store reports a category
edit or a (non-autosave) post save.
"""

from typing import Optional, Protocol, Sequence

from blogcache.cache import CacheBackend, DerivedValueCache, derived_value_key
from blogcache.events import WriteEvent, WriteEventBus
from blogcache.logging_config import get_logger

logger = get_logger(name=__name__)

CATEGORY_COUNT_NAME = "category_count"

# Two ids are enough to tell "one" from "several".
CATEGORIZED_THRESHOLD = 2


class CategoryStore(Protocol):
    def find_category_ids(self, limit: int) -> Sequence[int]: ...


def count_used_categories(store: CategoryStore) -> int:
    """Number of used categories, capped at CATEGORIZED_THRESHOLD."""
    return len(store.find_category_ids(limit=CATEGORIZED_THRESHOLD))


class CategorizedBlog:
    def __init__(
        self,
        store: CategoryStore,
        backend: CacheBackend,
        namespace: str = "categories",
        ttl: Optional[int] = None,
    ):
        self.cache: DerivedValueCache[CategoryStore, int] = DerivedValueCache(
            store=store,
            derive=count_used_categories,
            backend=backend,
            key=derived_value_key(namespace, CATEGORY_COUNT_NAME),
            ttl=ttl,
        )

    def category_count(self) -> int:
        return self.cache.read()

    def is_categorized(self, preview: bool = False) -> bool:
        """True when more than one category is in use.

        Preview renders always get True: authors must see category links
        for unpublished changes the persisted count does not reflect yet.
        The override is applied after the cached read and is never stored.
        """
        count = self.category_count()
        return count >= CATEGORIZED_THRESHOLD or preview

    def on_upstream_write(self, event: WriteEvent) -> bool:
        return self.cache.on_upstream_write(event)

    def flush(self) -> None:
        self.cache.invalidate()

    def attach(self, bus: WriteEventBus) -> None:
        """Subscribe the cache's invalidation hook to a write-event bus."""
        bus.subscribe(self.cache.on_upstream_write)
        logger.debug("Category cache subscribed to write events ({})", self.cache.key)

    def detach(self, bus: WriteEventBus) -> None:
        bus.unsubscribe(self.cache.on_upstream_write)
