"""Content store: categories, posts, and their assignments.

Reads are plain queries. Every write commits first and then publishes a
write event on the bus, so by the time a write method returns, subscribers
(the category cache) have already reacted to the new state.
"""

from typing import Iterable, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from blogcache.events import WriteEvent, WriteEventBus
from blogcache.logging_config import get_logger

from .models import POST_STATUS_PUBLISHED, POST_STATUSES, Category, Post, post_categories

logger = get_logger(name=__name__)


class ContentNotFoundError(LookupError):
    """A referenced category or post does not exist."""


class SqlContentStore:
    """Content store backed by a SQLAlchemy session factory."""

    def __init__(self, session_factory: sessionmaker[Session], events: Optional[WriteEventBus] = None):
        self.session_factory = session_factory
        self.events = events

    # ------------------------------------------------------------------ reads

    def find_category_ids(self, limit: int) -> list[int]:
        """Ids of categories attached to at least one published post.

        Stops after ``limit`` ids; callers use this only for cardinality.
        """
        stmt = (
            select(post_categories.c.category_id)
            .join(Post, Post.id == post_categories.c.post_id)
            .where(Post.status == POST_STATUS_PUBLISHED)
            .distinct()
            .order_by(post_categories.c.category_id)
            .limit(limit)
        )
        with self.session_factory() as session:
            return list(session.scalars(stmt))

    def get_category(self, category_id: int) -> Category:
        with self.session_factory() as session:
            category = session.get(Category, category_id)
            if category is None:
                raise ContentNotFoundError(f"Category {category_id} not found")
            return category

    def list_categories(self) -> list[Category]:
        with self.session_factory() as session:
            return list(session.scalars(select(Category).order_by(Category.id)))

    def post_category_ids(self, post_id: int) -> list[int]:
        with self.session_factory() as session:
            post = session.get(Post, post_id)
            if post is None:
                raise ContentNotFoundError(f"Post {post_id} not found")
            return sorted(c.id for c in post.categories)

    # ----------------------------------------------------------------- writes

    def create_category(self, name: str, slug: str) -> Category:
        with self.session_factory() as session:
            category = Category(name=name, slug=slug)
            session.add(category)
            session.commit()
        logger.info("Created category {} ({})", category.id, slug)
        self._publish(WriteEvent.category_edit())
        return category

    def rename_category(self, category_id: int, name: str) -> Category:
        with self.session_factory() as session:
            category = session.get(Category, category_id)
            if category is None:
                raise ContentNotFoundError(f"Category {category_id} not found")
            category.name = name
            session.commit()
        self._publish(WriteEvent.category_edit())
        return category

    def delete_category(self, category_id: int) -> None:
        with self.session_factory() as session:
            category = session.get(Category, category_id)
            if category is None:
                raise ContentNotFoundError(f"Category {category_id} not found")
            session.delete(category)
            session.commit()
        logger.info("Deleted category {}", category_id)
        self._publish(WriteEvent.category_edit())

    def save_post(
        self,
        title: str,
        status: str = POST_STATUS_PUBLISHED,
        category_ids: Sequence[int] = (),
        post_id: Optional[int] = None,
        is_autosave: bool = False,
    ) -> Post:
        """Insert or update a post and replace its category assignments.

        Raises:
            ValueError: unknown status.
            ContentNotFoundError: ``post_id`` or a category id does not exist.
        """
        if status not in POST_STATUSES:
            raise ValueError(f"Unknown post status: {status!r}")

        with self.session_factory() as session:
            if post_id is None:
                post = Post(title=title, status=status)
                session.add(post)
            else:
                post = session.get(Post, post_id)
                if post is None:
                    raise ContentNotFoundError(f"Post {post_id} not found")
                post.title = title
                post.status = status
            post.categories = self._load_categories(session, category_ids)
            session.commit()

        logger.debug("Saved post {} (status={}, autosave={})", post.id, status, is_autosave)
        self._publish(WriteEvent.record_save(is_autosave=is_autosave))
        return post

    # -------------------------------------------------------------- internals

    @staticmethod
    def _load_categories(session: Session, category_ids: Iterable[int]) -> list[Category]:
        wanted = sorted(set(category_ids))
        if not wanted:
            return []
        found = list(session.scalars(select(Category).where(Category.id.in_(wanted))))
        missing = set(wanted) - {c.id for c in found}
        if missing:
            raise ContentNotFoundError(f"Categories not found: {sorted(missing)}")
        return found

    def _publish(self, event: WriteEvent) -> None:
        if self.events is not None:
            self.events.publish(event)
