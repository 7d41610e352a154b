"""Content store database models."""

from datetime import datetime, timezone

from sqlalchemy import Column, ForeignKey, String, Table
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


POST_STATUS_PUBLISHED = "published"
POST_STATUS_DRAFT = "draft"
POST_STATUSES = (POST_STATUS_PUBLISHED, POST_STATUS_DRAFT)


post_categories = Table(
    "post_categories",
    Base.metadata,
    Column("post_id", ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class Category(Base):
    """Model for categories table."""
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=_utcnow, onupdate=_utcnow)

    posts: Mapped[list["Post"]] = relationship(
        "Post", secondary=post_categories, back_populates="categories"
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, slug='{self.slug}')>"


class Post(Base):
    """Model for posts table.

    Only posts with status 'published' count towards the categories a
    site is considered to use.
    """
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=POST_STATUS_DRAFT)  # 'published', 'draft'
    created_at: Mapped[datetime] = mapped_column(default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=_utcnow, onupdate=_utcnow)

    categories: Mapped[list["Category"]] = relationship(
        "Category", secondary=post_categories, back_populates="posts"
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, status='{self.status}')>"
