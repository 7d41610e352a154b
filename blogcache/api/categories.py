"""Category and post endpoints.

Writes go through the content store, which publishes write events; the
category cache is invalidated before the response is sent.
"""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from blogcache.categorized import CategorizedBlog
from blogcache.database import POST_STATUS_PUBLISHED, ContentNotFoundError, SqlContentStore
from blogcache.logging_config import get_logger

from .dependencies import get_categorized, get_store

logger = get_logger(name=__name__)

router = APIRouter(prefix="/v2", tags=["Categories"])


class CategorizedResponse(BaseModel):
    categorized: bool
    preview: bool
    category_count: int  # capped at 2


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    slug: str = Field(min_length=1, max_length=200, pattern=r"^[a-z0-9][a-z0-9\-]*$")


class CategoryRename(BaseModel):
    name: str = Field(min_length=1, max_length=200)


class CategoryOut(BaseModel):
    id: int
    name: str
    slug: str


class PostSave(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    status: Literal["published", "draft"] = POST_STATUS_PUBLISHED
    category_ids: list[int] = Field(default_factory=list)
    is_autosave: bool = False


class PostOut(BaseModel):
    id: int
    title: str
    status: str
    category_ids: list[int]


@router.get("/categories/categorized", response_model=CategorizedResponse)
def get_categorized_status(
    preview: bool = Query(default=False, description="Render is a preview of unsaved changes"),
    categorized: CategorizedBlog = Depends(get_categorized),
):
    """Whether category links should be shown next to posts."""
    return CategorizedResponse(
        categorized=categorized.is_categorized(preview=preview),
        preview=preview,
        category_count=categorized.category_count(),
    )


@router.get("/categories", response_model=list[CategoryOut])
def list_categories(store: SqlContentStore = Depends(get_store)):
    return [CategoryOut(id=c.id, name=c.name, slug=c.slug) for c in store.list_categories()]


@router.post("/categories", response_model=CategoryOut, status_code=201)
def create_category(body: CategoryCreate, store: SqlContentStore = Depends(get_store)):
    category = store.create_category(name=body.name, slug=body.slug)
    return CategoryOut(id=category.id, name=category.name, slug=category.slug)


@router.patch("/categories/{category_id}", response_model=CategoryOut)
def rename_category(
    category_id: int,
    body: CategoryRename,
    store: SqlContentStore = Depends(get_store),
):
    try:
        category = store.rename_category(category_id, body.name)
    except ContentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return CategoryOut(id=category.id, name=category.name, slug=category.slug)


@router.delete("/categories/{category_id}", status_code=204)
def delete_category(category_id: int, store: SqlContentStore = Depends(get_store)):
    try:
        store.delete_category(category_id)
    except ContentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/posts", response_model=PostOut, status_code=201)
def create_post(body: PostSave, store: SqlContentStore = Depends(get_store)):
    return _save_post(store, body, post_id=None)


@router.put("/posts/{post_id}", response_model=PostOut)
def update_post(post_id: int, body: PostSave, store: SqlContentStore = Depends(get_store)):
    return _save_post(store, body, post_id=post_id)


def _save_post(store: SqlContentStore, body: PostSave, post_id: int | None) -> PostOut:
    try:
        post = store.save_post(
            title=body.title,
            status=body.status,
            category_ids=body.category_ids,
            post_id=post_id,
            is_autosave=body.is_autosave,
        )
    except ContentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return PostOut(
        id=post.id,
        title=post.title,
        status=post.status,
        category_ids=store.post_category_ids(post.id),
    )
