from fastapi import APIRouter

from . import cache
from . import categories
from . import health

api_router = APIRouter()

api_router.include_router(categories.router)
api_router.include_router(cache.router)
api_router.include_router(health.router)
