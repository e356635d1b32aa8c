# src/sense_stage/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .feed import router as feed_router
from .media import router as media_router
from .profiles import router as profiles_router
from .publications import router as publications_router
from .search import router as search_router

__all__ = [
    "comments_router",
    "feed_router",
    "media_router",
    "profiles_router",
    "publications_router",
    "search_router",
]
