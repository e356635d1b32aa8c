# src/sense_stage/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    feed_router,
    media_router,
    profiles_router,
    publications_router,
    search_router,
)

__all__ = [
    "comments_router",
    "feed_router",
    "media_router",
    "profiles_router",
    "publications_router",
    "search_router",
]
