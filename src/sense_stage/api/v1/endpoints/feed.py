# src/sense_stage/api/v1/endpoints/feed.py
"""Feed endpoints for the Sense API."""

from fastapi import APIRouter

from sense_stage.schemas.common import Page
from sense_stage.schemas.publication import PublicationResponse, SavedPublicationResponse
from sense_stage.services.feed_service import FeedService
from sense_stage.services.pagination import PageResult

from ..dependencies import (
    CurrentUserIdDep,
    FiltersDep,
    LimitQuery,
    OffsetQuery,
    SessionDep,
    ViewerIdDep,
)

router = APIRouter(prefix="/feed", tags=["feed"])


def _to_page(page: PageResult, schema: type[PublicationResponse]) -> Page:
    return Page[schema](  # type: ignore[valid-type]
        items=[schema.from_view(view) for view in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("", response_model=Page[PublicationResponse])
def get_feed(
    db: SessionDep,
    viewer_id: ViewerIdDep,
    filters: FiltersDep,
    limit: LimitQuery = None,
    offset: OffsetQuery = None,
) -> Page:
    """Global feed, newest first, filtered to what the caller may see."""
    page = FeedService(db).get_feed(viewer_id, filters, limit, offset)
    return _to_page(page, PublicationResponse)


@router.get("/me", response_model=Page[PublicationResponse])
def get_my_publications(
    db: SessionDep,
    user_id: CurrentUserIdDep,
    filters: FiltersDep,
    limit: LimitQuery = None,
    offset: OffsetQuery = None,
) -> Page:
    """The caller's own publications, private ones included."""
    page = FeedService(db).get_author_timeline(user_id, user_id, filters, limit, offset)
    return _to_page(page, PublicationResponse)


@router.get("/me/saved", response_model=Page[SavedPublicationResponse])
def get_saved(
    db: SessionDep,
    user_id: CurrentUserIdDep,
    filters: FiltersDep,
    limit: LimitQuery = None,
    offset: OffsetQuery = None,
) -> Page:
    """The caller's saved publications, most recently saved first."""
    page = FeedService(db).get_saved(user_id, filters, limit, offset)
    return _to_page(page, SavedPublicationResponse)


@router.get("/user/{user_id}", response_model=Page[PublicationResponse])
def get_author_timeline(
    user_id: str,
    db: SessionDep,
    viewer_id: ViewerIdDep,
    filters: FiltersDep,
    limit: LimitQuery = None,
    offset: OffsetQuery = None,
) -> Page:
    """One author's publications as the caller may see them."""
    page = FeedService(db).get_author_timeline(user_id, viewer_id, filters, limit, offset)
    return _to_page(page, PublicationResponse)
